#!/usr/bin/env python3
"""
NetStorage Python SDK
Request signing and transport for the NetStorage CMS v3.5 API
"""

import re

from setuptools import setup, find_packages

# Single source for the version; it is also sent in the X-Akamai-NSKit header
with open("src/netstorage_sdk/version.py", "r", encoding="utf-8") as fh:
    version = re.search(r'^__version__ = "([^"]+)"', fh.read(), re.M).group(1)

# Read the README file for long description
with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

# Read requirements from requirements.txt
with open("requirements.txt", "r", encoding="utf-8") as fh:
    requirements = [line.strip() for line in fh if line.strip() and not line.startswith("#")]

# Read development requirements
with open("requirements-dev.txt", "r", encoding="utf-8") as fh:
    dev_requirements = [line.strip() for line in fh if line.strip() and not line.startswith("#")]

setup(
    name="netstorage-python-sdk",
    version=version,
    author="NetStorage SDK Maintainers",
    description="Request signing and streaming transport for the NetStorage CMS v3.5 API",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: Apache Software License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Internet :: WWW/HTTP",
        "Topic :: Software Development :: Libraries :: Python Modules",
    ],
    python_requires=">=3.8",
    install_requires=requirements,
    extras_require={
        "dev": dev_requirements,
        "test": ["pytest>=7.0.0", "pytest-cov>=4.0.0"],
    },
    keywords=[
        "netstorage",
        "akamai",
        "cms",
        "hmac",
        "request-signing",
        "object-storage",
    ],
    include_package_data=True,
    entry_points={
        "console_scripts": [
            "netstorage-cms=netstorage_sdk.cli:main",
        ],
    },
)
