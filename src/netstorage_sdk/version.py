"""Version information for NetStorage Python SDK"""

__version__ = "0.1.0"
