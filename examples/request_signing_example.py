#!/usr/bin/env python3
"""
NetStorage Python SDK - Request Signing Example

This example shows how an action is serialized into the action header and
signed with the CMS v3.5 keyed-hash scheme, and how the same action is sent
through the high-level client.
"""

import os
import sys

# Add src to path for development
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from netstorage_sdk import (
    # Action model
    builders,
    serialize_action,
    # Request signing
    CMSRequestSigner,
    Credential,
    SignVersion,
    # Client
    NetStorageConfig,
    NetStorageClient,
    NetStorageSDKError,
)


def signing_example():
    """Sign a download request with fixed time and nonce."""
    print("=== Request Signing Example ===")

    credential = Credential("www.example.com", "user1", "secret1")
    action = builders.download()

    signer = CMSRequestSigner(
        SignVersion.HMAC_SHA256,
        nonce_generator=lambda: 1234,
        timestamp_generator=lambda: 1384128000
    )
    headers = signer.compute_headers(action, credential, "/foobar")

    for name, value in headers.as_dict().items():
        print(f"   {name}: {value}")


def action_example():
    """Serialize an upload action with checksums."""
    print("\n=== Action Serialization Example ===")

    action = (builders.upload()
              .with_mtime(1384128000)
              .of_size(73)
              .with_md5(b"\x00")
              .with_sha1(b"\x01")
              .with_sha256(b"\x02"))
    print(f"   {serialize_action(action)}")


def client_example():
    """List a directory when NETSTORAGE_* variables are set."""
    print("\n=== Client Example ===")

    if "NETSTORAGE_HOST" not in os.environ:
        print("   Set NETSTORAGE_HOST, NETSTORAGE_USER and NETSTORAGE_KEY to run against a real host")
        return

    try:
        config = NetStorageConfig.from_env()
        credential = Credential(config.hostname, os.environ["NETSTORAGE_USER"], os.environ["NETSTORAGE_KEY"])
        client = NetStorageClient(credential, config)

        with client.dir(os.environ.get("NETSTORAGE_PATH", "/")) as listing:
            print(listing.read().decode("utf-8"))
    except (KeyError, NetStorageSDKError) as e:
        print(f"   Failed: {e}")


if __name__ == "__main__":
    signing_example()
    action_example()
    client_example()
