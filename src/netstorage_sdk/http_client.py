"""
High-level NetStorage client

This module exposes one method per storage operation. Each method builds the
matching action, picks the operation's fixed HTTP verb and runs it through a
RequestExecutor. Operations returning data hand back a ResponseStream; the
others drain the response and return True.
"""

import logging
import os
from datetime import datetime, timezone
from typing import BinaryIO, Mapping, Optional, Union
from urllib.parse import quote

import requests

from .config import NetStorageConfig
from .exceptions import ValidationError
from .signing import builders
from .signing.action import Action
from .signing.types import Credential, HashAlgorithm, HttpMethod
from .signing.utils import compute_hash, read_to_end
from .transport import RequestExecutor, ResponseStream

logger = logging.getLogger(__name__)

DEFAULT_FORMAT = "xml"

# index-zip is only honoured for archives
INDEX_ZIP_SUFFIX = ".zip"


class NetStorageClient:
    """
    Client for the NetStorage CMS v3.5 API.

    Every call makes exactly one signed request; nothing is retried and no
    connection is reused unless a session is supplied.
    """

    def __init__(
        self,
        credential: Credential,
        config: Optional[NetStorageConfig] = None,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize the client.

        Args:
            credential: Hostname, username and key used to sign requests
            config: Connection settings (defaults derived from the credential)
            session: Optional requests session shared by all calls
        """
        if not isinstance(credential, Credential):
            raise ValidationError("credential must be a Credential instance")

        self.credential = credential
        self.config = config or NetStorageConfig(hostname=credential.hostname)
        self.session = session

        logger.info(f"Initialized NetStorage client for host: {self.config.hostname}")

    def build_url(self, path: str) -> str:
        """
        Absolute URL for a storage path.

        The path is made absolute and percent-encoded; the encoded form is
        both sent and signed.
        """
        if not path.startswith("/"):
            path = "/" + path
        return f"{self.config.scheme}://{self.config.hostname}{quote(path, safe='/')}"

    def execute(
        self,
        method: Union[HttpMethod, str],
        path: str,
        action: Action,
        upload_stream: Optional[BinaryIO] = None,
        size: Optional[int] = None
    ) -> ResponseStream:
        """
        Run an arbitrary action against a path.

        Args:
            method: HTTP verb
            path: Storage path (e.g. ``/1234/example.jpg``)
            action: Action to sign
            upload_stream: Optional body source
            size: Body size when known

        Returns:
            ResponseStream: Response body, owned by the caller
        """
        executor = RequestExecutor(
            method,
            self.build_url(path),
            action,
            upload_stream=upload_stream,
            upload_size=size if size is not None and size > 0 else -1,
            sign_version=self.config.sign_version,
            connect_timeout=self.config.connect_timeout,
            read_timeout=self.config.read_timeout,
            session=self.session,
        )
        return executor.execute(self.credential)

    def _execute_and_drain(self, method: HttpMethod, path: str, action: Action, **kwargs) -> bool:
        with self.execute(method, path, action, **kwargs) as stream:
            read_to_end(stream)
        return True

    def delete(self, path: str) -> bool:
        return self._execute_and_drain(HttpMethod.POST, path, builders.delete())

    def dir(self, path: str, format: str = DEFAULT_FORMAT) -> ResponseStream:
        """List a directory; the listing is returned as a stream."""
        return self.execute(HttpMethod.GET, path, builders.dir_(format))

    def download(self, path: str) -> ResponseStream:
        return self.execute(HttpMethod.GET, path, builders.download())

    def du(self, path: str, format: str = DEFAULT_FORMAT) -> ResponseStream:
        """Disk usage (file count and bytes) below a path."""
        return self.execute(HttpMethod.GET, path, builders.du(format))

    def mkdir(self, path: str) -> bool:
        return self._execute_and_drain(HttpMethod.PUT, path, builders.mkdir())

    def mtime(self, path: str, mtime: Optional[Union[datetime, int, float]] = None) -> bool:
        """Set the modification time of a file (defaults to now)."""
        if mtime is None:
            mtime = datetime.now(timezone.utc)
        return self._execute_and_drain(HttpMethod.PUT, path, builders.mtime(mtime))

    def rename(self, original_path: str, new_path: str) -> bool:
        return self._execute_and_drain(HttpMethod.PUT, original_path, builders.rename(new_path))

    def rmdir(self, path: str) -> bool:
        return self._execute_and_drain(HttpMethod.POST, path, builders.rmdir())

    def stat(self, path: str, format: str = DEFAULT_FORMAT) -> ResponseStream:
        return self.execute(HttpMethod.GET, path, builders.stat(format))

    def symlink(self, path: str, target: str) -> bool:
        return self._execute_and_drain(HttpMethod.PUT, path, builders.symlink(target))

    def quick_delete(self, path: str) -> bool:
        """Recursively delete a directory tree (must be enabled for the account)."""
        return self._execute_and_drain(HttpMethod.PUT, path, builders.quick_delete())

    def setmd(self, path: str, additional_params: Mapping[str, str]) -> bool:
        return self._execute_and_drain(HttpMethod.PUT, path, builders.setmd(additional_params))

    def upload(
        self,
        path: str,
        upload_stream: BinaryIO,
        additional_params: Optional[Mapping[str, str]] = None,
        mtime: Optional[Union[datetime, int, float]] = None,
        size: Optional[int] = None,
        md5: Optional[bytes] = None,
        sha1: Optional[bytes] = None,
        sha256: Optional[bytes] = None,
        index_zip: bool = False
    ) -> bool:
        """
        Upload a stream to a path.

        Args:
            path: Destination path
            upload_stream: Body source (closed once fully sent)
            additional_params: Extra action parameters
            mtime: Modification time to record
            size: Body size; declares a fixed-length body when positive
            md5: Expected MD5 of the content
            sha1: Expected SHA-1 of the content
            sha256: Expected SHA-256 of the content
            index_zip: Index the archive after upload (``.zip`` paths only)

        Returns:
            bool: True once the upload was accepted
        """
        if index_zip and not path.endswith(INDEX_ZIP_SUFFIX):
            logger.warning(f"Ignoring index-zip for non-zip destination: {path}")
            index_zip = False

        action = (builders.upload()
                  .with_additional_params(additional_params)
                  .with_mtime(mtime)
                  .of_size(size)
                  .with_md5(md5)
                  .with_sha1(sha1)
                  .with_sha256(sha256)
                  .with_index_zip(index_zip))

        return self._execute_and_drain(HttpMethod.PUT, path, action, upload_stream=upload_stream, size=size)

    def upload_file(
        self,
        path: str,
        src_file: str,
        additional_params: Optional[Mapping[str, str]] = None,
        index_zip: bool = False
    ) -> bool:
        """
        Upload a local file with its SHA-256 checksum, size and mtime.

        Raises:
            FileNotFoundError: If the source file does not exist
        """
        if not os.path.isfile(src_file):
            raise FileNotFoundError(f"Src file is not accessible {src_file}")

        mtime = datetime.fromtimestamp(os.path.getmtime(src_file), tz=timezone.utc)
        size = os.path.getsize(src_file)
        with open(src_file, "rb") as f:
            checksum = compute_hash(f, HashAlgorithm.SHA256)

        logger.debug(f"Uploading {src_file} ({size} bytes) to {path}")

        with open(src_file, "rb") as f:
            return self.upload(
                path, f,
                additional_params=additional_params,
                mtime=mtime,
                size=size,
                sha256=checksum,
                index_zip=index_zip
            )


def create_client(
    hostname: str,
    username: str,
    key: str,
    use_ssl: bool = False,
    **config_kwargs
) -> NetStorageClient:
    """
    Create a NetStorage client from plain settings.

    Args:
        hostname: Storage hostname
        username: Upload account name
        key: Secret key
        use_ssl: Use HTTPS instead of HTTP
        **config_kwargs: Extra NetStorageConfig fields (timeouts, sign_version)

    Returns:
        NetStorageClient: Configured client
    """
    credential = Credential(hostname=hostname, username=username, key=key)
    config = NetStorageConfig(hostname=hostname, use_ssl=use_ssl, **config_kwargs)
    return NetStorageClient(credential, config)
