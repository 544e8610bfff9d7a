"""
Transport executor for signed storage API requests

This module issues one signed HTTP request per call: it attaches the CMS
headers, streams an optional upload body (fixed-length when the size is
known, chunked otherwise), validates the response status and hands the
response body back to the caller as a stream.
"""

import logging
import time
from email.utils import parsedate_to_datetime
from datetime import timezone
from enum import Enum
from typing import BinaryIO, Dict, Iterator, Optional, Union
from urllib.parse import urlsplit

import requests
from urllib3.exceptions import HTTPError as Urllib3HTTPError
from urllib3.exceptions import TimeoutError as Urllib3TimeoutError

from .config import DEFAULT_CONNECT_TIMEOUT, DEFAULT_READ_TIMEOUT
from .exceptions import (
    ClockSkewError,
    CommunicationError,
    CommunicationTimeoutError,
    ErrorCodes,
    NetStorageAPIError,
    ValidationError,
)
from .signing.action import Action
from .signing.cms_signer import CMSRequestSigner
from .signing.types import DEFAULT_SIGN_VERSION, Credential, HttpMethod, SignVersion
from .signing.utils import BUFFER_SIZE

logger = logging.getLogger(__name__)

# Chunk size declared for uploads of unknown length
CHUNK_SIZE = BUFFER_SIZE

# Maximum tolerated difference between local time and the server Date header
CLOCK_SKEW_TOLERANCE = 30

_BODY_METHODS = (HttpMethod.PUT, HttpMethod.POST)


class ExecutorState(str, Enum):
    """Lifecycle of a single request execution"""
    BUILT = "built"
    SIGNED = "signed"
    CONNECTED = "connected"
    STREAMING = "streaming"
    COMPLETED = "completed"
    FAILED = "failed"


def wrap_io_error(error: BaseException) -> CommunicationError:
    """
    Map a low-level I/O failure to the SDK communication error.

    Timeouts become CommunicationTimeoutError; everything else becomes
    CommunicationError. The original failure is kept as the cause.
    """
    if isinstance(error, (requests.Timeout, Urllib3TimeoutError, TimeoutError)):
        return CommunicationTimeoutError(cause=error, details={"original_error": str(error)})
    return CommunicationError(cause=error, details={"original_error": str(error)})


class UploadBody:
    """
    Streaming request body over a readable source.

    ``len()`` reports the declared size when it is known and positive, and 0
    otherwise; requests then declares a fixed Content-Length or falls back to
    chunked transfer encoding. Iteration reads the source in ``chunk_size``
    blocks until exhaustion and closes it afterwards.
    """

    def __init__(self, source: BinaryIO, size: int = -1, chunk_size: int = CHUNK_SIZE):
        self.source = source
        self.size = size if size is not None else -1
        self.chunk_size = chunk_size
        self.bytes_sent = 0

    @property
    def fixed_length(self) -> bool:
        return self.size > 0

    def __len__(self) -> int:
        return self.size if self.fixed_length else 0

    def __iter__(self) -> Iterator[bytes]:
        try:
            while True:
                try:
                    chunk = self.source.read(self.chunk_size)
                except ValueError as e:
                    # e.g. reading a closed file
                    logger.debug(f"Upload source failed after {self.bytes_sent} bytes: {e}")
                    raise OSError(f"Upload source is not readable: {e}") from e
                if not chunk:
                    break
                self.bytes_sent += len(chunk)
                yield chunk
        finally:
            close = getattr(self.source, "close", None)
            if close is not None:
                close()


class ResponseStream:
    """
    Caller-owned body of a successful response.

    The underlying connection stays open until the stream is closed; use it
    as a context manager so it is released on every exit path. Closing twice
    is a no-op and reading after close raises ValueError.
    """

    def __init__(self, response: requests.Response, session: Optional[requests.Session] = None):
        self._response = response
        self._session = session
        self._closed = False

    @property
    def response(self) -> requests.Response:
        return self._response

    @property
    def status_code(self) -> int:
        return self._response.status_code

    @property
    def headers(self):
        return self._response.headers

    @property
    def closed(self) -> bool:
        return self._closed

    def read(self, size: Optional[int] = -1) -> bytes:
        """
        Read up to ``size`` bytes, or everything left when size is negative.

        Raises:
            ValueError: If the stream is closed
            CommunicationError: On I/O failure while reading
        """
        self._check_open()
        try:
            if size is None or size < 0:
                return self._response.raw.read(decode_content=True)
            return self._response.raw.read(size, decode_content=True)
        except (requests.RequestException, Urllib3HTTPError, OSError) as e:
            raise wrap_io_error(e) from e

    def iter_chunks(self, chunk_size: int = BUFFER_SIZE) -> Iterator[bytes]:
        """Yield the body in chunks of at most ``chunk_size`` bytes."""
        self._check_open()
        try:
            for chunk in self._response.iter_content(chunk_size):
                yield chunk
        except (requests.RequestException, Urllib3HTTPError, OSError) as e:
            raise wrap_io_error(e) from e

    def __iter__(self) -> Iterator[bytes]:
        return self.iter_chunks()

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            self._response.close()
        finally:
            if self._session is not None:
                self._session.close()

    def __enter__(self) -> "ResponseStream":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def _check_open(self) -> None:
        if self._closed:
            raise ValueError("I/O operation on closed response stream")


class RequestExecutor:
    """
    Executes one signed storage API request.

    States move linearly from BUILT through SIGNED and CONNECTED (or
    STREAMING when a body is uploaded) to COMPLETED or FAILED. There are no
    retries: one execute call makes exactly one connection attempt.
    """

    def __init__(
        self,
        method: Union[HttpMethod, str],
        url: str,
        action: Action,
        upload_stream: Optional[BinaryIO] = None,
        upload_size: int = -1,
        sign_version: Union[SignVersion, int, str] = DEFAULT_SIGN_VERSION,
        connect_timeout: float = DEFAULT_CONNECT_TIMEOUT,
        read_timeout: float = DEFAULT_READ_TIMEOUT,
        session: Optional[requests.Session] = None,
        signer: Optional[CMSRequestSigner] = None
    ):
        """
        Initialize the executor.

        Args:
            method: HTTP verb (GET, HEAD, PUT or POST)
            url: Absolute request URL, path already URL-encoded
            action: Action to sign into the request headers
            upload_stream: Optional body source for PUT/POST
            upload_size: Body size in bytes, or -1 when unknown
            sign_version: Keyed hash strength used when no signer is given
            connect_timeout: Seconds to wait for the connection
            read_timeout: Seconds to wait between bytes of the response
            session: Optional requests session; a private one is created
                and closed with the response otherwise
            signer: Optional preconfigured signer

        Raises:
            ValidationError: If the method or URL is invalid
        """
        try:
            self.method = HttpMethod(method.upper() if isinstance(method, str) else method)
        except ValueError:
            raise ValidationError(f"Unsupported HTTP method: {method}", ErrorCodes.INVALID_PARAMETER)

        parsed = urlsplit(url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValidationError(f"Invalid request URL: {url}", ErrorCodes.INVALID_PARAMETER, {"url": url})

        # requests re-quotes the URL before sending; sign that form of the path
        self.url = requests.utils.requote_uri(url)
        self.url_path = urlsplit(self.url).path or "/"
        self.action = action
        self.upload_stream = upload_stream
        self.upload_size = upload_size if upload_size is not None else -1
        self.connect_timeout = connect_timeout
        self.read_timeout = read_timeout
        self.signer = signer or CMSRequestSigner(sign_version)
        self._session = session
        self.state = ExecutorState.BUILT

    def sign(self, credential: Credential) -> Dict[str, str]:
        """Compute fresh headers for this attempt."""
        headers = self.signer.compute_headers(self.action, credential, self.url_path).as_dict()
        self.state = ExecutorState.SIGNED
        return headers

    def validate(self, response: requests.Response) -> bool:
        """
        Check the response status.

        Returns:
            bool: True for HTTP 200

        Raises:
            ClockSkewError: Non-200 response whose Date header is more than
                30 seconds away from local time
            NetStorageAPIError: Any other non-200 response
        """
        if response.status_code == 200:
            return True

        skew = clock_skew(response.headers.get("Date"))
        if skew is not None and abs(skew) > CLOCK_SKEW_TOLERANCE:
            raise ClockSkewError(
                f"Local server Date is more than {CLOCK_SKEW_TOLERANCE}s out of sync with Remote server",
                http_status=response.status_code,
                skew_seconds=skew,
                details={"date": response.headers.get("Date")}
            )

        raise NetStorageAPIError(
            f"Unexpected Response from Server: {response.status_code} {response.reason}\n{dict(response.headers)}",
            http_status=response.status_code,
            reason=response.reason or "",
            headers=response.headers,
            details={"url": self.url, "action": self.action.action}
        )

    def execute(self, credential: Credential) -> ResponseStream:
        """
        Sign, send and validate the request.

        Args:
            credential: Signing credential

        Returns:
            ResponseStream: Response body, owned by the caller

        Raises:
            ClockSkewError: See validate
            NetStorageAPIError: See validate
            CommunicationError: On any I/O failure (CommunicationTimeoutError
                when a timeout expired)
        """
        if self.state != ExecutorState.BUILT:
            raise ValidationError(
                f"Request executor already used (state: {self.state.value})",
                ErrorCodes.INVALID_PARAMETER
            )

        owns_session = self._session is None
        session = requests.Session() if owns_session else self._session
        response = None

        try:
            headers = self.sign(credential)
            body = self._prepare_body()
            self.state = ExecutorState.CONNECTED if body is None else ExecutorState.STREAMING

            logger.debug(
                f"Sending {self.method.value} {self.url} "
                f"({self._describe_body(body)}, action '{self.action.action}')"
            )

            response = session.request(
                self.method.value,
                self.url,
                headers=headers,
                data=body,
                timeout=(self.connect_timeout, self.read_timeout),
                stream=True,
            )
            self.validate(response)

        except (ValidationError, ClockSkewError, NetStorageAPIError):
            self._fail(response, session if owns_session else None)
            raise
        except (requests.RequestException, Urllib3HTTPError, OSError) as e:
            logger.debug(f"Communication failure for {self.method.value} {self.url}: {e}")
            self._fail(response, session if owns_session else None)
            raise wrap_io_error(e) from e
        except Exception:
            self._fail(response, session if owns_session else None)
            raise

        self.state = ExecutorState.COMPLETED
        return ResponseStream(response, session if owns_session else None)

    def _prepare_body(self) -> Optional[UploadBody]:
        if self.method not in _BODY_METHODS or self.upload_stream is None:
            # requests declares Content-Length: 0 for PUT/POST without data
            return None
        return UploadBody(self.upload_stream, self.upload_size)

    @staticmethod
    def _describe_body(body: Optional[UploadBody]) -> str:
        if body is None:
            return "no body"
        if body.fixed_length:
            return f"fixed-length body of {body.size} bytes"
        return f"chunked body, {body.chunk_size} byte chunks"

    def _fail(self, response: Optional[requests.Response], session: Optional[requests.Session]) -> None:
        self.state = ExecutorState.FAILED
        release_response(response)
        if session is not None:
            session.close()


def release_response(response: Optional[requests.Response]) -> None:
    """
    Drain and close a response, best effort.

    Failures are logged and suppressed so they never hide the error that
    caused the release.
    """
    if response is None:
        return
    try:
        for _ in response.iter_content(BUFFER_SIZE):
            pass
    except (requests.RequestException, Urllib3HTTPError, OSError) as e:
        logger.warning(f"Failed to drain response: {e}")
    finally:
        try:
            response.close()
        except (requests.RequestException, Urllib3HTTPError, OSError) as e:
            logger.warning(f"Failed to close response: {e}")


def clock_skew(date_header: Optional[str], now: Optional[float] = None) -> Optional[float]:
    """
    Seconds the local clock is ahead of an HTTP Date header.

    Args:
        date_header: RFC 7231 date, e.g. ``Mon, 11 Nov 1918 11:00:00 GMT``
        now: Local Unix time (defaults to time.time())

    Returns:
        float: Local minus remote time, or None when the header is missing
        or unparseable
    """
    if not date_header:
        return None
    try:
        remote = parsedate_to_datetime(date_header)
    except (TypeError, ValueError, IndexError):
        logger.debug(f"Ignoring unparseable Date header: {date_header!r}")
        return None
    if remote is None:
        return None
    if remote.tzinfo is None:
        remote = remote.replace(tzinfo=timezone.utc)

    local = time.time() if now is None else now
    return local - remote.timestamp()
