"""
Resolver for ``http://`` and ``https://`` references.

The MIME type comes from the ``Content-Type`` header of a ``HEAD``
request, or of a streaming ``GET`` when the server rejects ``HEAD``; content is streamed from a ``GET`` request so large files are
never held in memory. Requests go through a session with retry logic on
transient server errors.

``requests.exceptions.RequestException`` is an ``OSError`` subclass, so
connection and HTTP status failures while opening surface to the
materializer as an unavailable source, and failures mid-stream surface
as copy failures.
"""

import logging
from typing import Optional, Tuple

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from content_materializer.config import Config
from content_materializer.resolvers.base import ContentResolver

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT: Tuple[float, float] = (10.0, 300.0)
STREAM_CHUNK_SIZE = 64 * 1024


def create_session() -> requests.Session:
    """Create a requests session with retry logic for idempotent requests."""
    session = requests.Session()

    retries = Retry(
        total=3,
        backoff_factor=1,
        status_forcelist=[500, 502, 503, 504],
        allowed_methods=["HEAD", "GET"],
    )

    adapter = HTTPAdapter(max_retries=retries)
    session.mount("http://", adapter)
    session.mount("https://", adapter)

    return session


class ResponseStream:
    """
    File-like reader over a streaming ``requests`` response.

    Exposes ``read(size)`` and ``close()``; closing releases the
    underlying connection.
    """

    def __init__(self, response: requests.Response, chunk_size: int = STREAM_CHUNK_SIZE) -> None:
        self._response = response
        self._chunks = response.iter_content(chunk_size=chunk_size)
        self._buffer = b""

    def read(self, size: int = -1) -> bytes:
        if size is None or size < 0:
            data = self._buffer + b"".join(self._chunks)
            self._buffer = b""
            return data

        # At most one chunk per call; buffered bytes are returned before the
        # next chunk is fetched.
        while not self._buffer:
            chunk = next(self._chunks, None)
            if chunk is None:
                break
            self._buffer = chunk

        data, self._buffer = self._buffer[:size], self._buffer[size:]
        return data

    def close(self) -> None:
        self._response.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


class HttpContentResolver(ContentResolver):
    """
    Resolves remote references over HTTP(S).

    Attributes:
        timeout: (connect, read) timeout in seconds
        session: requests session used for all calls
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.timeout = config.http_timeout if config is not None else DEFAULT_TIMEOUT
        self.chunk_size = config.chunk_size if config is not None else STREAM_CHUNK_SIZE
        self.session = session or create_session()

    def get_mime_type(self, reference: str) -> Optional[str]:
        """
        Content-Type from a HEAD request, falling back to the headers of a
        streaming GET when HEAD is rejected (e.g. 405) or carries no type.
        The GET body is never read.
        """
        mime_type = self._head_content_type(reference)
        if mime_type is None:
            mime_type = self._get_content_type(reference)
        logger.debug("Server reported Content-Type %s for %s", mime_type, reference)
        return mime_type

    def _head_content_type(self, reference: str) -> Optional[str]:
        try:
            response = self.session.head(
                reference,
                allow_redirects=True,
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.exceptions.Timeout:
            logger.warning("HEAD request timed out for %s", reference)
            return None
        except requests.exceptions.RequestException as exc:
            logger.warning("HEAD request failed for %s: %s", reference, exc)
            return None

        return response.headers.get("Content-Type") or None

    def _get_content_type(self, reference: str) -> Optional[str]:
        try:
            response = self.session.get(reference, stream=True, timeout=self.timeout)
        except requests.exceptions.RequestException as exc:
            logger.warning("GET request failed for %s: %s", reference, exc)
            return None

        try:
            response.raise_for_status()
            return response.headers.get("Content-Type") or None
        except requests.exceptions.RequestException as exc:
            logger.warning("GET request failed for %s: %s", reference, exc)
            return None
        finally:
            response.close()

    def open_input_stream(self, reference: str) -> Optional[ResponseStream]:
        response = self.session.get(reference, stream=True, timeout=self.timeout)
        try:
            response.raise_for_status()
        except requests.exceptions.HTTPError:
            response.close()
            raise

        content_length = response.headers.get("Content-Length")
        if content_length:
            logger.debug("Streaming %s bytes from %s", content_length, reference)
        else:
            logger.debug("Content-Length header not available for %s", reference)

        return ResponseStream(response, chunk_size=self.chunk_size)
