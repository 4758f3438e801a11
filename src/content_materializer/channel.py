"""
Method-channel bridge for the host UI layer.

The UI layer talks to the host over a named channel: each call carries a
method name and an argument map and gets back exactly one result, which
is either a success value, an error (code, message, details) or "not
implemented". This module serves the ``copyContentToCache`` method,
which materializes a content URI into the host's cache directory.

Example:
    >>> channel = ContentResolverChannel(cache_dir="/data/app/cache")
    >>> result = channel.handle("copyContentToCache", {"uri": "file:///a.mp3"})
    >>> result.status
    'success'
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Union

from content_materializer.errors import MaterializeError
from content_materializer.materializer import ContentMaterializer

logger = logging.getLogger(__name__)

CHANNEL_NAME = "com.chowdhuryelab.jamsync/content_resolver"

METHOD_COPY_CONTENT_TO_CACHE = "copyContentToCache"

ERROR_INVALID_ARGUMENT = "INVALID_ARGUMENT"
ERROR_COPY = "COPY_ERROR"

STATUS_SUCCESS = "success"
STATUS_ERROR = "error"
STATUS_NOT_IMPLEMENTED = "not_implemented"


@dataclass
class ChannelResult:
    """
    Outcome of a single method-channel call.

    Attributes:
        status: One of "success", "error", "not_implemented"
        value: Success payload
        error_code: Error code for error results
        error_message: Human-readable error message
        error_details: Extra diagnostic detail for error results
    """

    status: str
    value: Any = None
    error_code: Optional[str] = None
    error_message: Optional[str] = None
    error_details: Optional[str] = None

    @classmethod
    def success(cls, value: Any) -> "ChannelResult":
        return cls(status=STATUS_SUCCESS, value=value)

    @classmethod
    def error(
        cls,
        code: str,
        message: str,
        details: Optional[str] = None,
    ) -> "ChannelResult":
        return cls(
            status=STATUS_ERROR,
            error_code=code,
            error_message=message,
            error_details=details,
        )

    @classmethod
    def not_implemented(cls) -> "ChannelResult":
        return cls(status=STATUS_NOT_IMPLEMENTED)

    @property
    def is_success(self) -> bool:
        return self.status == STATUS_SUCCESS

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        if self.status == STATUS_SUCCESS:
            return {"status": self.status, "value": self.value}
        if self.status == STATUS_ERROR:
            return {
                "status": self.status,
                "code": self.error_code,
                "message": self.error_message,
                "details": self.error_details,
            }
        return {"status": self.status}

    def to_json(self, indent: int = 2) -> str:
        """Serialize to JSON string."""
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)


class ContentResolverChannel:
    """
    Handler for calls arriving on the content resolver channel.

    Attributes:
        cache_dir: Host cache directory that receives materialized files
        materializer: Materializer used for copy calls
    """

    name = CHANNEL_NAME

    def __init__(
        self,
        cache_dir: Union[str, Path],
        materializer: Optional[ContentMaterializer] = None,
    ) -> None:
        self.cache_dir = cache_dir
        self.materializer = materializer or ContentMaterializer()
        self._handlers: Dict[str, Callable[[Dict[str, Any]], ChannelResult]] = {
            METHOD_COPY_CONTENT_TO_CACHE: self._copy_content_to_cache,
        }

    def handle(
        self,
        method: str,
        arguments: Optional[Dict[str, Any]] = None,
    ) -> ChannelResult:
        """
        Dispatch a method call.

        Args:
            method: Method name
            arguments: Argument map sent with the call

        Returns:
            ChannelResult for the call; unknown methods are not implemented
        """
        handler = self._handlers.get(method)
        if handler is None:
            logger.debug("Method %s not implemented on %s", method, self.name)
            return ChannelResult.not_implemented()
        return handler(arguments or {})

    def _copy_content_to_cache(self, arguments: Dict[str, Any]) -> ChannelResult:
        uri = arguments.get("uri")
        if uri is None:
            return ChannelResult.error(ERROR_INVALID_ARGUMENT, "URI is required")

        try:
            cached_path = self.materializer.materialize(uri, self.cache_dir)
        except MaterializeError as exc:
            logger.warning("copyContentToCache failed for %s: %s", uri, exc)
            return ChannelResult.error(
                ERROR_COPY,
                f"Failed to copy content URI: {exc}",
                repr(exc),
            )
        except Exception as exc:
            logger.exception("Unexpected error in copyContentToCache for %s", uri)
            return ChannelResult.error(
                ERROR_COPY,
                f"Failed to copy content URI: {exc}",
                repr(exc),
            )

        return ChannelResult.success(cached_path)
