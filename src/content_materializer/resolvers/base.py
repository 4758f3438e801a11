"""
Content resolution capability.

A resolver turns an opaque content reference into the two things the
materializer needs: a best-effort MIME type and a readable byte stream.
Resolvers are selected by URI scheme through ``SchemeContentResolver``.
"""

import logging
from abc import ABC, abstractmethod
from typing import BinaryIO, Dict, Optional
from urllib.parse import urlparse

logger = logging.getLogger(__name__)


def reference_scheme(reference: str) -> str:
    """
    Return the lower-cased URI scheme of a reference.

    Bare filesystem paths (including Windows drive paths such as
    ``C:\\music\\a.mp3``) are reported as ``file``.
    """
    scheme = urlparse(reference).scheme.lower()
    if len(scheme) <= 1:
        return "file"
    return scheme


class ContentResolver(ABC):
    """
    Abstract base class for content resolvers.

    Subclasses must implement:
        - ``get_mime_type()`` -- MIME type of the referenced content, or None
        - ``open_input_stream()`` -- readable binary stream, or None

    ``open_input_stream()`` signals an unavailable source either by
    returning None or by raising ``OSError``. The returned object needs
    ``read(size)`` and ``close()``; the caller owns it and closes it.

    Example:
        >>> class StaticResolver(ContentResolver):
        ...     def get_mime_type(self, reference):
        ...         return "audio/mpeg"
        ...     def open_input_stream(self, reference):
        ...         return io.BytesIO(b"...")
    """

    @abstractmethod
    def get_mime_type(self, reference: str) -> Optional[str]:
        """
        Resolve the MIME type of the referenced content.

        Args:
            reference: Content reference

        Returns:
            MIME type string, or None if unknown
        """

    @abstractmethod
    def open_input_stream(self, reference: str) -> Optional[BinaryIO]:
        """
        Open the referenced content for reading.

        Args:
            reference: Content reference

        Returns:
            Readable binary stream, or None if the source cannot be opened

        Raises:
            OSError: If the source exists but cannot be opened
        """


class SchemeContentResolver(ContentResolver):
    """
    Dispatches to a child resolver based on the reference's URI scheme.

    References with a scheme that has no registered resolver have an
    unknown MIME type and cannot be opened.

    Attributes:
        resolvers: Mapping of lower-cased scheme to resolver
    """

    def __init__(self, resolvers: Optional[Dict[str, ContentResolver]] = None) -> None:
        self.resolvers: Dict[str, ContentResolver] = {
            scheme.lower(): resolver
            for scheme, resolver in (resolvers or {}).items()
        }

    def register(self, scheme: str, resolver: ContentResolver) -> None:
        """Register (or replace) the resolver for ``scheme``."""
        self.resolvers[scheme.lower()] = resolver

    def resolver_for(self, reference: str) -> Optional[ContentResolver]:
        scheme = reference_scheme(reference)
        resolver = self.resolvers.get(scheme)
        if resolver is None:
            logger.warning("No resolver registered for scheme '%s'", scheme)
        return resolver

    def get_mime_type(self, reference: str) -> Optional[str]:
        resolver = self.resolver_for(reference)
        if resolver is None:
            return None
        return resolver.get_mime_type(reference)

    def open_input_stream(self, reference: str) -> Optional[BinaryIO]:
        resolver = self.resolver_for(reference)
        if resolver is None:
            return None
        return resolver.open_input_stream(reference)
