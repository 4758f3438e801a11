"""
Resolver for local files.

Handles ``file://`` URIs and bare filesystem paths. MIME types are
guessed from the filename extension with a private ``mimetypes`` table
that has the audio types of the extension table registered, so the
guess does not depend on the platform's mime.types files.
"""

import logging
import mimetypes
from pathlib import Path
from typing import BinaryIO, Optional
from urllib.parse import urlparse
from urllib.request import url2pathname

from content_materializer.config import Config
from content_materializer.resolvers.base import ContentResolver, reference_scheme

logger = logging.getLogger(__name__)


_AUDIO_TYPES = {
    ".mp3": "audio/mpeg",
    ".m4a": "audio/mp4",
    ".ogg": "audio/ogg",
    ".wav": "audio/wav",
    ".flac": "audio/flac",
}


def _build_guesser() -> mimetypes.MimeTypes:
    guesser = mimetypes.MimeTypes()
    for extension, mime_type in _AUDIO_TYPES.items():
        guesser.add_type(mime_type, extension)
    return guesser


_GUESSER = _build_guesser()


def reference_to_path(reference: str) -> Path:
    """
    Convert a ``file://`` URI or bare path into a local ``Path``.

    Args:
        reference: ``file://`` URI or filesystem path

    Returns:
        Local filesystem path

    Raises:
        ValueError: If the reference uses a scheme other than ``file``
    """
    scheme = reference_scheme(reference)
    if scheme != "file":
        raise ValueError(f"Not a local file reference: {reference}")
    parsed = urlparse(reference)
    if parsed.scheme.lower() == "file":
        return Path(url2pathname(parsed.path))
    return Path(reference)


class LocalFileResolver(ContentResolver):
    """Resolves ``file://`` URIs and bare paths on the local disk."""

    def __init__(self, config: Optional[Config] = None) -> None:
        self.config = config

    def get_mime_type(self, reference: str) -> Optional[str]:
        try:
            path = reference_to_path(reference)
        except ValueError as exc:
            logger.warning("Cannot resolve MIME type: %s", exc)
            return None
        mime_type, _ = _GUESSER.guess_type(path.name, strict=False)
        logger.debug("Guessed MIME type %s for %s", mime_type, path)
        return mime_type

    def open_input_stream(self, reference: str) -> Optional[BinaryIO]:
        try:
            path = reference_to_path(reference)
        except ValueError as exc:
            logger.warning("Cannot open reference: %s", exc)
            return None
        if not path.is_file():
            logger.debug("No readable file at %s", path)
            return None
        return open(path, "rb")
