"""
Fixed MIME type to filename extension table.

The table is shared with the host application and must stay exactly as
is: anything not listed, including an unknown type, maps to ``tmp``.
"""

from typing import Dict, Optional


FALLBACK_EXTENSION = "tmp"

MIME_EXTENSIONS: Dict[str, str] = {
    "audio/mpeg": "mp3",
    "audio/mp4": "m4a",
    "audio/mp4a-latm": "m4a",
    "audio/ogg": "ogg",
    "audio/wav": "wav",
    "audio/x-wav": "wav",
    "audio/flac": "flac",
}


def normalize_mime_type(mime_type: Optional[str]) -> Optional[str]:
    """
    Reduce a Content-Type style value to its bare, lower-cased media type.

    >>> normalize_mime_type("Audio/MPEG; charset=binary")
    'audio/mpeg'
    """
    if not mime_type:
        return None
    media_type = mime_type.split(";", 1)[0].strip().lower()
    return media_type or None


def extension_for_mime(mime_type: Optional[str]) -> str:
    """
    Map a MIME type to the short extension used for materialized files.

    Args:
        mime_type: MIME type reported by a resolver, or None if unknown

    Returns:
        Extension without the leading dot
    """
    media_type = normalize_mime_type(mime_type)
    if media_type is None:
        return FALLBACK_EXTENSION
    return MIME_EXTENSIONS.get(media_type, FALLBACK_EXTENSION)
