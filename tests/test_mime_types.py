"""
Tests for the MIME type to extension table.
"""

import pytest

from content_materializer.mime_types import (
    FALLBACK_EXTENSION,
    MIME_EXTENSIONS,
    extension_for_mime,
    normalize_mime_type,
)


class TestExtensionForMime:
    """Tests for extension_for_mime()."""

    def test_table_is_exact(self):
        """The table holds exactly the host application's entries."""
        assert MIME_EXTENSIONS == {
            "audio/mpeg": "mp3",
            "audio/mp4": "m4a",
            "audio/mp4a-latm": "m4a",
            "audio/ogg": "ogg",
            "audio/wav": "wav",
            "audio/x-wav": "wav",
            "audio/flac": "flac",
        }

    @pytest.mark.parametrize("mime_type", [None, "", "audio/aac", "video/mp4", "text/plain"])
    def test_fallback(self, mime_type):
        """Unknown or missing types map to tmp."""
        assert extension_for_mime(mime_type) == FALLBACK_EXTENSION == "tmp"

    def test_case_and_parameters_ignored(self):
        """Media types compare case-insensitively and without parameters."""
        assert extension_for_mime("Audio/FLAC") == "flac"
        assert extension_for_mime("audio/mpeg; charset=binary") == "mp3"


class TestNormalizeMimeType:
    """Tests for normalize_mime_type()."""

    def test_strips_parameters(self):
        assert normalize_mime_type(" AUDIO/OGG ;codecs=opus") == "audio/ogg"

    def test_empty(self):
        assert normalize_mime_type(";") is None
        assert normalize_mime_type(None) is None
