"""
Shared test fixtures.

Provides pytest fixtures for common test resources including:
- Temporary cache directory
- In-memory content resolver with tracked streams
- Materializer wired to the in-memory resolver
"""

import io
import tempfile
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import pytest

from content_materializer.materializer import ContentMaterializer
from content_materializer.resolvers.base import ContentResolver


class TrackedStream(io.BytesIO):
    """BytesIO that can fail after a number of bytes."""

    def __init__(self, data: bytes, fail_after: Optional[int] = None) -> None:
        super().__init__(data)
        self.fail_after = fail_after

    def read(self, size: int = -1) -> bytes:
        if self.fail_after is not None and self.tell() >= self.fail_after:
            raise OSError("stream interrupted")
        if self.fail_after is not None and size is not None and size >= 0:
            size = min(size, self.fail_after - self.tell())
        return super().read(size)


class FakeContentResolver(ContentResolver):
    """
    In-memory resolver keyed by reference string.

    Register content with ``add()``; unknown references cannot be opened.
    Every stream handed out is kept in ``opened`` so tests can check that
    it was closed.
    """

    def __init__(self) -> None:
        self.entries: Dict[str, Tuple[bytes, Optional[str], Optional[int]]] = {}
        self.opened: List[TrackedStream] = []
        self.calls: List[Tuple[str, str]] = []

    def add(
        self,
        reference: str,
        data: bytes,
        mime_type: Optional[str] = None,
        fail_after: Optional[int] = None,
    ) -> None:
        self.entries[reference] = (data, mime_type, fail_after)

    def get_mime_type(self, reference: str) -> Optional[str]:
        self.calls.append(("get_mime_type", reference))
        entry = self.entries.get(reference)
        return entry[1] if entry else None

    def open_input_stream(self, reference: str) -> Optional[TrackedStream]:
        self.calls.append(("open_input_stream", reference))
        entry = self.entries.get(reference)
        if entry is None:
            return None
        stream = TrackedStream(entry[0], fail_after=entry[2])
        self.opened.append(stream)
        return stream


@pytest.fixture
def temp_dir():
    """
    Create temporary directory for test files.

    Yields:
        Path: Temporary directory path
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def cache_dir(temp_dir: Path) -> Path:
    """Existing, empty cache directory."""
    directory = temp_dir / "cache"
    directory.mkdir()
    return directory


@pytest.fixture
def fake_resolver() -> FakeContentResolver:
    """Empty in-memory resolver."""
    return FakeContentResolver()


@pytest.fixture
def materializer(fake_resolver: FakeContentResolver) -> ContentMaterializer:
    """Materializer backed by the in-memory resolver and the local disk."""
    return ContentMaterializer(resolver=fake_resolver, chunk_size=1024)
