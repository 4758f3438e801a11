"""
Materialize opaque content references as local cache files.

Resolves a reference's MIME type, picks a matching extension, creates a
uniquely named file in the cache directory and copies every byte of the
reference into it. The call is synchronous and may block for as long as
the copy takes; callers that need responsiveness should run it from a
background worker.

Example:
    >>> from content_materializer.materializer import materialize
    >>> path = materialize("file:///sdcard/Music/track.flac", "/data/app/cache")
    >>> path.endswith(".flac")
    True
"""

import json
import logging
import time
from contextlib import closing
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, BinaryIO, Dict, Optional, Union

from content_materializer.config import (
    Config,
    DEFAULT_CHUNK_SIZE,
    DEFAULT_FILE_PREFIX,
    get_config,
)
from content_materializer.errors import IOFailure, InvalidArgument, SourceUnavailable
from content_materializer.filesystem import CacheFileSystem, LocalFileSystem
from content_materializer.mime_types import extension_for_mime
from content_materializer.resolvers import ContentResolver, default_resolver

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
#  Data models
# ---------------------------------------------------------------------------

@dataclass
class MaterializedFile:
    """
    A reference copied into the cache directory.

    Attributes:
        path: Absolute path of the created file
        mime_type: MIME type reported by the resolver, or None if unknown
        extension: Extension chosen for the file (without the dot)
        size_bytes: Number of bytes written
    """

    path: str
    mime_type: Optional[str]
    extension: str
    size_bytes: int

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)

    def to_json(self, indent: int = 2) -> str:
        """Serialize to JSON string."""
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)


# ---------------------------------------------------------------------------
#  Materializer
# ---------------------------------------------------------------------------

class ContentMaterializer:
    """
    Copies content references into uniquely named cache files.

    Holds no per-call state, so one instance can serve concurrent calls.

    Attributes:
        resolver: Content resolution capability
        filesystem: Destination file allocation capability
        file_prefix: Prefix of every created filename
        chunk_size: Bytes read from the source per iteration
    """

    def __init__(
        self,
        resolver: Optional[ContentResolver] = None,
        filesystem: Optional[CacheFileSystem] = None,
        file_prefix: str = DEFAULT_FILE_PREFIX,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        if chunk_size <= 0:
            raise ValueError("chunk_size must be a positive integer")
        self.resolver = resolver or default_resolver()
        self.filesystem = filesystem or LocalFileSystem()
        self.file_prefix = file_prefix
        self.chunk_size = chunk_size

    @classmethod
    def from_config(cls, config: Config) -> "ContentMaterializer":
        """Build a materializer with resolvers and settings from ``config``."""
        return cls(
            resolver=default_resolver(config),
            filesystem=LocalFileSystem(),
            file_prefix=config.file_prefix,
            chunk_size=config.chunk_size,
        )

    def materialize(self, reference: str, cache_dir: Union[str, Path]) -> str:
        """
        Copy ``reference`` into ``cache_dir`` and return the file's path.

        Args:
            reference: Non-empty content reference
            cache_dir: Existing, writable directory

        Returns:
            Absolute path of the created file

        Raises:
            InvalidArgument: If the reference is empty or cache_dir is not a directory
            SourceUnavailable: If the reference cannot be opened
            IOFailure: If reading or writing fails during the copy
        """
        return self.materialize_file(reference, cache_dir).path

    def materialize_file(
        self,
        reference: str,
        cache_dir: Union[str, Path],
    ) -> MaterializedFile:
        """
        Copy ``reference`` into ``cache_dir``.

        Same contract as ``materialize()``, but returns the full
        MaterializedFile record.
        """
        _validate_reference(reference)
        directory = _validate_cache_dir(cache_dir, reference)

        mime_type = self._resolve_mime_type(reference)
        extension = extension_for_mime(mime_type)

        source = self._open_source(reference)
        with closing(source):
            try:
                destination = self.filesystem.create_unique_file(
                    directory,
                    prefix=self.file_prefix,
                    suffix=f".{extension}",
                )
            except OSError as exc:
                raise IOFailure(
                    f"Cannot create cache file in {directory}",
                    reference=reference,
                    cause=exc,
                ) from exc

            start_time = time.time()
            size_bytes = self._copy(source, destination, reference)
            elapsed = time.time() - start_time

        logger.info(
            "Materialized %s -> %s (%d bytes, mime=%s, %.2fs)",
            reference,
            destination,
            size_bytes,
            mime_type,
            elapsed,
        )

        return MaterializedFile(
            path=str(destination),
            mime_type=mime_type,
            extension=extension,
            size_bytes=size_bytes,
        )

    # -------------------------------------------------------------------
    #  Steps
    # -------------------------------------------------------------------

    def _resolve_mime_type(self, reference: str) -> Optional[str]:
        try:
            mime_type = self.resolver.get_mime_type(reference)
        except (OSError, ValueError) as exc:
            logger.warning("Could not resolve MIME type for %s: %s", reference, exc)
            return None
        logger.debug("Resolved MIME type %s for %s", mime_type, reference)
        return mime_type

    def _open_source(self, reference: str) -> BinaryIO:
        try:
            source = self.resolver.open_input_stream(reference)
        except (OSError, ValueError) as exc:
            raise SourceUnavailable(
                f"Cannot open input stream for URI: {reference}",
                reference=reference,
                cause=exc,
            ) from exc

        if source is None:
            raise SourceUnavailable(
                f"Cannot open input stream for URI: {reference}",
                reference=reference,
            )
        return source

    def _copy(self, source: BinaryIO, destination: Path, reference: str) -> int:
        """Copy every byte of ``source`` into ``destination``; return the count."""
        bytes_copied = 0
        try:
            with closing(self.filesystem.open_for_write(destination)) as output:
                while True:
                    chunk = source.read(self.chunk_size)
                    if not chunk:
                        break
                    output.write(chunk)
                    bytes_copied += len(chunk)
        except OSError as exc:
            raise IOFailure(
                f"Failed to copy content URI after {bytes_copied} bytes",
                reference=reference,
                cause=exc,
            ) from exc
        return bytes_copied


# ---------------------------------------------------------------------------
#  Validation
# ---------------------------------------------------------------------------

def _validate_reference(reference: Any) -> None:
    if reference is None:
        raise InvalidArgument("URI is required")
    if not isinstance(reference, str):
        raise InvalidArgument(
            f"URI must be a string, got {type(reference).__name__}"
        )
    if not reference.strip():
        raise InvalidArgument("URI must not be empty", reference=reference)


def _validate_cache_dir(cache_dir: Any, reference: str) -> Path:
    if cache_dir is None or cache_dir == "":
        raise InvalidArgument("Cache directory is required", reference=reference)
    directory = Path(cache_dir)
    if not directory.is_dir():
        raise InvalidArgument(
            f"Cache directory does not exist: {directory}",
            reference=reference,
        )
    return directory


# ---------------------------------------------------------------------------
#  Convenience entry point
# ---------------------------------------------------------------------------

def materialize(
    reference: str,
    cache_dir: Optional[Union[str, Path]] = None,
    config: Optional[Config] = None,
) -> str:
    """
    Materialize ``reference`` with the default resolvers.

    Args:
        reference: Content reference (file:// URI, path, or http(s) URL)
        cache_dir: Destination directory; defaults to ``config.cache_dir``
        config: Configuration; defaults to ``get_config()``

    Returns:
        Absolute path of the created file
    """
    _validate_reference(reference)
    if config is None:
        config = get_config()
    target_dir = cache_dir if cache_dir is not None else config.cache_dir
    return ContentMaterializer.from_config(config).materialize(reference, target_dir)
