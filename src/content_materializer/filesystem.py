"""
Cache directory file allocation.

``CacheFileSystem`` is the capability the materializer uses to create
destination files. ``LocalFileSystem`` backs it with ``tempfile.mkstemp``,
which creates the file with ``O_CREAT | O_EXCL`` so two concurrent calls
can never be handed the same path.
"""

import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import BinaryIO, Union

logger = logging.getLogger(__name__)


class CacheFileSystem(ABC):
    """
    Abstract base class for destination file allocation.

    Subclasses must implement:
        - ``create_unique_file()`` -- atomically create a new empty file
        - ``open_for_write()`` -- open a created file for binary writing
    """

    @abstractmethod
    def create_unique_file(
        self,
        directory: Union[str, Path],
        prefix: str,
        suffix: str,
    ) -> Path:
        """
        Create a new, uniquely named, empty file inside ``directory``.

        Args:
            directory: Existing directory to create the file in
            prefix: Filename prefix (e.g. ``audio_stream_``)
            suffix: Filename suffix including the dot (e.g. ``.mp3``)

        Returns:
            Absolute path of the created file

        Raises:
            OSError: If the file cannot be created
        """

    @abstractmethod
    def open_for_write(self, path: Path) -> BinaryIO:
        """Open ``path`` for binary writing, truncating it."""


class LocalFileSystem(CacheFileSystem):
    """Allocates destination files on the local disk."""

    def create_unique_file(
        self,
        directory: Union[str, Path],
        prefix: str,
        suffix: str,
    ) -> Path:
        fd, name = tempfile.mkstemp(suffix=suffix, prefix=prefix, dir=str(directory))
        os.close(fd)
        path = Path(name).resolve()
        logger.debug("Allocated cache file %s", path)
        return path

    def open_for_write(self, path: Path) -> BinaryIO:
        return open(path, "wb")
