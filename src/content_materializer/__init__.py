"""
Content Materializer

Copies opaque content references (file:// URIs, paths, http(s) URLs) into
uniquely named local cache files whose extension matches the content's
MIME type.
"""

__version__ = "0.1.0"

from content_materializer.config import Config
from content_materializer.errors import (
    IOFailure,
    InvalidArgument,
    MaterializeError,
    SourceUnavailable,
)
from content_materializer.materializer import (
    ContentMaterializer,
    MaterializedFile,
    materialize,
)

__all__ = [
    "Config",
    "ContentMaterializer",
    "IOFailure",
    "InvalidArgument",
    "MaterializeError",
    "MaterializedFile",
    "SourceUnavailable",
    "materialize",
    "__version__",
]
