"""
Resolver registry for content reference schemes.

Maps URI schemes to their resolver implementation classes. Resolvers are
lazily imported so ``requests`` is only loaded when an http(s) reference
is actually resolved.

Supported schemes:
- ``file`` (and bare paths) -- local disk
- ``http`` / ``https`` -- remote content via requests

Example:
    >>> from content_materializer.resolvers import default_resolver
    >>> resolver = default_resolver()
    >>> resolver.get_mime_type("file:///music/track.flac")
    'audio/flac'
"""

import importlib
from typing import Dict, Optional

from content_materializer.config import Config
from content_materializer.resolvers.base import (
    ContentResolver,
    SchemeContentResolver,
    reference_scheme,
)


# ---------------------------------------------------------------------------
#  Resolver registry
# ---------------------------------------------------------------------------

_RESOLVER_REGISTRY: Dict[str, str] = {
    "file": "content_materializer.resolvers.local.LocalFileResolver",
    "http": "content_materializer.resolvers.http.HttpContentResolver",
    "https": "content_materializer.resolvers.http.HttpContentResolver",
}


def _load_class(class_path: str):
    module_path, class_name = class_path.rsplit(".", 1)
    module = importlib.import_module(module_path)
    return getattr(module, class_name)


def get_resolver(scheme: str, config: Optional[Config] = None) -> ContentResolver:
    """
    Get an instantiated resolver for a URI scheme.

    Args:
        scheme: URI scheme (e.g., "file", "https")
        config: Configuration passed to the resolver constructor

    Returns:
        An initialized ContentResolver instance

    Raises:
        ValueError: If no resolver is registered for the scheme
    """
    key = scheme.lower()
    if key not in _RESOLVER_REGISTRY:
        available = ", ".join(sorted(_RESOLVER_REGISTRY.keys()))
        raise ValueError(
            f"Unknown content reference scheme '{scheme}'. "
            f"Available schemes: {available}"
        )

    resolver_class = _load_class(_RESOLVER_REGISTRY[key])
    return resolver_class(config)


def default_resolver(config: Optional[Config] = None) -> SchemeContentResolver:
    """
    Build a resolver that covers every registered scheme.

    Schemes that share an implementation class share one instance.

    Args:
        config: Configuration passed to each resolver constructor

    Returns:
        SchemeContentResolver dispatching on the reference's scheme
    """
    instances: Dict[str, ContentResolver] = {}
    resolvers: Dict[str, ContentResolver] = {}
    for scheme, class_path in _RESOLVER_REGISTRY.items():
        if class_path not in instances:
            instances[class_path] = get_resolver(scheme, config)
        resolvers[scheme] = instances[class_path]
    return SchemeContentResolver(resolvers)


def list_schemes() -> Dict[str, str]:
    """
    List all registered schemes and their resolver class paths.

    Returns:
        Dictionary mapping scheme to fully qualified class path
    """
    return dict(_RESOLVER_REGISTRY)


__all__ = [
    "ContentResolver",
    "SchemeContentResolver",
    "default_resolver",
    "get_resolver",
    "list_schemes",
    "reference_scheme",
]
