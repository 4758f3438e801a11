"""
Command-line interface for the content materializer.

Usage:
    content-materializer copy file:///music/track.flac       # Copy into the cache dir
    content-materializer copy URL --cache-dir /tmp/cache      # Explicit cache dir
    content-materializer copy URL --output-json               # JSON output
    content-materializer extension audio/mpeg                 # Show mapped extension
    content-materializer call copyContentToCache --uri URI    # Run a channel call
"""

import argparse
import logging
import sys

from content_materializer.config import get_config


def _configure_logging(args, level_name: str) -> None:
    level = logging.DEBUG if args.verbose else getattr(logging, level_name.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def cmd_copy(args):
    """Materialize a content reference into the cache directory."""
    config = get_config()
    _configure_logging(args, config.log_level)

    from content_materializer.errors import MaterializeError
    from content_materializer.materializer import ContentMaterializer

    cache_dir = args.cache_dir or config.cache_dir
    materializer = ContentMaterializer.from_config(config)
    try:
        result = materializer.materialize_file(args.uri, cache_dir)
    except MaterializeError as exc:
        print(f"ERROR: {exc}")
        sys.exit(1)

    if args.output_json:
        print(result.to_json())
    else:
        print(result.path)


def cmd_extension(args):
    """Print the extension used for a MIME type."""
    from content_materializer.mime_types import extension_for_mime
    print(extension_for_mime(args.mime_type))


def cmd_call(args):
    """Run a method-channel call and print the result."""
    config = get_config()
    _configure_logging(args, config.log_level)

    from content_materializer.channel import ContentResolverChannel
    from content_materializer.materializer import ContentMaterializer

    channel = ContentResolverChannel(
        cache_dir=args.cache_dir or config.cache_dir,
        materializer=ContentMaterializer.from_config(config),
    )
    arguments = {}
    if args.uri is not None:
        arguments["uri"] = args.uri

    result = channel.handle(args.method, arguments)
    print(result.to_json())
    if not result.is_success:
        sys.exit(1)


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="content-materializer",
        description="Copy content references into local cache files",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        default=False,
        help="Enable debug logging",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # copy
    sub_copy = subparsers.add_parser("copy", help="Materialize a content reference")
    sub_copy.add_argument("uri", help="file:// URI, path, or http(s) URL")
    sub_copy.add_argument(
        "--cache-dir",
        default=None,
        help="Destination directory (default: configured cache_dir)",
    )
    sub_copy.add_argument(
        "--output-json",
        action="store_true",
        default=False,
        help="Output result as JSON",
    )
    sub_copy.set_defaults(func=cmd_copy)

    # extension
    sub_ext = subparsers.add_parser("extension", help="Show the extension for a MIME type")
    sub_ext.add_argument("mime_type", help="MIME type, e.g. audio/mpeg")
    sub_ext.set_defaults(func=cmd_extension)

    # call
    sub_call = subparsers.add_parser(
        "call",
        help="Invoke a method on the content resolver channel",
    )
    sub_call.add_argument("method", help="Method name, e.g. copyContentToCache")
    sub_call.add_argument("--uri", default=None, help="Value of the 'uri' argument")
    sub_call.add_argument(
        "--cache-dir",
        default=None,
        help="Destination directory (default: configured cache_dir)",
    )
    sub_call.set_defaults(func=cmd_call)

    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help()
        sys.exit(0)

    args.func(args)


if __name__ == "__main__":
    main()
