"""Command-line interface for listing image uploads."""

import argparse
import asyncio
import json
import sys
from typing import List, Optional, Sequence

from .core import (
    BatchUploadResult,
    ListingImagesError,
    SourceImage,
    UploaderConfig,
    UploadProgressEntry,
    get_logger,
)
from .core.factories import StorageFactory, UploaderFactory
from .core.image_helpers import ImageInput, get_image_url
from .core.uploader import require_uploaded_images

VERSION = "0.1.0"


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with the upload, url and version commands."""
    parser = argparse.ArgumentParser(
        prog="listing-images",
        description="Upload property listing images with resized variants to S3",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Upload photos for a property (original + small/medium/large)
  listing-images upload --property-id 42 --bucket images front.jpg garden.png

  # Upload originals only
  listing-images upload --property-id 42 --simple front.jpg

  # Public URL of the medium variant of a stored image
  listing-images url 42/1700000000000.jpg --size medium
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    def add_storage_arguments(sub: argparse.ArgumentParser) -> None:
        sub.add_argument("--bucket", default=None, help="Storage bucket (default: images)")
        sub.add_argument("--region", default=None, help="S3 region")
        sub.add_argument("--endpoint-url", default=None, help="Custom S3 endpoint URL")
        sub.add_argument(
            "--public-base-url", default=None, help="Base URL for public object links"
        )
        sub.add_argument("--debug", action="store_true", help="Enable debug logging")

    upload_parser = subparsers.add_parser("upload", help="Upload images for a property")
    upload_parser.add_argument("--property-id", required=True, help="Property identifier")
    upload_parser.add_argument(
        "--simple",
        action="store_true",
        help="Upload originals only, without generating thumbnails",
    )
    upload_parser.add_argument(
        "--require-images",
        action="store_true",
        help="Fail if no image could be uploaded",
    )
    upload_parser.add_argument("files", nargs="+", help="Image files to upload")
    add_storage_arguments(upload_parser)

    url_parser = subparsers.add_parser("url", help="Print the public URL of a stored image")
    url_parser.add_argument(
        "image", help="Stored path, or a JSON object with original/small/medium/large"
    )
    url_parser.add_argument(
        "--size",
        default="medium",
        choices=["original", "small", "medium", "large"],
        help="Variant to link to (default: medium)",
    )
    add_storage_arguments(url_parser)

    subparsers.add_parser("version", help="Show version information")

    return parser


def config_from_args(args: argparse.Namespace) -> UploaderConfig:
    return UploaderConfig.from_env(
        bucket=args.bucket,
        region=args.region,
        endpoint_url=args.endpoint_url,
        public_base_url=args.public_base_url,
        debug=args.debug or None,
    )


def log_progress(entries: List[UploadProgressEntry]) -> None:
    """Progress observer that writes each snapshot to the debug log."""
    logger = get_logger("listing-images.cli")
    for entry in entries:
        suffix = f" ({entry.error})" if entry.error else ""
        logger.debug(
            f"#{entry.image_index} {entry.file_name}: "
            f"{entry.status.value} {entry.progress}%{suffix}"
        )


async def upload_files(
    config: UploaderConfig,
    files: Sequence[SourceImage],
    property_id: str,
    simple: bool = False,
) -> BatchUploadResult:
    """Open S3 storage and upload ``files`` for ``property_id``."""
    async with StorageFactory.create_storage(config) as storage:
        uploader = UploaderFactory.create_uploader(config, storage=storage)
        if simple:
            return await uploader.upload_simple(files, property_id, log_progress)
        return await uploader.upload_with_fallback(files, property_id, log_progress)


def run_upload(args: argparse.Namespace) -> int:
    logger = get_logger("listing-images.cli")
    config = config_from_args(args)
    if config.debug:
        logger.setLevel("DEBUG")

    files = [SourceImage.from_path(path) for path in args.files]
    logger.info(f"Uploading {len(files)} image(s) for property {args.property_id}")

    result = asyncio.run(upload_files(config, files, args.property_id, simple=args.simple))
    print(result.model_dump_json(indent=2))

    summary = result.failure_summary()
    if summary:
        logger.warning(summary)
    if args.require_images:
        require_uploaded_images(result)
    return 0 if result.success else 2


def run_url(args: argparse.Namespace) -> int:
    config = config_from_args(args)
    image: ImageInput = args.image
    if args.image.lstrip().startswith("{"):
        image = json.loads(args.image)
    storage = StorageFactory.create_storage(config)
    print(get_image_url(storage, image, args.size))
    return 0


def run_command(args: argparse.Namespace) -> int:
    """Run the upload or url command, returning the process exit code."""
    logger = get_logger("listing-images.cli")
    try:
        if args.command == "upload":
            return run_upload(args)
        return run_url(args)
    except KeyboardInterrupt:
        logger.warning("Interrupted by user.")
        return 130
    except (ListingImagesError, OSError, ValueError) as e:
        logger.error(f"{args.command} failed: {e}", exc_info=True)
        return 1


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Entry point for the ``listing-images`` command."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "version":
        print("Listing Images CLI")
        print(f"Version {VERSION}")
        sys.exit(0)

    elif args.command in ("upload", "url"):
        sys.exit(run_command(args))

    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
