"""
Command line entry point: upload a build directory that is already on disk.

    OSS_ACCESS_KEY_ID=... OSS_ACCESS_KEY_SECRET=... \
        ossdist --bucket my-bucket --region oss-cn-hangzhou --output dist --prefix static
"""

import argparse
import logging
import sys
from typing import Any, Dict, List, Optional

from ossdist.config import get_settings
from ossdist.exceptions import ConfigError
from ossdist.logging_config import setup_logging
from ossdist.plugin import OSSPlugin

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ossdist",
        description="Upload build output to an object storage bucket"
    )
    parser.add_argument("--output", default="./dist", help="Directory to upload (default: ./dist)")
    parser.add_argument("--prefix", default="", help="Key prefix inside the bucket")
    parser.add_argument("--format", default=None,
                        help="Version directory: digits, or a date pattern such as YYYYMMDDHHmm")
    parser.add_argument("--exclude", action="append", default=None, metavar="REGEX",
                        help="Skip files whose path matches REGEX (repeatable)")
    parser.add_argument("--delete-all", action="store_true",
                        help="Delete everything under the prefix before uploading")
    parser.add_argument("--limit", type=int, default=5, help="Number of versions to keep (default: 5)")
    parser.add_argument("--access-key-id", default=None, help="Defaults to OSS_ACCESS_KEY_ID")
    parser.add_argument("--access-key-secret", default=None, help="Defaults to OSS_ACCESS_KEY_SECRET")
    parser.add_argument("--bucket", default=None, help="Defaults to OSS_BUCKET")
    parser.add_argument("--region", default=None, help="Defaults to OSS_REGION")
    parser.add_argument("--endpoint", default=None, help="S3-compatible endpoint URL (defaults to OSS_ENDPOINT)")
    parser.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING or ERROR")
    return parser


def options_from_args(args: argparse.Namespace) -> Dict[str, Any]:
    """Plugin options from parsed arguments, with environment credentials as fallback."""
    options = get_settings().as_options()
    explicit = {
        "access_key_id": args.access_key_id,
        "access_key_secret": args.access_key_secret,
        "bucket": args.bucket,
        "region": args.region,
        "endpoint": args.endpoint,
    }
    options.update({key: value for key, value in explicit.items() if value})
    options.update({
        "output": args.output,
        "prefix": args.prefix,
        "format": args.format,
        "exclude": args.exclude,
        "delete_all": args.delete_all,
        "limit": args.limit,
        "local": True,
    })
    return options


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level or get_settings().LOG_LEVEL)

    try:
        plugin = OSSPlugin(options_from_args(args))
    except ConfigError as e:
        logger.error(f"Invalid configuration: {e}")
        return 2

    outcomes = plugin.upload()
    failed = [outcome for outcome in outcomes if not outcome.ok]
    logger.info(f"{len(outcomes) - len(failed)} succeeded, {len(failed)} failed")
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
