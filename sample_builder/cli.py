"""Command-line entry point: build one driver sample."""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from sample_builder.config import ConfigLoader
from sample_builder.models import BuildRequest, BuildStatus
from sample_builder.msbuild import MSBuildInvoker
from sample_builder.orchestrator import SampleBuilder


logger = logging.getLogger(__name__)


def setup_logging(verbose: bool) -> None:
    """Send log records to stderr; INFO and up when verbose."""
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Build a driver sample solution for one configuration and platform."
    )
    parser.add_argument(
        "-d", "--directory", required=True, help="Sample directory containing the .sln file"
    )
    parser.add_argument(
        "-s", "--sample-name", help="Sample name for log files (default: derived from directory)"
    )
    parser.add_argument("-c", "--configuration", help="Build configuration (default: Debug)")
    parser.add_argument("-p", "--platform", help="Target platform (default: x64)")
    parser.add_argument(
        "-l", "--log-directory", help="Directory for log files (default: current directory)"
    )
    parser.add_argument("--config", help="Path to sample_build.toml")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show progress and log locations")
    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> int:
    """Run a single sample build.

    Returns:
        0 on success, 1 on failure, 2 if the configuration/platform is not supported
    """
    args = parse_args(argv)
    setup_logging(args.verbose)

    try:
        config = ConfigLoader(Path(args.config) if args.config else None).load()
    except (FileNotFoundError, ValueError) as e:
        logger.error("%s", e)
        return BuildStatus.FAILED.exit_code

    request = BuildRequest(
        directory=Path(args.directory),
        sample_name=args.sample_name,
        configuration=args.configuration or config.build.configuration,
        platform=args.platform or config.build.platform,
        log_directory=Path(args.log_directory or config.build.log_directory or Path.cwd()),
        wipe_outputs=config.cleanup.wipe_outputs,
        cleanup_architectures=config.cleanup.architectures,
        verbose=args.verbose,
    )

    builder = SampleBuilder(MSBuildInvoker(msbuild_path=config.msbuild.path))
    result = builder.build(request)
    logger.info("%s", result.message)
    return result.exit_code


if __name__ == "__main__":
    raise SystemExit(main())
