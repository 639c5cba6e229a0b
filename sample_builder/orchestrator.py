"""Sample build orchestration."""

import logging
import time
from typing import Optional

from sample_builder.cleanup import wipe_build_outputs
from sample_builder.models import (
    BuildRequest,
    BuildResult,
    BuildStatus,
    ConfigPlatformPair,
    LogPaths,
)
from sample_builder.msbuild import BuildToolNotFoundError, MSBuildInvoker
from sample_builder.path_utils import find_solution_file
from sample_builder.sln_parser import SolutionParser


logger = logging.getLogger(__name__)


class SampleBuilder:
    """Builds one driver sample for one configuration/platform pair."""

    def __init__(self, invoker: Optional[MSBuildInvoker] = None):
        """Initialize builder.

        Args:
            invoker: MSBuild invoker. If None, a default one searching PATH is used.
        """
        self.invoker = invoker or MSBuildInvoker()

    def build(self, request: BuildRequest) -> BuildResult:
        """Build a sample.

        Steps run in order and stop at the first fatal condition:
        locate MSBuild, check the directory, create the log directory,
        find the solution, check the requested pair, build, clean up.

        Args:
            request: What to build

        Returns:
            BuildResult; status is success, skipped (pair not declared by
            the solution) or failed
        """
        def result(status: BuildStatus, message: str, **fields) -> BuildResult:
            return BuildResult(
                status=status,
                sample_name=request.sample_name,
                configuration=request.configuration,
                platform=request.platform,
                message=message,
                **fields,
            )

        try:
            msbuild = self.invoker.locate()
        except BuildToolNotFoundError as e:
            logger.error("%s", e)
            return result(BuildStatus.FAILED, str(e))
        logger.info("MSBuild: %s", msbuild)

        if not request.directory.is_dir():
            message = f"Directory not found: {request.directory}"
            logger.error(message)
            return result(BuildStatus.FAILED, message)

        try:
            request.log_directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.warning("Could not create log directory %s: %s", request.log_directory, e)

        solution_path = find_solution_file(request.directory)
        if solution_path is None:
            message = f"No .sln file found in {request.directory}"
            logger.error(message)
            return result(BuildStatus.FAILED, message)

        try:
            supported = SolutionParser(solution_path).parse()
        except OSError as e:
            message = f"Cannot read {solution_path}: {e}"
            logger.error(message)
            return result(BuildStatus.FAILED, message, solution_file=str(solution_path))
        supported_names = sorted(str(p) for p in supported)
        requested = ConfigPlatformPair(
            configuration=request.configuration, platform=request.platform
        )

        if requested not in supported:
            message = (
                f"{request.sample_name}: {requested} is not supported by "
                f"{solution_path.name}, skipping"
            )
            logger.info(message)
            return result(
                BuildStatus.SKIPPED,
                message,
                solution_file=str(solution_path),
                supported_pairs=supported_names,
            )

        log_paths = LogPaths.for_build(
            request.log_directory.resolve(),
            request.sample_name,
            request.configuration,
            request.platform,
        )

        logger.info("Building %s (%s)", request.sample_name, requested)
        start_time = time.time()
        try:
            exit_code = self.invoker.run(
                solution_path, request.configuration, request.platform, log_paths
            )
        except BuildToolNotFoundError as e:
            logger.error("%s", e)
            return result(BuildStatus.FAILED, str(e), solution_file=str(solution_path))
        build_time = round(time.time() - start_time, 2)

        if exit_code != 0:
            if request.verbose:
                logger.warning(
                    "Build of %s failed with exit code %d, see %s",
                    request.sample_name,
                    exit_code,
                    log_paths.error,
                )
            return result(
                BuildStatus.FAILED,
                f"MSBuild exited with code {exit_code}",
                solution_file=str(solution_path),
                tool_exit_code=exit_code,
                log_paths=log_paths,
                supported_pairs=supported_names,
                build_time_seconds=build_time,
            )

        cleaned = []
        if request.wipe_outputs:
            cleaned = wipe_build_outputs(request.directory, request.cleanup_architectures)

        return result(
            BuildStatus.SUCCESS,
            f"Built {request.sample_name} ({requested})",
            solution_file=str(solution_path),
            tool_exit_code=exit_code,
            log_paths=log_paths,
            supported_pairs=supported_names,
            cleaned_directories=[str(p) for p in cleaned],
            build_time_seconds=build_time,
        )
