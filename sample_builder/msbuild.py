"""MSBuild location and execution."""

import logging
import shutil
import subprocess
from pathlib import Path
from typing import Optional

from sample_builder.models import LogPaths, MSBuildInvocation


logger = logging.getLogger(__name__)

# Names tried on PATH, in order
MSBUILD_EXECUTABLES = ["msbuild", "MSBuild.exe"]


class BuildToolNotFoundError(FileNotFoundError):
    """Raised when MSBuild cannot be located."""


class MSBuildInvoker:
    """Runs MSBuild against a solution with the fixed sample-build arguments."""

    def __init__(
        self,
        msbuild_path: Optional[Path] = None,
        invocation: Optional[MSBuildInvocation] = None,
    ):
        """Initialize invoker.

        Args:
            msbuild_path: Explicit MSBuild.exe path. If None, PATH is searched.
            invocation: Argument record. If None, the default record is used.
        """
        self.msbuild_path = msbuild_path
        self.invocation = invocation or MSBuildInvocation()

    def locate(self) -> Path:
        """Find the MSBuild executable.

        Returns:
            Path to MSBuild

        Raises:
            BuildToolNotFoundError: If MSBuild is not configured or on PATH
        """
        if self.msbuild_path:
            if not self.msbuild_path.exists():
                raise BuildToolNotFoundError(f"Configured MSBuild not found: {self.msbuild_path}")
            return self.msbuild_path

        for name in MSBUILD_EXECUTABLES:
            found = shutil.which(name)
            if found:
                return Path(found)

        raise BuildToolNotFoundError(
            "MSBuild was not found on PATH. Run from a Developer Command Prompt "
            "or set msbuild.path in sample_build.toml."
        )

    def build_command(
        self,
        msbuild: Path,
        solution_path: Path,
        configuration: str,
        platform: str,
        log_paths: LogPaths,
    ) -> list[str]:
        """Render the MSBuild command line.

        Args:
            msbuild: Path to MSBuild
            solution_path: Solution file to build
            configuration: Build configuration (e.g., "Debug")
            platform: Target platform (e.g., "x64")
            log_paths: Error, warning and output log files

        Returns:
            Command as list of arguments
        """
        inv = self.invocation
        command = [
            str(msbuild),
            str(solution_path),
            f"-clp:Verbosity={inv.console_verbosity}",
            f"-t:{','.join(inv.targets)}",
            f"-property:Configuration={configuration}",
            f"-property:Platform={platform}",
        ]

        for name, value in inv.properties.items():
            command.append(f"-p:{name}={value}")

        if inv.warn_as_error:
            command.append("-warnaserror")

        command.append(f"-flp1:{inv.error_logger};logfile={log_paths.error}")
        command.append(f"-flp2:{inv.warning_logger};logfile={log_paths.warning}")

        if inv.no_logo:
            command.append("-noLogo")

        return command

    def run(
        self,
        solution_path: Path,
        configuration: str,
        platform: str,
        log_paths: LogPaths,
    ) -> int:
        """Build a solution and return MSBuild's exit code.

        MSBuild writes the .err and .wrn logs itself; its console output is
        written to the .out log, replacing any previous content.

        Args:
            solution_path: Solution file to build
            configuration: Build configuration
            platform: Target platform
            log_paths: Log files for this build

        Returns:
            MSBuild exit code (1 if MSBuild could not be started)

        Raises:
            BuildToolNotFoundError: If MSBuild cannot be located
        """
        msbuild = self.locate()
        command = self.build_command(msbuild, solution_path, configuration, platform, log_paths)
        logger.info("Running: %s", subprocess.list2cmdline(command))

        try:
            out_log = open(log_paths.output, "w", encoding="utf-8", errors="replace")
        except OSError as e:
            logger.warning("Cannot write output log %s: %s", log_paths.output, e)
            out_log = None

        try:
            result = subprocess.run(
                command,
                cwd=str(solution_path.parent),
                stdout=out_log if out_log else subprocess.DEVNULL,
                stderr=subprocess.STDOUT,
                check=False,
            )
        except OSError as e:
            logger.error("MSBuild execution failed: %s", e)
            return 1
        finally:
            if out_log:
                out_log.close()

        return result.returncode
