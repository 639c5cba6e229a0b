"""Data models for the driver sample build wrapper."""

from enum import Enum
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from sample_builder.path_utils import derive_sample_name


DEFAULT_CONFIGURATION = "Debug"
DEFAULT_PLATFORM = "x64"

# Architecture-named output folders removed by the optional cleanup step
DEFAULT_CLEANUP_ARCHITECTURES = ["x64", "arm64"]

# Rule identifiers passed through to InfVerif; known defects in sample content
INFVERIF_SUPPRESSIONS = "/msft /sw1284 /sw1285 /sw1293 /sw2083 /sw2086"


class BuildStatus(str, Enum):
    """Terminal outcome of a sample build."""

    SUCCESS = "success"
    SKIPPED = "skipped"
    FAILED = "failed"

    @property
    def exit_code(self) -> int:
        """Process exit code reported to calling automation."""
        return {
            BuildStatus.SUCCESS: 0,
            BuildStatus.FAILED: 1,
            BuildStatus.SKIPPED: 2,
        }[self]


class ConfigPlatformPair(BaseModel):
    """A configuration/platform combination declared by a solution file."""

    model_config = ConfigDict(frozen=True)

    configuration: str = Field(description="Build configuration (e.g., Debug, Release)")
    platform: str = Field(description="Target platform (e.g., x64, ARM64)")

    @field_validator("configuration", "platform", mode="before")
    @classmethod
    def strip_value(cls, v: Any) -> Any:
        """Trim surrounding whitespace."""
        return v.strip() if isinstance(v, str) else v

    def __str__(self) -> str:
        return f"{self.configuration}|{self.platform}"


class LogPaths(BaseModel):
    """The three log files written by one build invocation."""

    error: Path = Field(description="Errors-only log (.err)")
    warning: Path = Field(description="Warnings-only log (.wrn)")
    output: Path = Field(description="Combined tool output (.out)")

    @classmethod
    def for_build(
        cls, log_directory: Path, sample_name: str, configuration: str, platform: str
    ) -> "LogPaths":
        """Build the log paths for a sample/configuration/platform triple.

        Args:
            log_directory: Directory receiving the logs
            sample_name: Sample name (e.g., "usb.kmdf_fx2")
            configuration: Build configuration
            platform: Target platform

        Returns:
            LogPaths named ``<sample>.<configuration>.<platform>.{err,wrn,out}``
        """
        stem = f"{sample_name}.{configuration}.{platform}"
        return cls(
            error=log_directory / f"{stem}.err",
            warning=log_directory / f"{stem}.wrn",
            output=log_directory / f"{stem}.out",
        )


class BuildRequest(BaseModel):
    """Inputs for building one sample for one configuration/platform pair."""

    model_config = ConfigDict(frozen=True)

    directory: Path = Field(description="Directory containing the sample's solution file")
    sample_name: str = Field(description="Sample name used for log file names")
    configuration: str = Field(default=DEFAULT_CONFIGURATION, description="Build configuration")
    platform: str = Field(default=DEFAULT_PLATFORM, description="Target platform")
    log_directory: Path = Field(
        default_factory=Path.cwd, description="Directory receiving the three log files"
    )
    wipe_outputs: bool = Field(
        default=False, description="Remove architecture-named output folders after a successful build"
    )
    cleanup_architectures: list[str] = Field(
        default_factory=lambda: list(DEFAULT_CLEANUP_ARCHITECTURES),
        description="Folder names removed by the cleanup step",
    )
    verbose: bool = Field(default=False, description="Surface log locations on failure")

    @model_validator(mode="before")
    @classmethod
    def fill_sample_name(cls, data: Any) -> Any:
        """Derive the sample name from the directory when it is not given."""
        if isinstance(data, dict) and not data.get("sample_name") and data.get("directory"):
            data = dict(data)
            data["sample_name"] = derive_sample_name(Path(data["directory"]))
        return data

    @field_validator("directory", "log_directory", mode="before")
    @classmethod
    def convert_to_path(cls, v: str | Path) -> Path:
        """Convert string paths to Path objects."""
        return Path(v) if isinstance(v, str) else v


class BuildResult(BaseModel):
    """Result of a sample build."""

    status: BuildStatus = Field(description="success, skipped or failed")
    sample_name: Optional[str] = Field(default=None, description="Resolved sample name")
    configuration: str = Field(description="Requested build configuration")
    platform: str = Field(description="Requested target platform")
    solution_file: Optional[str] = Field(default=None, description="Solution file that was used")
    tool_exit_code: Optional[int] = Field(
        default=None, description="Exit code returned by the build tool, if it ran"
    )
    log_paths: Optional[LogPaths] = Field(default=None, description="Log files of this build")
    supported_pairs: list[str] = Field(
        default_factory=list, description="Configuration|Platform pairs declared by the solution"
    )
    cleaned_directories: list[str] = Field(
        default_factory=list, description="Output folders removed after the build"
    )
    build_time_seconds: float = Field(default=0.0, description="Time spent in the build tool")
    message: str = Field(description="Human-readable message about the result")

    @property
    def exit_code(self) -> int:
        """Process exit code for this result."""
        return self.status.exit_code


class MSBuildInvocation(BaseModel):
    """Fixed argument record rendered into the MSBuild command line."""

    targets: list[str] = Field(default_factory=lambda: ["clean", "build"])
    console_verbosity: str = Field(default="m", description="Console logger verbosity")
    properties: dict[str, str] = Field(
        default_factory=lambda: {
            "TargetVersion": "Windows10",
            "InfVerif_AdditionalOptions": INFVERIF_SUPPRESSIONS,
            "DriverCFlagAddOn": "/wd4996",
            "SignToolWS": "/fdws",
        },
        description="Properties passed with -p:, in order",
    )
    warn_as_error: bool = Field(default=True, description="Escalate build warnings to errors")
    error_logger: str = Field(default="errorsonly", description="Parameters of file logger 1")
    warning_logger: str = Field(default="WarningsOnly", description="Parameters of file logger 2")
    no_logo: bool = Field(default=True)


class MSBuildSettings(BaseModel):
    """Build tool location."""

    path: Optional[Path] = Field(
        default=None, description="Override path to MSBuild.exe (default: search PATH)"
    )

    @field_validator("path", mode="before")
    @classmethod
    def convert_to_path(cls, v: str | Path | None) -> Path | None:
        """Convert string paths to Path objects."""
        if v is None or isinstance(v, Path):
            return v
        return Path(v)


class BuildDefaults(BaseModel):
    """Defaults used when the caller does not specify a value."""

    configuration: str = Field(default=DEFAULT_CONFIGURATION)
    platform: str = Field(default=DEFAULT_PLATFORM)
    log_directory: Optional[Path] = Field(
        default=None, description="Log directory (default: current directory)"
    )

    @field_validator("log_directory", mode="before")
    @classmethod
    def convert_to_path(cls, v: str | Path | None) -> Path | None:
        """Convert string paths to Path objects."""
        if v is None or isinstance(v, Path):
            return v
        return Path(v)


class CleanupSettings(BaseModel):
    """Post-build cleanup of architecture-named output folders."""

    wipe_outputs: bool = Field(default=False)
    architectures: list[str] = Field(
        default_factory=lambda: list(DEFAULT_CLEANUP_ARCHITECTURES)
    )


class Config(BaseModel):
    """Complete configuration model."""

    msbuild: MSBuildSettings = Field(default_factory=MSBuildSettings)
    build: BuildDefaults = Field(default_factory=BuildDefaults)
    cleanup: CleanupSettings = Field(default_factory=CleanupSettings)
