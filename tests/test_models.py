"""Tests for data models."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from sample_builder.models import (
    BuildRequest,
    BuildResult,
    BuildStatus,
    ConfigPlatformPair,
    LogPaths,
)


class TestBuildStatus:
    """Tests for BuildStatus exit codes."""

    def test_exit_codes(self):
        """Test success, failure and skip map to 0, 1 and 2."""
        assert BuildStatus.SUCCESS.exit_code == 0
        assert BuildStatus.FAILED.exit_code == 1
        assert BuildStatus.SKIPPED.exit_code == 2

    def test_result_exit_code(self):
        """Test BuildResult reports its status's exit code."""
        result = BuildResult(
            status=BuildStatus.SKIPPED, configuration="Debug", platform="x64", message="skipped"
        )
        assert result.exit_code == 2


class TestConfigPlatformPair:
    """Tests for ConfigPlatformPair model."""

    def test_values_trimmed(self):
        """Test whitespace is stripped on construction."""
        pair = ConfigPlatformPair(configuration=" Debug ", platform="\tx64 ")
        assert pair == ConfigPlatformPair(configuration="Debug", platform="x64")

    def test_hashable(self):
        """Test equal pairs collapse in a set."""
        pairs = {
            ConfigPlatformPair(configuration="Debug", platform="x64"),
            ConfigPlatformPair(configuration="Debug", platform="x64"),
        }
        assert len(pairs) == 1

    def test_str(self):
        """Test the pair renders as Configuration|Platform."""
        assert str(ConfigPlatformPair(configuration="Release", platform="ARM64")) == "Release|ARM64"

    def test_immutable(self):
        """Test fields can't be reassigned."""
        pair = ConfigPlatformPair(configuration="Debug", platform="x64")
        with pytest.raises(ValidationError):
            pair.platform = "ARM64"


class TestLogPaths:
    """Tests for LogPaths.for_build."""

    def test_file_names(self):
        """Test the .err, .wrn and .out names."""
        paths = LogPaths.for_build(Path("logs"), "usb.kmdf_fx2", "Debug", "x64")
        assert paths.error == Path("logs") / "usb.kmdf_fx2.Debug.x64.err"
        assert paths.warning == Path("logs") / "usb.kmdf_fx2.Debug.x64.wrn"
        assert paths.output == Path("logs") / "usb.kmdf_fx2.Debug.x64.out"


class TestBuildRequest:
    """Tests for BuildRequest model."""

    def test_defaults(self):
        """Test default configuration, platform and log directory."""
        request = BuildRequest(directory="usb/kmdf_fx2", sample_name="fx2")
        assert request.configuration == "Debug"
        assert request.platform == "x64"
        assert request.log_directory == Path.cwd()
        assert request.wipe_outputs is False
        assert request.cleanup_architectures == ["x64", "arm64"]
        assert request.verbose is False

    def test_sample_name_derived(self):
        """Test a missing sample name is derived from the directory."""
        request = BuildRequest(directory=Path("usb") / "kmdf_fx2")
        assert request.sample_name == "usb.kmdf_fx2"

    def test_none_sample_name_derived(self):
        """Test an explicit None sample name is derived as well."""
        request = BuildRequest(directory="Storage/ClassPnP", sample_name=None)
        assert request.sample_name == "storage.classpnp"

    def test_explicit_sample_name_kept(self):
        """Test a given sample name is used unchanged."""
        request = BuildRequest(directory="usb/kmdf_fx2", sample_name="Custom")
        assert request.sample_name == "Custom"

    def test_directory_converted_to_path(self):
        """Test string paths become Path objects."""
        request = BuildRequest(directory="usb/kmdf_fx2", log_directory="logs")
        assert isinstance(request.directory, Path)
        assert request.log_directory == Path("logs")

    def test_immutable(self):
        """Test the request can't be modified after construction."""
        request = BuildRequest(directory="usb/kmdf_fx2")
        with pytest.raises(ValidationError):
            request.configuration = "Release"
