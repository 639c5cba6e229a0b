"""Tests for the MCP tool handlers."""

import asyncio
import json
from pathlib import Path
from unittest.mock import patch

import pytest

import main
from sample_builder.models import BuildResult, BuildStatus


SOLUTION = """\
Global
\tGlobalSection(SolutionConfigurationPlatforms) = preSolution
\t\tRelease|x64 = Release|x64
\t\tDebug|x64 = Debug|x64
\tEndGlobalSection
EndGlobal
"""


class TestListConfigurations:
    """Tests for the list_solution_configurations tool."""

    def test_lists_sorted_pairs(self, tmp_path):
        """Test the solution's pairs are returned sorted."""
        (tmp_path / "kmdf_fx2.sln").write_text(SOLUTION)

        payload = json.loads(
            asyncio.run(main.handle_list_configurations({"directory": str(tmp_path)}))
        )

        assert payload["configurations"] == ["Debug|x64", "Release|x64"]
        assert payload["solution_file"].endswith("kmdf_fx2.sln")

    def test_missing_solution_reported(self, tmp_path):
        """Test the tool wrapper turns a missing solution into an error message."""
        contents = asyncio.run(
            main.call_tool("list_solution_configurations", {"directory": str(tmp_path)})
        )
        assert contents[0].text.startswith("Error executing list_solution_configurations")
        assert "No .sln file" in contents[0].text

    def test_missing_directory_raises(self, tmp_path):
        """Test an unknown directory raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            asyncio.run(main.handle_list_configurations({"directory": str(tmp_path / "nope")}))


class TestBuildSample:
    """Tests for the build_driver_sample tool."""

    def test_returns_result_with_exit_code(self, tmp_path, monkeypatch):
        """Test the JSON payload carries status and exit code."""
        monkeypatch.setattr("sample_builder.config.find_config_file", lambda: None)
        result = BuildResult(
            status=BuildStatus.SKIPPED,
            sample_name="usb.kmdf_fx2",
            configuration="Debug",
            platform="ARM64",
            message="not supported",
        )

        with patch("main.SampleBuilder") as mock_builder:
            mock_builder.return_value.build.return_value = result
            payload = json.loads(
                asyncio.run(
                    main.handle_build_sample({"directory": str(tmp_path), "platform": "ARM64"})
                )
            )

        assert payload["status"] == "skipped"
        assert payload["exit_code"] == 2
        request = mock_builder.return_value.build.call_args[0][0]
        assert request.platform == "ARM64"
        assert request.configuration == "Debug"
