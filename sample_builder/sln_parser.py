"""Parser for the configuration section of Visual Studio .sln files."""

import logging
import re
from collections.abc import Iterable
from pathlib import Path

from sample_builder.models import ConfigPlatformPair


logger = logging.getLogger(__name__)


class SolutionParser:
    """Extracts the supported configuration/platform pairs from a solution file.

    Only the ``GlobalSection(SolutionConfigurationPlatforms)`` block is read:

        GlobalSection(SolutionConfigurationPlatforms) = preSolution
            Debug|x64 = Debug|x64
            Release|ARM64 = Release|ARM64
        EndGlobalSection
    """

    SECTION_START = re.compile(r"^\s*GlobalSection\(SolutionConfigurationPlatforms\)")
    SECTION_END = re.compile(r"^\s*EndGlobalSection")

    # Format: <key> = <Configuration>|<Platform>
    ENTRY_PATTERN = re.compile(r"^(?P<key>[^=]*)=(?P<value>.*)$")

    def __init__(self, solution_path: Path):
        """Initialize parser with a solution file path.

        Args:
            solution_path: Path to the .sln file
        """
        self.solution_path = solution_path

    def parse(self) -> set[ConfigPlatformPair]:
        """Read the solution file and return its configuration/platform pairs.

        Returns:
            Set of declared pairs (empty if the section is missing)

        Raises:
            FileNotFoundError: If the solution file doesn't exist
        """
        if not self.solution_path.exists():
            raise FileNotFoundError(f"Solution file not found: {self.solution_path}")

        # Visual Studio writes solution files with a UTF-8 BOM
        content = self.solution_path.read_text(encoding="utf-8-sig", errors="replace")
        return self.parse_lines(content.splitlines())

    @classmethod
    def parse_lines(cls, lines: Iterable[str]) -> set[ConfigPlatformPair]:
        """Scan solution text line by line.

        Lines between a section header and ``EndGlobalSection`` are parsed as
        entries. The header may appear more than once; pairs are unioned.

        Args:
            lines: Lines of the solution file

        Returns:
            Set of declared pairs
        """
        pairs: set[ConfigPlatformPair] = set()
        in_section = False

        for line_num, line in enumerate(lines, start=1):
            if cls.SECTION_START.match(line):
                in_section = True
                continue

            if cls.SECTION_END.match(line):
                in_section = False
                continue

            if not in_section:
                continue

            pair = cls._parse_entry(line)
            if pair is None:
                logger.warning("Skipping malformed configuration line %d: %r", line_num, line.strip())
                continue

            pairs.add(pair)

        return pairs

    @classmethod
    def _parse_entry(cls, line: str) -> ConfigPlatformPair | None:
        """Parse a single ``key = Configuration|Platform`` line.

        Args:
            line: Line from inside the configuration section

        Returns:
            The pair, or None if the line is malformed
        """
        match = cls.ENTRY_PATTERN.match(line)
        if not match:
            return None

        configuration, separator, platform = match.group("value").rpartition("|")
        configuration = configuration.strip()
        platform = platform.strip()

        if not separator or not configuration or not platform:
            return None

        return ConfigPlatformPair(configuration=configuration, platform=platform)
