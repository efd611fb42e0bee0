"""Dependency detection for registry source files.

Detection is pattern based over raw text, not a parse. Known limitations:
commented-out imports still match, while dynamic imports and re-exports
(``export ... from``) are not detected.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Callable, Optional

from scripts.registry.config import DependencyConfig

logger = logging.getLogger(__name__)

# import X from "pkg", import { a, b } from 'pkg', import type { T } from "pkg"
# The clause may span lines but never crosses a quote or statement terminator.
IMPORT_PATTERN = re.compile(r"""\bimport\s+[^;'"]*?\s*from\s*['"]([^'"]+)['"]""")


@dataclass
class DependencyRecord:
    """Dependencies detected in a single file."""

    external: list[str] = field(default_factory=list)  # Third-party packages
    internal: list[str] = field(default_factory=list)  # Shared registry helpers

    def add_external(self, name: str) -> None:
        if name not in self.external:
            self.external.append(name)

    def add_internal(self, token: str) -> None:
        if token not in self.internal:
            self.internal.append(token)


# Contract every extractor satisfies: raw file text -> DependencyRecord
DependencyExtractor = Callable[[str], DependencyRecord]


def extract_specifiers(content: str) -> list[str]:
    """Extract module specifiers from import declarations.

    Args:
        content: Raw file text.

    Returns:
        Specifiers in order of appearance, duplicates included.
    """
    return [match.group(1) for match in IMPORT_PATTERN.finditer(content)]


def is_relative_specifier(specifier: str) -> bool:
    """Check if a specifier points inside the project."""
    return specifier.startswith((".", "/"))


def resolve_package(specifier: str, table: DependencyConfig) -> Optional[str]:
    """Resolve a specifier to a tracked package name.

    Args:
        specifier: Module specifier from an import.
        table: Recognition table.

    Returns:
        Package name to record, or None if the specifier is not tracked.
    """
    if specifier in table.aliases:
        return table.aliases[specifier]
    if specifier.startswith(tuple(table.scoped_prefixes)):
        return specifier
    if specifier in table.packages:
        return specifier
    return None


class PatternExtractor:
    """Text-pattern dependency extractor driven by a recognition table."""

    def __init__(self, table: Optional[DependencyConfig] = None):
        self.table = table or DependencyConfig()

    def __call__(self, content: str) -> DependencyRecord:
        record = DependencyRecord()

        for specifier in extract_specifiers(content):
            if is_relative_specifier(specifier):
                continue
            package = resolve_package(specifier, self.table)
            if package is None:
                logger.debug("Untracked import: %s", specifier)
                continue
            record.add_external(package)

        if self.table.utility_marker in content:
            record.add_internal(self.table.utility_token)

        return record


def extract_dependencies(
    content: str,
    table: Optional[DependencyConfig] = None,
) -> DependencyRecord:
    """Extract dependencies from raw file text using the default extractor.

    Args:
        content: Raw file text.
        table: Recognition table. Defaults to the built-in table.

    Returns:
        DependencyRecord with deduplicated, first-seen-ordered lists.
    """
    return PatternExtractor(table)(content)
