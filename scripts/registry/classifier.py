"""Path based classification of registry source files."""

from __future__ import annotations

from enum import Enum


class CategoryTag(str, Enum):
    """Registry item category, serialized as the item "type"."""

    HOOK = "registry:hook"
    UI = "registry:ui"
    LIB = "registry:lib"
    COMPONENT = "registry:component"

    @property
    def output_dir(self) -> str:
        """Directory under the registry root that receives files of this category."""
        return _OUTPUT_DIRS[self]


_OUTPUT_DIRS = {
    CategoryTag.HOOK: "hooks",
    CategoryTag.UI: "ui",
    CategoryTag.LIB: "lib",
    CategoryTag.COMPONENT: "components",
}

# First matching prefix wins
CLASSIFICATION_RULES: tuple[tuple[tuple[str, ...], CategoryTag], ...] = (
    (("hooks/",), CategoryTag.HOOK),
    (("components/ui/",), CategoryTag.UI),
    (("lib/", "types/"), CategoryTag.LIB),
)

DEFAULT_CATEGORY = CategoryTag.COMPONENT


def classify_path(relative_path: str) -> CategoryTag:
    """Map a source-root-relative path to its registry category.

    Args:
        relative_path: Path relative to the source root (e.g., "hooks/use-session.ts").

    Returns:
        The category of the first matching rule, or the component default.
    """
    normalized = relative_path.replace("\\", "/")
    for prefixes, category in CLASSIFICATION_RULES:
        if normalized.startswith(prefixes):
            return category
    return DEFAULT_CATEGORY
