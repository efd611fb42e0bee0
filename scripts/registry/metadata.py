"""Catalog metadata derived from a source file."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import PurePosixPath
from typing import Any

from scripts.registry.classifier import CategoryTag
from scripts.registry.dependencies import DependencyRecord


@dataclass(frozen=True)
class FileDescriptor:
    """An output file belonging to a catalog item."""

    path: str  # Relative to the project root, "/"-separated
    type: CategoryTag

    def to_json(self) -> dict[str, Any]:
        """Serialize to a catalog ``files`` entry."""
        return {"path": self.path, "type": self.type.value}


@dataclass
class CatalogItem:
    """A publishable registry item."""

    name: str
    type: CategoryTag
    title: str
    description: str
    files: list[FileDescriptor]
    dependencies: list[str] = field(default_factory=list)
    registry_dependencies: list[str] = field(default_factory=list)

    def to_json(self) -> dict[str, Any]:
        """Serialize to the catalog item format, omitting empty dependency lists."""
        result: dict[str, Any] = {
            "name": self.name,
            "type": self.type.value,
            "title": self.title,
            "description": self.description,
            "files": [f.to_json() for f in self.files],
        }
        if self.dependencies:
            result["dependencies"] = list(self.dependencies)
        if self.registry_dependencies:
            result["registryDependencies"] = list(self.registry_dependencies)
        return result


def derive_identifier(relative_path: str) -> str:
    """Derive the item identifier from a file path.

    The identifier is the file name without extension. Files named ``index``
    take the name of their parent directory, so ``widget/index.tsx`` -> ``widget``.
    """
    path = PurePosixPath(relative_path.replace("\\", "/"))
    name = path.stem
    if name == "index":
        return path.parent.name or name
    return name


def generate_title(identifier: str) -> str:
    """Generate a display title: ``forgot-password-form`` -> ``Forgot Password Form``."""
    return " ".join(word[:1].upper() + word[1:] for word in identifier.split("-"))


def generate_description(title: str, product_name: str) -> str:
    """Generate the catalog description for a titled item."""
    return f"{title} component for {product_name}"


def output_path(filename: str, category: CategoryTag, registry_dir: str) -> str:
    """Project-relative path a file of this category is copied to."""
    return str(PurePosixPath(registry_dir.replace("\\", "/")) / category.output_dir / filename)


def synthesize_item(
    relative_path: str,
    category: CategoryTag,
    deps: DependencyRecord,
    registry_dir: str,
    product_name: str,
) -> CatalogItem:
    """Build a candidate catalog item for a scanned file.

    Args:
        relative_path: File path relative to the source root.
        category: Category from the classifier.
        deps: Dependencies from the extractor.
        registry_dir: Output root relative to the project root.
        product_name: Product named in the description.

    Returns:
        CatalogItem with a single file descriptor.
    """
    identifier = derive_identifier(relative_path)
    title = generate_title(identifier)
    filename = PurePosixPath(relative_path.replace("\\", "/")).name

    return CatalogItem(
        name=identifier,
        type=category,
        title=title,
        description=generate_description(title, product_name),
        files=[FileDescriptor(path=output_path(filename, category, registry_dir), type=category)],
        dependencies=list(deps.external),
        registry_dependencies=list(deps.internal),
    )
