"""Merge scanned files into the persisted registry catalog.

The merge is strictly additive: items already present in the catalog are
never rewritten, re-copied or removed. New items are copied into the
registry output tree and the combined item list is written back sorted by
name.
"""

from __future__ import annotations

import json
import logging
import os
import shutil
import sys
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from scripts.registry.classifier import CategoryTag, classify_path
from scripts.registry.config import RegistryConfig
from scripts.registry.dependencies import DependencyExtractor, PatternExtractor
from scripts.registry.errors import CatalogLoadError, CatalogWriteError, PerFileError
from scripts.registry.metadata import CatalogItem, derive_identifier, synthesize_item
from scripts.registry.scanner import SourceFile, count_files, scan_source_tree

logger = logging.getLogger(__name__)


@dataclass
class Catalog:
    """The persisted catalog document.

    ``document`` holds every top-level field of the file; ``items`` replaces
    its ``items`` field when the catalog is written.
    """

    document: dict[str, Any] = field(default_factory=dict)
    items: list[dict[str, Any]] = field(default_factory=list)

    @property
    def names(self) -> set[str]:
        return {item["name"] for item in self.items}

    @property
    def published_paths(self) -> set[str]:
        """Output paths already owned by catalog items."""
        return {
            f["path"]
            for item in self.items
            for f in item.get("files", [])
            if isinstance(f, dict) and isinstance(f.get("path"), str)
        }

    def to_json(self) -> dict[str, Any]:
        return {**self.document, "items": self.items}


@dataclass
class MergeResult:
    """Outcome of merging one scan pass into a catalog."""

    catalog: Catalog
    processed: int = 0
    added: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)


@dataclass
class BuildSummary:
    """Counts reported after a successful build."""

    files_processed: int
    items_added: int
    items_skipped: int
    files_failed: int
    total_items: int
    registry_files: int
    by_type: dict[str, int] = field(default_factory=dict)


def load_catalog(catalog_path: Path | str) -> Catalog:
    """Load the catalog document.

    Args:
        catalog_path: Path to registry.json.

    Returns:
        Catalog with the existing items in file order.

    Raises:
        CatalogLoadError: If the file is missing, unparsable or malformed.
    """
    catalog_path = Path(catalog_path)
    catalog_file = str(catalog_path)

    try:
        data = json.loads(catalog_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        raise CatalogLoadError("Catalog file not found", file=catalog_file)
    except (OSError, UnicodeDecodeError) as e:
        raise CatalogLoadError(f"Cannot read catalog: {e}", file=catalog_file)
    except json.JSONDecodeError as e:
        raise CatalogLoadError(f"Invalid JSON: {e}", file=catalog_file)

    if not isinstance(data, dict):
        raise CatalogLoadError("Top-level catalog must be an object", file=catalog_file)

    items = data.get("items")
    if not isinstance(items, list):
        raise CatalogLoadError("Catalog 'items' must be an array", file=catalog_file)

    for index, item in enumerate(items):
        if not isinstance(item, dict) or not isinstance(item.get("name"), str):
            raise CatalogLoadError(
                f"Catalog item {index} has no string 'name'",
                file=catalog_file,
            )

    # "items" keeps its original key position when the document is written back
    document = {key: (None if key == "items" else value) for key, value in data.items()}
    return Catalog(document=document, items=list(items))


def serialize_catalog(catalog: Catalog) -> str:
    return json.dumps(catalog.to_json(), indent=2, ensure_ascii=False)


def save_catalog(catalog: Catalog, catalog_path: Path | str) -> None:
    """Write the catalog atomically, replacing the previous content.

    Raises:
        CatalogWriteError: If the file cannot be written.
    """
    catalog_path = Path(catalog_path)
    content = serialize_catalog(catalog)

    try:
        catalog_path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(
            dir=catalog_path.parent, suffix=".tmp", prefix=catalog_path.stem
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
            if catalog_path.exists():
                shutil.copymode(catalog_path, tmp_path)
            Path(tmp_path).replace(catalog_path)
        except BaseException:
            Path(tmp_path).unlink(missing_ok=True)
            raise
    except OSError as e:
        raise CatalogWriteError(f"Cannot write catalog: {e}", file=str(catalog_path))


def sort_items(items: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Sort catalog items ascending by name."""
    return sorted(items, key=lambda item: item["name"])


def copy_to_registry(
    source_path: Path,
    category: CategoryTag,
    project_root: Path,
    registry_dir: str,
) -> Path:
    """Copy a source file into the output directory for its category.

    Raises:
        PerFileError: If the directory cannot be created or the copy fails.
    """
    target_dir = project_root / registry_dir / category.output_dir
    target_path = target_dir / source_path.name

    try:
        target_dir.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(source_path, target_path)
    except OSError as e:
        raise PerFileError(f"Cannot copy to {target_path}: {e}", file=str(source_path))

    logger.debug("Copied %s -> %s", source_path, target_path)
    return target_path


def _check_unclaimed(item: CatalogItem, claimed: set[str]) -> None:
    """Refuse an item whose output file is already published by another item.

    Raises:
        PerFileError: If any of the item's output paths is claimed.
    """
    for descriptor in item.files:
        if descriptor.path in claimed:
            raise PerFileError(
                f"Output path {descriptor.path} already belongs to another item",
                file=descriptor.path,
            )


def _read_source(source: SourceFile) -> str:
    try:
        # Text is only pattern matched; the copy itself is byte for byte
        return source.path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        raise PerFileError(f"Cannot read file: {e}", file=str(source.path))


def merge_sources(
    catalog: Catalog,
    sources: list[SourceFile],
    project_root: Path | str,
    config: RegistryConfig,
    extractor: Optional[DependencyExtractor] = None,
) -> MergeResult:
    """Add catalog items for sources whose identifier is not yet known.

    Files are processed one at a time in scan order. A file whose identifier
    already exists (in the catalog or earlier in this pass) is skipped
    without being read or copied. A new item whose output path is already published by another item (a
    second ``index`` file, say) is refused as a per-file failure.

    Args:
        catalog: Catalog loaded before the pass. It is not modified.
        sources: Scanned source files.
        project_root: Root the registry output directory is relative to.
        config: Registry configuration.
        extractor: Dependency extractor; defaults to the pattern extractor
            built from ``config.dependencies``.

    Returns:
        MergeResult holding the new catalog and per-file outcomes.
    """
    project_root = Path(project_root)
    if extractor is None:
        extractor = PatternExtractor(config.dependencies)

    known = catalog.names
    claimed = catalog.published_paths
    staged: list[dict[str, Any]] = []
    result = MergeResult(catalog=catalog)

    for source in sources:
        result.processed += 1
        name = derive_identifier(source.relative_path)
        category = classify_path(source.relative_path)

        print(f"Processing: {name} ({category.value})")

        if name in known:
            print(f"  Skipping {name} - already exists")
            result.skipped.append(name)
            continue

        try:
            deps = extractor(_read_source(source))
            item = synthesize_item(
                source.relative_path,
                category,
                deps,
                registry_dir=config.registry_dir,
                product_name=config.product_name,
            )
            _check_unclaimed(item, claimed)
            copy_to_registry(source.path, category, project_root, config.registry_dir)
        except PerFileError as e:
            print(f"  Error processing {name} ({source.relative_path}): {e}", file=sys.stderr)
            result.failed.append(source.relative_path)
            continue

        staged.append(item.to_json())
        known.add(name)
        claimed.update(f.path for f in item.files)
        result.added.append(name)
        print(f"  Added {name}")

    result.catalog = Catalog(
        document=catalog.document,
        items=sort_items(catalog.items + staged),
    )
    return result


def count_by_type(items: list[dict[str, Any]]) -> dict[str, int]:
    by_type: dict[str, int] = {}
    for item in items:
        item_type = item.get("type", "unknown")
        by_type[item_type] = by_type.get(item_type, 0) + 1
    return by_type


def build_registry(
    project_root: Path | str,
    config: RegistryConfig,
    extractor: Optional[DependencyExtractor] = None,
) -> BuildSummary:
    """Run one full registry build.

    Loads the catalog, scans the source tree, merges new items, copies their
    files and writes the catalog back.

    Raises:
        CatalogLoadError: If the catalog cannot be loaded.
        ScanError: If the source tree cannot be read.
        CatalogWriteError: If the catalog cannot be written.
    """
    project_root = Path(project_root)
    catalog_path = project_root / config.catalog_file

    catalog = load_catalog(catalog_path)
    sources = scan_source_tree(
        project_root / config.source_dir,
        config.source_subdirs,
        config.extensions,
    )
    print(f"Found {len(sources)} files to process")

    result = merge_sources(catalog, sources, project_root, config, extractor)
    save_catalog(result.catalog, catalog_path)

    return BuildSummary(
        files_processed=result.processed,
        items_added=len(result.added),
        items_skipped=len(result.skipped),
        files_failed=len(result.failed),
        total_items=len(result.catalog.items),
        registry_files=count_files(project_root / config.registry_dir, config.extensions),
        by_type=count_by_type(result.catalog.items),
    )
