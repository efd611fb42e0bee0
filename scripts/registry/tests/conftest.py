"""Shared fixtures for registry builder tests."""

import json

import pytest


def _write_catalog(root, items=None, **extra):
    catalog_path = root / "registry.json"
    document = {
        "$schema": "https://ui.shadcn.com/schema/registry.json",
        "name": "better-auth-ui",
        **extra,
        "items": items or [],
    }
    catalog_path.write_text(json.dumps(document, indent=2))
    return catalog_path


def _read_items(root):
    return json.loads((root / "registry.json").read_text())["items"]


@pytest.fixture
def write_catalog():
    """Write a registry.json under a root and return its path."""
    return _write_catalog


@pytest.fixture
def read_items():
    """Return the items array of <root>/registry.json."""
    return _read_items


@pytest.fixture
def empty_project(tmp_path):
    """Project with an empty catalog and an empty src/ tree."""
    (tmp_path / "src").mkdir()
    _write_catalog(tmp_path)
    return tmp_path


@pytest.fixture
def sample_project(empty_project):
    """Project with one file in lib/ and one hook importing zod."""
    root = empty_project
    (root / "src" / "lib").mkdir()
    (root / "src" / "hooks").mkdir()

    (root / "src" / "lib" / "utils.ts").write_text(
        "export function isValidEmail(email: string) {\n"
        "  return /^[^\\s@]+@[^\\s@]+$/.test(email)\n"
        "}\n"
    )
    (root / "src" / "hooks" / "use-foo.ts").write_text(
        'import { z } from "zod"\n'
        'import { helper } from "../lib/helper"\n'
        "\n"
        "export const schema = z.object({ email: z.string() })\n"
    )
    return root
