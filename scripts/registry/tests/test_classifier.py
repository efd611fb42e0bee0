"""Tests for path classification."""

import pytest

from scripts.registry.classifier import CategoryTag, classify_path


class TestClassifyPath:
    """Tests for the prefix rule table."""

    def test_hooks_are_hooks(self):
        assert classify_path("hooks/use-thing.ts") == CategoryTag.HOOK

    def test_components_ui_is_ui(self):
        assert classify_path("components/ui/button.tsx") == CategoryTag.UI

    def test_lib_is_lib(self):
        assert classify_path("lib/utils.ts") == CategoryTag.LIB

    def test_types_map_to_lib(self):
        assert classify_path("types/fetch-error.ts") == CategoryTag.LIB

    def test_other_components_are_components(self):
        assert classify_path("components/forms/sign-in-form.tsx") == CategoryTag.COMPONENT

    def test_unknown_prefix_falls_back_to_component(self):
        assert classify_path("misc/thing.ts") == CategoryTag.COMPONENT

    def test_prefix_must_be_a_directory(self):
        """'hooksmith.ts' is not under hooks/."""
        assert classify_path("hooksmith.ts") == CategoryTag.COMPONENT

    def test_windows_separators_are_normalized(self):
        assert classify_path("components\\ui\\card.tsx") == CategoryTag.UI


class TestCategoryTag:
    """Tests for category serialization and output directories."""

    @pytest.mark.parametrize(
        "category,value,output_dir",
        [
            (CategoryTag.HOOK, "registry:hook", "hooks"),
            (CategoryTag.UI, "registry:ui", "ui"),
            (CategoryTag.LIB, "registry:lib", "lib"),
            (CategoryTag.COMPONENT, "registry:component", "components"),
        ],
    )
    def test_value_and_output_dir(self, category, value, output_dir):
        assert category.value == value
        assert category.output_dir == output_dir

    def test_lookup_by_serialized_value(self):
        assert CategoryTag("registry:ui") is CategoryTag.UI
