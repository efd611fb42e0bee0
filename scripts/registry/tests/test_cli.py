"""Tests for the registry-build command."""

import json
import os

import yaml

from scripts.registry.cli import ExitCode, main


def _items_by_name(root):
    items = json.loads((root / "registry.json").read_text())["items"]
    return {item["name"]: item for item in items}


class TestBuildScenarios:
    """End-to-end builds through main()."""

    def test_first_build_adds_sorted_items(self, sample_project, monkeypatch, read_items):
        monkeypatch.chdir(sample_project)

        exit_code = main([])

        assert exit_code == ExitCode.SUCCESS
        items = read_items(sample_project)
        assert [i["name"] for i in items] == ["use-foo", "utils"]
        assert items[0]["dependencies"] == ["zod"]
        assert items[0]["type"] == "registry:hook"
        assert items[0]["files"] == [{"path": "registry/hooks/use-foo.ts", "type": "registry:hook"}]
        assert "dependencies" not in items[1]
        assert "registryDependencies" not in items[1]

    def test_rebuild_with_new_index_file(self, sample_project, monkeypatch):
        monkeypatch.chdir(sample_project)
        main([])
        before = _items_by_name(sample_project)
        hook_copy = sample_project / "registry" / "hooks" / "use-foo.ts"
        hook_mtime = hook_copy.stat().st_mtime_ns

        widget_dir = sample_project / "src" / "components" / "widget"
        widget_dir.mkdir(parents=True)
        (widget_dir / "index.tsx").write_text(
            'export function Widget({ className }) {\n'
            '  return <div className={cn("p-2", className)} />\n'
            '}\n'
        )
        exit_code = main([])

        assert exit_code == ExitCode.SUCCESS
        after = _items_by_name(sample_project)
        assert sorted(after) == ["use-foo", "utils", "widget"]
        for name in ("use-foo", "utils"):
            assert json.dumps(after[name], indent=2) == json.dumps(before[name], indent=2)
        assert after["widget"]["registryDependencies"] == ["utils"]
        assert after["widget"]["files"][0]["path"] == "registry/components/index.tsx"
        assert hook_copy.stat().st_mtime_ns == hook_mtime

    def test_rebuild_is_idempotent(self, sample_project, monkeypatch, capsys):
        monkeypatch.chdir(sample_project)
        main([])
        first = (sample_project / "registry.json").read_text()
        capsys.readouterr()

        exit_code = main([])

        assert exit_code == ExitCode.SUCCESS
        assert (sample_project / "registry.json").read_text() == first
        out = capsys.readouterr().out
        assert "New items added: 0" in out
        assert "Items skipped: 2" in out

    def test_changed_source_does_not_overwrite(self, sample_project, monkeypatch, read_items):
        monkeypatch.chdir(sample_project)
        main([])

        (sample_project / "src" / "lib" / "utils.ts").write_text('import { z } from "zod"\n')
        main([])

        utils = [i for i in read_items(sample_project) if i["name"] == "utils"][0]
        assert "dependencies" not in utils
        assert "zod" not in (sample_project / "registry" / "lib" / "utils.ts").read_text()

    def test_other_top_level_fields_survive(self, sample_project, monkeypatch, write_catalog):
        write_catalog(sample_project, homepage="https://example.com")
        monkeypatch.chdir(sample_project)

        main([])

        data = json.loads((sample_project / "registry.json").read_text())
        assert data["homepage"] == "https://example.com"
        assert list(data) == ["$schema", "name", "homepage", "items"]


class TestOutput:
    """Tests for progress and summary output."""

    def test_progress_and_summary(self, sample_project, monkeypatch, capsys):
        monkeypatch.chdir(sample_project)

        main([])

        out = capsys.readouterr().out
        assert "Found 2 files to process" in out
        assert "Processing: use-foo (registry:hook)" in out
        assert "Added utils" in out
        assert "Total items: 2" in out
        assert "registry:hook: 1 items" in out
        assert "registry:lib: 1 items" in out

    def test_root_flag(self, sample_project, tmp_path_factory, monkeypatch):
        monkeypatch.chdir(tmp_path_factory.mktemp("elsewhere"))

        exit_code = main(["--root", str(sample_project)])

        assert exit_code == ExitCode.SUCCESS
        assert (sample_project / "registry" / "lib" / "utils.ts").exists()


class TestFailures:
    """Tests for fatal errors and exit codes."""

    def test_missing_catalog(self, tmp_path, monkeypatch, capsys):
        (tmp_path / "src").mkdir()
        monkeypatch.chdir(tmp_path)

        exit_code = main([])

        assert exit_code == ExitCode.CATALOG_ERROR
        captured = capsys.readouterr()
        assert json.loads(captured.err)["error"] == "catalog_load_failed"
        assert "Registry build complete" not in captured.out

    def test_missing_source_root(self, tmp_path, monkeypatch, capsys, write_catalog):
        write_catalog(tmp_path)
        monkeypatch.chdir(tmp_path)

        exit_code = main([])

        assert exit_code == ExitCode.SCAN_ERROR
        assert json.loads(capsys.readouterr().err)["error"] == "scan_failed"

    def test_invalid_config(self, sample_project, monkeypatch, capsys):
        (sample_project / "registry.yaml").write_text("{ invalid yaml: [")
        monkeypatch.chdir(sample_project)

        exit_code = main([])

        assert exit_code == ExitCode.CONFIG_ERROR
        assert json.loads(capsys.readouterr().err)["error"] == "config_invalid"

    def test_explicit_missing_config(self, sample_project, monkeypatch):
        monkeypatch.chdir(sample_project)
        assert main(["--config", "nope.yaml"]) == ExitCode.CONFIG_ERROR

    def test_per_file_error_still_succeeds(self, sample_project, monkeypatch, capsys):
        os.symlink(sample_project / "gone.ts", sample_project / "src" / "hooks" / "use-bad.ts")
        monkeypatch.chdir(sample_project)

        exit_code = main([])

        assert exit_code == ExitCode.SUCCESS
        captured = capsys.readouterr()
        assert "hooks/use-bad.ts" in captured.err
        assert "Files failed: 1" in captured.out


class TestConfigFile:
    """Tests for builds driven by registry.yaml."""

    def test_custom_layout(self, tmp_path, monkeypatch, write_catalog, read_items):
        (tmp_path / "app" / "hooks").mkdir(parents=True)
        (tmp_path / "app" / "hooks" / "use-session.ts").write_text('import { createAuthClient } from "better-auth"\n')
        write_catalog(tmp_path)
        config_file = tmp_path / "build.yaml"
        config_file.write_text(yaml.dump({
            "source_dir": "app",
            "registry_dir": "public/r",
            "product_name": "acme-ui",
        }))
        monkeypatch.chdir(tmp_path)

        exit_code = main(["--config", str(config_file)])

        assert exit_code == ExitCode.SUCCESS
        item = read_items(tmp_path)[0]
        assert item["description"] == "Use Session component for acme-ui"
        assert item["dependencies"] == ["better-auth"]
        assert item["files"][0]["path"] == "public/r/hooks/use-session.ts"
        assert (tmp_path / "public" / "r" / "hooks" / "use-session.ts").exists()
