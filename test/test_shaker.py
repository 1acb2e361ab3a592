"""End-to-end runs over small module trees."""

import json
from pathlib import Path

import pytest

from lite_shake import OutputCollisionError, Settings, TreeShaker, shake
from lite_shake.cli import main
from lite_shake.core.versioning import graph_fingerprint


def read(path):
    return path.read_text(encoding="utf-8")


class TestScenarios:
    def test_unused_export_removed(self, project, out_dir):
        root = project(
            {
                "entry.js": "import { a } from './x.js';\nconsole.log(a);\n",
                "x.js": "export const a = 1;\nexport const b = 2;\n",
            }
        )
        report = shake(root / "entry.js", out_dir)

        assert read(out_dir / "x.js") == "export const a = 1;\n"
        assert report.module(str(root / "x.js")).removed == ["b"]

    def test_unused_exported_function_removed(self, project, out_dir):
        root = project(
            {
                "entry.js": "import { a } from './x.js';\nconsole.log(a);\n",
                "x.js": "export function f() {}\nexport const a = 1;\n",
            }
        )
        shake(root / "entry.js", out_dir)

        assert read(out_dir / "x.js") == "export const a = 1;\n"

    def test_renamed_import_keeps_original_name(self, project, out_dir):
        root = project(
            {
                "entry.js": "import { a as b } from './x.js';\nconsole.log(b);\n",
                "x.js": "export const a = 1;\nexport const c = 2;\n",
            }
        )
        shake(root / "entry.js", out_dir)

        assert read(out_dir / "x.js") == "export const a = 1;\n"

    def test_entry_is_emitted_verbatim(self, project, out_dir):
        entry_src = "import { a } from './x.js';\nconst unused = 1;\nfunction dead() {}\nexport const e = 1;\nconsole.log(a);\n"
        root = project({"entry.js": entry_src, "x.js": "export const a = 1;\n"})
        report = shake(root / "entry.js", out_dir)

        assert read(out_dir / "entry.js") == entry_src
        entry = report.module(str(root / "entry.js"))
        assert entry.entry and not entry.pruned and entry.removed == []

    def test_dependency_without_used_names_is_verbatim(self, project, out_dir):
        x_src = "export const a = 1;\nexport function f() {}\n"
        root = project({"entry.js": "import { a } from './x.js';\n", "x.js": x_src})
        report = shake(root / "entry.js", out_dir)

        assert read(out_dir / "x.js") == x_src
        assert not report.module(str(root / "x.js")).pruned

    def test_diamond_keeps_union_of_importers(self, project, out_dir, diamond_files):
        root = project(diamond_files)
        shake(root / "entry.js", out_dir)

        assert read(out_dir / "shared.js") == "export const s1 = 1;\nexport const s2 = 2;\n"

    def test_cycle(self, project, out_dir, cycle_files):
        root = project(cycle_files)
        report = shake(root / "entry.js", out_dir)

        assert read(out_dir / "b.js") == "import { a } from './a.js';\nexport const b = 1;\n"
        assert report.cycles == [(str(root / "b.js"), str(root / "a.js"))]

    def test_entry_reached_through_a_cycle_stays_verbatim(self, project, out_dir):
        entry_src = "import { a } from './a.js';\nexport const e = 1;\nconst dead = 2;\nconsole.log(a);\n"
        root = project(
            {
                "entry.js": entry_src,
                "a.js": "import { e } from './entry.js';\nexport const a = e;\nexport const z = 3;\n",
            }
        )
        report = shake(root / "entry.js", out_dir)

        assert (out_dir / "entry.js").read_bytes() == entry_src.encode("utf-8")
        entry = report.module(str(root / "entry.js"))
        assert entry.used == ["e"]
        assert not entry.pruned and entry.removed == []
        assert read(out_dir / "a.js") == "import { e } from './entry.js';\nexport const a = e;\n"
        assert report.cycles == [(str(root / "a.js"), str(root / "entry.js"))]

    def test_unused_exported_generator_removed(self, project, out_dir):
        root = project(
            {
                "entry.js": "import { g } from './x.js';\nfor (const v of g()) console.log(v);\n",
                "x.js": "export function* g() { yield 1; }\nexport function* h() { yield 2; }\nfunction* local() {}\n",
            }
        )
        report = shake(root / "entry.js", out_dir)

        assert read(out_dir / "x.js") == "export function* g() { yield 1; }\n"
        assert sorted(report.module(str(root / "x.js")).removed) == ["h", "local"]


class TestProperties:
    def test_idempotent_on_own_output(self, project, tmp_path, out_dir):
        root = project(
            {
                "entry.js": "import { a, g } from './x.js';\nconsole.log(a, g());\n",
                "x.js": "export const a = 1, b = 2;\nfunction helper() {}\nexport function g() { return helper(); }\nexport function h() {}\n",
            }
        )
        shake(root / "entry.js", out_dir)
        second = tmp_path / "second"
        shake(out_dir / "entry.js", second)

        assert read(second / "x.js") == read(out_dir / "x.js")
        assert "helper" in read(out_dir / "x.js")

    def test_soundness_without_local_closure(self, project, out_dir, diamond_files):
        root = project(diamond_files)
        report = shake(root / "entry.js", out_dir, local_closure=False)

        for module in report.modules:
            if module.pruned:
                assert set(module.kept) <= set(module.used)

    def test_soundness_with_local_closure(self, project, out_dir):
        root = project(
            {
                "entry.js": "import { a } from './x.js';\nconsole.log(a);\n",
                "x.js": "export function f() {}\nexport const a = 1;\nexport const b = 2;\nf();\n",
            }
        )
        report = shake(root / "entry.js", out_dir)
        x = report.module(str(root / "x.js"))

        assert x.used == ["a"]
        assert x.live == ["a", "f"]
        assert x.kept == ["a", "f"]
        for module in report.modules:
            if module.pruned:
                assert set(module.kept) <= set(module.live)

    def test_unpruned_modules_report_no_live_names(self, project, out_dir, diamond_files):
        root = project(diamond_files)
        report = shake(root / "entry.js", out_dir)

        assert report.module(str(root / "entry.js")).live == []
        assert report.module(str(root / "shared.js")).live == ["s1", "s2"]

    def test_fingerprint_covers_analyzed_sources(self, project, out_dir, diamond_files):
        root = project(diamond_files)
        report = shake(root / "entry.js", out_dir)
        expected = graph_fingerprint((Path(m.path), Path(m.path).read_bytes()) for m in report.modules)

        assert report.fingerprint == expected

        (root / "shared.js").write_text("export const s1 = 1;\nexport const s2 = 2;\n", encoding="utf-8")
        assert shake(root / "entry.js", out_dir).fingerprint != report.fingerprint


class TestLayoutAndOutput:
    def test_tree_layout_preserves_directories(self, project, out_dir):
        root = project(
            {
                "app/main.js": "import { x } from '../lib/x.js';\nx();\n",
                "lib/x.js": "export function x() {}\nexport function y() {}\n",
            }
        )
        shake(root / "app" / "main.js", out_dir)

        assert read(out_dir / "lib" / "x.js") == "export function x() {}\n"
        assert (out_dir / "app" / "main.js").exists()

    def test_flat_layout_rejects_basename_collisions(self, project, out_dir):
        root = project(
            {
                "entry.js": "import { a } from './one/util.js';\nimport { b } from './two/util.js';\na(b);\n",
                "one/util.js": "export const a = 1;\n",
                "two/util.js": "export const b = 2;\n",
            }
        )

        with pytest.raises(OutputCollisionError):
            shake(root / "entry.js", out_dir, layout="flat")
        assert not out_dir.exists()

    def test_flat_layout_uses_basenames(self, project, out_dir):
        root = project(
            {
                "entry.js": "import { a } from './lib/util.js';\na();\n",
                "lib/util.js": "export const a = 1;\n",
            }
        )
        shake(root / "entry.js", out_dir, layout="flat")

        assert (out_dir / "util.js").exists()

    def test_dry_run_writes_nothing(self, project, out_dir, diamond_files):
        root = project(diamond_files)
        report = TreeShaker(Settings(dry_run=True)).run(root / "entry.js", out_dir)

        assert not out_dir.exists()
        assert all(m.output is None for m in report.modules)
        assert report.module(str(root / "shared.js")).removed == ["s3"]

    def test_output_directory_required(self, project):
        root = project({"entry.js": "console.log(1);\n"})

        with pytest.raises(ValueError):
            shake(root / "entry.js")

    def test_output_directory_from_settings(self, project, out_dir):
        root = project({"entry.js": "console.log(1);\n"})
        report = TreeShaker(Settings(out_dir=out_dir)).run(root / "entry.js")

        assert read(out_dir / "entry.js") == "console.log(1);\n"
        assert report.out_dir == str(out_dir)

    def test_existing_output_is_overwritten(self, project, out_dir):
        root = project({"entry.js": "console.log(1);\n"})
        out_dir.mkdir()
        (out_dir / "entry.js").write_text("stale output from an earlier run, longer than the new one\n")

        shake(root / "entry.js", out_dir)

        assert read(out_dir / "entry.js") == "console.log(1);\n"

    def test_bytes_outside_edits_are_preserved(self, tmp_path, out_dir):
        root = tmp_path / "src"
        root.mkdir()
        entry_src = b"import { a } from './x.js';\nconsole.log(a, '\xe9');\n"
        (root / "entry.js").write_bytes(entry_src)
        (root / "x.js").write_bytes(b"export const a = '\xe9';\nexport const b = 2;\n")

        shake(root / "entry.js", out_dir)

        assert (out_dir / "entry.js").read_bytes() == entry_src
        assert (out_dir / "x.js").read_bytes() == b"export const a = '\xe9';\n"


class TestCli:
    def test_writes_output_and_report(self, project, tmp_path, out_dir, diamond_files):
        root = project(diamond_files)
        report_path = tmp_path / "report.json"

        code = main([str(root / "entry.js"), "-o", str(out_dir), "--report", str(report_path)])

        assert code == 0
        data = json.loads(report_path.read_text(encoding="utf-8"))
        assert len(data["modules"]) == 4
        assert (out_dir / "shared.js").exists()

    def test_failure_exit_code(self, project, out_dir):
        root = project({"entry.js": "import { a } from './missing.js';\n"})

        assert main([str(root / "entry.js"), "-o", str(out_dir)]) == 1

    def test_invalid_environment_settings_exit_code(self, project, out_dir, monkeypatch):
        root = project({"entry.js": "console.log(1);\n"})
        monkeypatch.setenv("LITE_SHAKE_LAYOUT", "nested")

        assert main([str(root / "entry.js"), "-o", str(out_dir)]) == 1
        assert not out_dir.exists()
