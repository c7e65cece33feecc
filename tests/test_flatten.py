"""Build-output flattening tests.

Covers the move into the dist root, overwrite-on-collision, and failure
reporting when the nested output is missing or a move fails.
"""

from __future__ import annotations

import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from ngtarbuild.dist_tree import flatten_build_output
from ngtarbuild.errors import MissingBuildOutputError, PartialFlattenError


def _populate(build_output: Path) -> None:
    (build_output / "assets" / "img").mkdir(parents=True)
    (build_output / "assets" / "img" / "logo.svg").write_text("<svg/>", encoding="utf-8")
    (build_output / "main.js").write_text("console.log(1);\n", encoding="utf-8")
    (build_output / "index.csr.html").write_text("<html></html>\n", encoding="utf-8")


class FlattenBuildOutputTests(unittest.TestCase):
    def test_moves_children_up_and_removes_build_output(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            dist_base = Path(tmp) / "dist" / "app"
            build_output = dist_base / "browser"
            build_output.mkdir(parents=True)
            _populate(build_output)

            moved = flatten_build_output(build_output)

            self.assertFalse(build_output.exists())
            self.assertEqual([path.name for path in moved], ["assets", "index.csr.html", "main.js"])
            self.assertEqual((dist_base / "main.js").read_text(encoding="utf-8"), "console.log(1);\n")
            self.assertTrue((dist_base / "assets" / "img" / "logo.svg").is_file())

    def test_existing_destination_entries_are_overwritten(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            dist_base = Path(tmp) / "app"
            build_output = dist_base / "browser"
            build_output.mkdir(parents=True)
            _populate(build_output)
            (dist_base / "main.js").write_text("stale", encoding="utf-8")
            (dist_base / "assets").mkdir()
            (dist_base / "assets" / "old.css").write_text("stale", encoding="utf-8")

            flatten_build_output(build_output, dist_base)

            self.assertEqual((dist_base / "main.js").read_text(encoding="utf-8"), "console.log(1);\n")
            self.assertFalse((dist_base / "assets" / "old.css").exists())
            self.assertTrue((dist_base / "assets" / "img" / "logo.svg").is_file())

    def test_unrelated_dist_root_entries_are_kept(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            dist_base = Path(tmp) / "app"
            build_output = dist_base / "browser"
            build_output.mkdir(parents=True)
            _populate(build_output)
            (dist_base / "3rdpartylicenses.txt").write_text("MIT", encoding="utf-8")

            flatten_build_output(build_output)

            self.assertEqual((dist_base / "3rdpartylicenses.txt").read_text(encoding="utf-8"), "MIT")

    def test_child_named_like_build_output_survives(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            dist_base = Path(tmp) / "app"
            build_output = dist_base / "browser"
            (build_output / "browser").mkdir(parents=True)
            (build_output / "browser" / "shim.js").write_text("shim", encoding="utf-8")
            (build_output / "main.js").write_text("main", encoding="utf-8")

            moved = flatten_build_output(build_output)

            self.assertEqual([path.name for path in moved], ["main.js", "browser"])
            self.assertEqual((dist_base / "browser" / "shim.js").read_text(encoding="utf-8"), "shim")
            self.assertEqual(sorted(os.listdir(dist_base)), ["browser", "main.js"])

    def test_empty_build_output_is_removed(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            build_output = Path(tmp) / "app" / "browser"
            build_output.mkdir(parents=True)

            self.assertEqual(flatten_build_output(build_output), [])
            self.assertFalse(build_output.exists())

    def test_missing_build_output_raises(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            build_output = Path(tmp) / "app" / "browser"
            build_output.parent.mkdir(parents=True)

            with self.assertRaises(MissingBuildOutputError) as ctx:
                flatten_build_output(build_output)

            self.assertEqual(ctx.exception.path, build_output)

    def test_build_output_that_is_a_file_raises(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            build_output = Path(tmp) / "browser"
            build_output.write_text("not a dir", encoding="utf-8")

            with self.assertRaises(MissingBuildOutputError):
                flatten_build_output(build_output)

    def test_failed_move_reports_unmoved_entries(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            dist_base = Path(tmp) / "app"
            build_output = dist_base / "browser"
            build_output.mkdir(parents=True)
            _populate(build_output)
            real_replace = os.replace

            def flaky_replace(src, dst):
                if Path(src).name == "index.csr.html":
                    raise PermissionError("denied")
                return real_replace(src, dst)

            with mock.patch("ngtarbuild.dist_tree.flatten.os.replace", side_effect=flaky_replace):
                with self.assertRaises(PartialFlattenError) as ctx:
                    flatten_build_output(build_output)

            self.assertEqual(
                [path.name for path in ctx.exception.unmoved],
                ["index.csr.html", "main.js"],
            )
            self.assertIsInstance(ctx.exception.cause, PermissionError)
            self.assertTrue((dist_base / "assets").is_dir())
            self.assertTrue((build_output / "main.js").is_file())


if __name__ == "__main__":
    unittest.main()
