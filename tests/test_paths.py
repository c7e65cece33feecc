from __future__ import annotations

import unittest
from pathlib import Path

from ngtarbuild.errors import InvalidInputError
from ngtarbuild.paths import resolve_build_paths, validate_segment


class ResolveBuildPathsTests(unittest.TestCase):
    def test_paths_derive_from_project_and_app_name(self) -> None:
        paths = resolve_build_paths("clinic", project_path="/srv/web", compress=False)

        self.assertEqual(paths.project_root, Path("/srv/web"))
        self.assertEqual(paths.dist_dir, Path("/srv/web/dist"))
        self.assertEqual(paths.dist_base, Path("/srv/web/dist/clinic"))
        self.assertEqual(paths.build_output, Path("/srv/web/dist/clinic/browser"))
        self.assertEqual(paths.archive_path, Path("/srv/web/dist_clinic.tar"))
        self.assertEqual(paths.archive_folder_name, "clinic")

    def test_rename_changes_folder_but_not_archive_filename(self) -> None:
        paths = resolve_build_paths("app", project_path="/p", rename_folder="v2")

        self.assertEqual(paths.archive_folder_name, "v2")
        self.assertEqual(paths.archive_path, Path("/p/dist_app.tar.gz"))
        self.assertEqual(paths.dist_base, Path("/p/dist/app"))

    def test_relative_project_path_resolves_against_cwd(self) -> None:
        paths = resolve_build_paths("app", project_path="../site", cwd=Path("/home/dev/tools"))

        self.assertEqual(paths.project_root, Path("/home/dev/site"))

    def test_project_path_defaults_to_cwd(self) -> None:
        paths = resolve_build_paths("app", cwd=Path("/work"))

        self.assertEqual(paths.project_root, Path("/work"))

    def test_custom_build_output_dirname(self) -> None:
        paths = resolve_build_paths("app", project_path="/p", build_output_dirname="client")

        self.assertEqual(paths.build_output, Path("/p/dist/app/client"))


class ValidateSegmentTests(unittest.TestCase):
    def test_rejects_empty_and_traversal_names(self) -> None:
        for value in ("", "   ", ".", "..", "../app", "a/b", "a\\b", "x\0y", " app"):
            with self.subTest(value=value):
                with self.assertRaises(InvalidInputError):
                    validate_segment(value, "App name")

    def test_rejects_none(self) -> None:
        with self.assertRaises(InvalidInputError):
            validate_segment(None, "App name")

    def test_accepts_plain_names(self) -> None:
        for value in ("clinic", "my-doctor-app", "v2.1", "..hidden"):
            with self.subTest(value=value):
                self.assertEqual(validate_segment(value, "App name"), value)

    def test_invalid_rename_raises_before_any_paths(self) -> None:
        with self.assertRaises(InvalidInputError):
            resolve_build_paths("app", project_path="/p", rename_folder="../escape")


if __name__ == "__main__":
    unittest.main()
