"""
Tests for package metadata.
"""

import exam_toolkit


class TestPackageMetadata:
    def test_version_when_run_from_source_then_matches_pyproject(self):
        assert exam_toolkit.__version__ == "0.3.0"

    def test_copyright_when_imported_then_names_project(self):
        assert "exam-toolkit" in exam_toolkit.__copyright__
