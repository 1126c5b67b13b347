"""Top-level package for the Exam Toolkit.

Provides subpackages:
- exam_toolkit.core – question, session and result models
- exam_toolkit.storage – question and result stores
- exam_toolkit.sourcing – local/remote/generated question sourcing
- exam_toolkit.builder – exam composition, sessions and grading
"""

def _get_version() -> str:
    """Get version from pyproject.toml (dev) or importlib.metadata (installed)."""
    from pathlib import Path

    pyproject = Path(__file__).resolve().parent.parent.parent / "pyproject.toml"
    if pyproject.exists():
        for line in pyproject.read_text().splitlines():
            if line.strip().startswith("version"):
                # Parse: version = "0.3.0"
                return line.split("=")[1].strip().strip('"').strip("'")

    from importlib.metadata import PackageNotFoundError, version as pkg_version
    try:
        return pkg_version("exam-toolkit")
    except PackageNotFoundError:
        return "0.0.0"

__version__ = _get_version()
__copyright__ = "Copyright 2026 exam-toolkit contributors"
__all__: list[str] = ["__version__"]
