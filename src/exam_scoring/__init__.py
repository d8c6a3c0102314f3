"""Top-level package for the exam scoring engine.

Provides subpackages:
- exam_scoring.core – immutable models, payload validation, serialization
- exam_scoring.grading – answer comparison, free-text scoring, aggregation
- exam_scoring.selection – randomised question set assembly
- exam_scoring.output – result store and PDF result sheet
"""

def _get_version() -> str:
    """Get version from pyproject.toml (dev) or importlib.metadata (installed)."""
    from pathlib import Path

    pyproject = Path(__file__).resolve().parent.parent.parent / "pyproject.toml"
    if pyproject.exists():
        for line in pyproject.read_text().splitlines():
            if line.strip().startswith("version"):
                # Parse: version = "0.1.0"
                return line.split("=")[1].strip().strip('"').strip("'")

    from importlib.metadata import PackageNotFoundError, version as pkg_version
    try:
        return pkg_version("exam-scoring-engine")
    except PackageNotFoundError:
        return "0.0.0"

__version__ = _get_version()
__all__: list[str] = ["__version__"]
