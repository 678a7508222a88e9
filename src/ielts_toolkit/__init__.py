"""Top-level package for the IELTS toolkit.

Provides subpackages:
- ielts_toolkit.tags – gap tag lexing and allocation
- ielts_toolkit.sync – question reconciliation and debounced scheduling
- ielts_toolkit.scoring – answer evaluation and band scores
- ielts_toolkit.output – answer key PDFs
"""

def _get_version() -> str:
    """Get version from pyproject.toml (dev) or importlib.metadata (installed)."""
    from pathlib import Path

    pyproject = Path(__file__).resolve().parent.parent.parent / "pyproject.toml"
    if pyproject.exists():
        for line in pyproject.read_text(encoding="utf-8").splitlines():
            if line.strip().startswith("version"):
                # Parse: version = "0.1.0"
                return line.split("=")[1].strip().strip('"').strip("'")

    from importlib.metadata import PackageNotFoundError, version as pkg_version
    try:
        return pkg_version("ielts-toolkit")
    except PackageNotFoundError:
        return "0.0.0"

__version__ = _get_version()
__all__: list[str] = ["__version__"]
