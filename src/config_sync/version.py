"""Detect an installed package that lags behind its source checkout."""

import tomllib
from pathlib import Path


def check_version_consistency() -> tuple[bool, str]:
    """Compare the runtime ``__version__`` with ``pyproject.toml``.

    Returns:
        Tuple of (is_consistent, message).  When the package is not run
        from a source checkout there is nothing to compare against and
        the result is ``(True, ...)``.
    """
    from . import __version__ as runtime_version

    pyproject_path = Path(__file__).parent.parent.parent / "pyproject.toml"
    if not pyproject_path.exists():
        return True, f"Running installed version {runtime_version}"

    try:
        with open(pyproject_path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        return False, f"Failed to read version from pyproject.toml: {e}"

    source_version = data.get("project", {}).get("version", "unknown")
    if runtime_version != source_version:
        return False, (
            f"Version mismatch detected! "
            f"Runtime: {runtime_version}, Source: {source_version}. "
            f"Reinstall with: pip install -e ."
        )
    return True, f"Version verified: {runtime_version}"
