"""Application version, resolved from installed metadata or pyproject.toml."""

import tomllib
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

DISTRIBUTION_NAME = "habit-metrics"

_PROJECT_ROOT = Path(__file__).resolve().parent.parent


def get_version() -> str:
    """Return the installed distribution version.

    Falls back to reading pyproject.toml when running from a source checkout
    that was never installed.
    """
    try:
        return version(DISTRIBUTION_NAME)
    except PackageNotFoundError:
        with open(_PROJECT_ROOT / "pyproject.toml", "rb") as f:
            data = tomllib.load(f)
        return data["project"]["version"]


__version__: str = get_version()
