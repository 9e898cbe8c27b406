"""Application version reported by the OpenAPI document."""

import tomllib
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

DISTRIBUTION_NAME = "shopsphere-api"


def get_version() -> str:
    """Return the installed ``shopsphere-api`` version.

    A source checkout that was never installed reads ``pyproject.toml``
    at the repository root instead.
    """
    try:
        return version(DISTRIBUTION_NAME)
    except PackageNotFoundError:
        # src/api/infrastructure/version.py -> repository root
        project_file = Path(__file__).parents[3] / "pyproject.toml"
        with project_file.open("rb") as f:
            return tomllib.load(f)["project"]["version"]


__version__ = get_version()
