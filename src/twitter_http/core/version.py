"""Package version lookup."""

from importlib.metadata import PackageNotFoundError, version

DISTRIBUTION_NAME = "twitter-http-core"


def get_version() -> str:
    """Version from package metadata (single source of truth in pyproject.toml)."""
    try:
        return version(DISTRIBUTION_NAME)
    except PackageNotFoundError:
        # Package is not installed (development mode)
        return "0.0.0-dev"
