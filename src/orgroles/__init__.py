"""orgroles - list the users of an organization together with their roles."""


def _get_version():
    """Get the version from package metadata or pyproject.toml."""
    try:
        from importlib.metadata import PackageNotFoundError, version

        return version("orgroles")
    except PackageNotFoundError:
        # Fallback for development checkouts that were never installed
        import re
        from pathlib import Path

        pyproject_path = Path(__file__).parent.parent.parent / "pyproject.toml"
        if not pyproject_path.exists():
            return "0.0.0"

        with open(pyproject_path, "r", encoding="utf-8") as f:
            version_match = re.search(r'^version\s*=\s*["\']([^"\']+)["\']', f.read(), re.M)
        return version_match.group(1) if version_match else "0.0.0"


__version__ = _get_version()

__all__ = ["__version__"]
