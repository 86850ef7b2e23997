"""
custom_pallet.version — semantic version string.

Usage:
    from custom_pallet.version import __version__
"""

# Bump this when making a tagged release. Use semver (major.minor.patch).
__version__ = "0.1.0"

__all__ = ["__version__"]
