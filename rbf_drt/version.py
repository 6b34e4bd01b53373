"""
Version information for RBF-DRT.

This is the SINGLE SOURCE OF TRUTH for version information.
All other files should import from here.
"""

__version__ = '0.3.0'
__version_info__ = (0, 3, 0)
__release_date__ = '2026-10-18'

# Breaking changes in this version
__breaking_changes__ = [
    "Unknown method strings now raise InvalidInputError instead of failing later",
    "Peak filtering returns a new index array instead of deleting in place",
]

# Human-readable version string
def get_version_string():
    """Return formatted version string."""
    return f"v{__version__} ({__release_date__})"

# For compatibility
VERSION = __version__
