"""QueryWise HTTP API."""

from query_wise import __version__

__all__ = ["__version__"]
