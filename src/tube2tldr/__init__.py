"""tube2tldr - grab a video's transcript from the page and summarise it."""

from importlib import metadata

try:
    __version__ = metadata.version("tube2tldr")
except metadata.PackageNotFoundError:
    __version__ = "0.0.0"

__all__ = ["__version__"]
