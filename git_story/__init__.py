from importlib.metadata import version, PackageNotFoundError

from .story import build_story, generate_story

try:
    __version__ = version("git-story")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.0.0"

__all__ = ["build_story", "generate_story", "__version__"]
