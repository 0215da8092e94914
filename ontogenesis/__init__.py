"""ontogenesis — self-generating kernel populations. Breed, select, evolve."""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("ontogenesis")
except PackageNotFoundError:
    __version__ = "0.1.0"  # fallback for development
