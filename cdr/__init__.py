"""Cloud Deploy release creation for CI pipelines."""

__version__ = "0.1.0"
