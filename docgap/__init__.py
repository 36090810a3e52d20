"""docgap: documentation content-gap detection from conversation logs."""

__version__ = "0.1.0"
