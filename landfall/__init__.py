"""landfall - post-download finalization for batch download managers."""

__version__ = "0.1.0"
