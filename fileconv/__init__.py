"""file-converter core: per-file conversion tasks on a bounded worker pool."""

__version__ = "0.1.0"
