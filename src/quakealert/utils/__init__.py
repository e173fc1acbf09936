"""Application utilities."""

from .config import ensure_data_directory, initialize_application

__all__ = ["ensure_data_directory", "initialize_application"]
