"""Local storage adapters."""

from .json_file import JsonFileStore

__all__ = ["JsonFileStore"]
