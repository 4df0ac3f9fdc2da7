"""Infra layer utilities (storage)."""

from .storage import JsonFileStore

__all__ = ["JsonFileStore"]
