"""Resource storage and name-based resolution."""

from perch.resources.resolver import Resolver, resolve_extension
from perch.resources.store import DictStore, FileSystemStore, ResourceStore

__all__ = [
    "DictStore",
    "FileSystemStore",
    "Resolver",
    "ResourceStore",
    "resolve_extension",
]
