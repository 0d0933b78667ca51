"""Import graph resolution."""

from .cache import ImportCache
from .filesystem import Filesystem, LocalFilesystem, find_relative, project_relative
from .resolver import (
    MODULES_DIR_NAME,
    ImportNode,
    ImportResolver,
    extension_priority,
    has_explicit_extension,
)

__all__ = [
    "Filesystem",
    "ImportCache",
    "ImportNode",
    "ImportResolver",
    "LocalFilesystem",
    "MODULES_DIR_NAME",
    "extension_priority",
    "find_relative",
    "has_explicit_extension",
    "project_relative",
]
