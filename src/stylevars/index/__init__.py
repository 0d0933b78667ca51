"""Stylesheet index storage and refresh package."""

from .codec import ENTRY_SEP, FIELD_SEP, decode_entries, encode_entries, encode_entry
from .discovery import (
    detect_index_delta,
    discover_files,
    file_key,
    is_library_file,
    key_to_path,
    record_map,
)
from .manager import INDEX_SCHEMA_VERSION, IndexManager, IndexSchemaUnsupportedError, IndexStatus
from .models import DEFAULT_CONTEXT, FileRecord, IndexDelta, VariableEntry, VariableIndex
from .store import CUSTOM_PROPERTY_INDEX, INDEX_NAMES, PREPROCESSOR_INDEX, Contributions, IndexStore

__all__ = [
    "CUSTOM_PROPERTY_INDEX",
    "Contributions",
    "DEFAULT_CONTEXT",
    "ENTRY_SEP",
    "FIELD_SEP",
    "FileRecord",
    "INDEX_NAMES",
    "INDEX_SCHEMA_VERSION",
    "IndexDelta",
    "IndexManager",
    "IndexSchemaUnsupportedError",
    "IndexStatus",
    "IndexStore",
    "PREPROCESSOR_INDEX",
    "VariableEntry",
    "VariableIndex",
    "decode_entries",
    "detect_index_delta",
    "discover_files",
    "encode_entries",
    "encode_entry",
    "file_key",
    "is_library_file",
    "key_to_path",
    "record_map",
]
