"""Stylesheet declaration scanners."""

from .base import DeclarationScanner
from .custom_properties import CustomPropertyScanner
from .lexical import (
    clean_comment,
    extract_import_paths,
    header_context,
    mask_comments,
    scan_declarations,
)
from .preprocessor import PreprocessorScanner, strip_flags
from .registry import ScannerRegistry, build_scanner_registry

__all__ = [
    "CustomPropertyScanner",
    "DeclarationScanner",
    "PreprocessorScanner",
    "ScannerRegistry",
    "build_scanner_registry",
    "clean_comment",
    "extract_import_paths",
    "header_context",
    "mask_comments",
    "scan_declarations",
    "strip_flags",
]
