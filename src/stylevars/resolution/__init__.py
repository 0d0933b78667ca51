"""Value classification, ranking and variable resolution."""

from .cache import ResolutionCache
from .cancellation import NEVER_CANCELLED, CancellationToken, ResolutionCancelled
from .colors import Color, color_to_hex, parse_css_color, to_hex_string
from .docs import parse_doc_comment
from .engine import DEFAULT_MAX_DEPTH, ResolutionEngine, describe, is_preprocessor_name
from .models import DocComment, ResolutionInfo, ResolvedEntry, VariableResolution
from .preprocessor import PreprocessorResolver, format_number, parse_quantity, swap_sigil
from .ranking import RankKey, media_pixels, rank, sort_contexts
from .scope import Scope, build_scope, scope_fingerprint
from .values import (
    ValueType,
    compare_colors,
    compare_numbers,
    compare_sizes,
    convert_to_pixels,
    is_numeric,
    is_size,
    sort_by_value,
    value_type,
)

__all__ = [
    "Color",
    "CancellationToken",
    "DEFAULT_MAX_DEPTH",
    "DocComment",
    "NEVER_CANCELLED",
    "PreprocessorResolver",
    "RankKey",
    "ResolutionCache",
    "ResolutionCancelled",
    "ResolutionEngine",
    "ResolutionInfo",
    "ResolvedEntry",
    "Scope",
    "ValueType",
    "VariableResolution",
    "build_scope",
    "color_to_hex",
    "compare_colors",
    "compare_numbers",
    "compare_sizes",
    "convert_to_pixels",
    "describe",
    "format_number",
    "is_numeric",
    "is_preprocessor_name",
    "is_size",
    "media_pixels",
    "parse_css_color",
    "parse_doc_comment",
    "parse_quantity",
    "rank",
    "scope_fingerprint",
    "sort_by_value",
    "sort_contexts",
    "swap_sigil",
    "to_hex_string",
    "value_type",
]
