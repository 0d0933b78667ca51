"""LESS (``@name``) and SCSS/SASS (``$name``) variable scanner."""

from __future__ import annotations

import re

from stylevars.adapters.base import has_extension
from stylevars.adapters.lexical import scan_declarations
from stylevars.index.models import VariableIndex
from stylevars.index.store import PREPROCESSOR_INDEX

_DECLARATION_RE = re.compile(
    r"(?:^|(?<=[{;]))\s*(?P<name>[@$][A-Za-z_][A-Za-z0-9_-]*)\s*:\s*"
    r"(?P<value>[^;{}]*[^;{}\s])\s*;"
)
_FLAG_RE = re.compile(r"\s*!(?:default|global)\s*$", re.IGNORECASE)


def strip_flags(value: str) -> str:
    """Drop trailing SCSS assignment flags such as ``!default``."""
    previous = None
    while previous != value:
        previous = value
        value = _FLAG_RE.sub("", value)
    return value.strip()


class PreprocessorScanner:
    """Indexes preprocessor variables with the same context/comment tracking."""

    name = "preprocessor"
    index_name = PREPROCESSOR_INDEX
    _extensions = (".scss", ".sass", ".less")

    def supports_path(self, path: str) -> bool:
        return has_extension(path, self._extensions)

    def index(self, text: str) -> VariableIndex:
        return scan_declarations(text, _DECLARATION_RE, normalize_value=strip_flags)
