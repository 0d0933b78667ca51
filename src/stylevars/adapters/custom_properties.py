"""CSS custom property scanner (``--name: value;``)."""

from __future__ import annotations

import re

from stylevars.adapters.base import has_extension
from stylevars.adapters.lexical import scan_declarations
from stylevars.index.models import VariableIndex
from stylevars.index.store import CUSTOM_PROPERTY_INDEX

_DECLARATION_RE = re.compile(
    r"(?:^|(?<=[{;]))\s*(?P<name>--[A-Za-z0-9_-]+)\s*:\s*(?P<value>[^;{}]*[^;{}\s])\s*;"
)


class CustomPropertyScanner:
    """Indexes custom properties from plain and preprocessed stylesheets."""

    name = "custom_properties"
    index_name = CUSTOM_PROPERTY_INDEX
    _extensions = (".css", ".scss", ".sass", ".less")

    def supports_path(self, path: str) -> bool:
        return has_extension(path, self._extensions)

    def index(self, text: str) -> VariableIndex:
        return scan_declarations(text, _DECLARATION_RE)
