"""Tagged documentation comment parsing."""

from __future__ import annotations

import re

from stylevars.resolution.models import DocComment

_NAME_TAGS = ("@name",)
_DESCRIPTION_TAGS = ("@description", "@desc", "@doc")
_EXAMPLE_TAGS = ("@example",)


def parse_doc_comment(comment: str, value: str = "") -> DocComment:
    """Parse ``@name``, ``@description``/``@desc``/``@doc`` and ``@example`` tags.

    Without a description tag the first untagged non-blank line is used.
    ``value`` is carried through untouched; comments never override it.
    """
    lines = [line.strip() for line in comment.splitlines()]
    names = _tag_lines(lines, _NAME_TAGS)
    description = " ".join(_tag_lines(lines, _DESCRIPTION_TAGS)).strip()
    if not description:
        description = _main_description(lines)
    return DocComment(
        name=names[0] if names else "",
        description=description,
        value=value,
        examples=tuple(_tag_lines(lines, _EXAMPLE_TAGS)),
    )


def _main_description(lines: list[str]) -> str:
    for line in lines:
        if line and not line.startswith("@"):
            return line
    return ""


def _tag_lines(lines: list[str], tags: tuple[str, ...]) -> list[str]:
    pattern = re.compile(
        r"^(" + "|".join(re.escape(tag) for tag in tags) + r")\b", re.IGNORECASE
    )
    output: list[str] = []
    in_tag = False
    for line in lines:
        match = pattern.match(line)
        if match is not None:
            in_tag = True
            rest = line[match.end() :].strip()
            if rest:
                output.append(rest)
            continue
        if not in_tag:
            continue
        if line.startswith("@"):
            in_tag = False
        elif line:
            output.append(line)
    return output
