"""
Safe placeholder interpolation for commit message templates.

Supported syntax:

``{{name}}``
    Replaced with ``variables[name]``, or with an empty string when the
    variable is missing.

``{{#name}}...{{/name}}``
    The inner text is kept only if ``variables[name]`` is present and
    not blank; otherwise the whole block disappears. Blocks may nest
    when they use different names.

Templates may come from user configuration, so nothing here evaluates
expressions or looks anything up beyond the supplied mapping.
"""

from __future__ import annotations

import re
from typing import Mapping, Set


_NAME = r"[a-zA-Z_][a-zA-Z0-9_.]{0,63}"
PLACEHOLDER_RE = re.compile(r"\{\{(" + _NAME + r")\}\}")
CONDITIONAL_RE = re.compile(r"\{\{#(" + _NAME + r")\}\}(.*?)\{\{/\1\}\}", re.DOTALL)
_BLANK_LINES_RE = re.compile(r"\n{3,}")

MAX_CONDITIONAL_PASSES = 10


def render(template: str, variables: Mapping[str, str]) -> str:
    """Interpolate ``template`` with ``variables``.

    Conditional blocks are resolved first (repeatedly, to unwrap nested
    blocks), then placeholders. Runs of three or more newlines left behind
    by removed blocks are collapsed to one blank line and the result is
    stripped. A template without any markup is returned untouched.
    """
    if not has_markup(template):
        return template

    result = template
    for _ in range(MAX_CONDITIONAL_PASSES):
        resolved = CONDITIONAL_RE.sub(lambda m: _resolve_block(m, variables), result)
        if resolved == result:
            break
        result = resolved

    result = PLACEHOLDER_RE.sub(lambda m: variables.get(m.group(1)) or "", result)
    return _BLANK_LINES_RE.sub("\n\n", result).strip()


def extract_variable_names(template: str) -> Set[str]:
    """Names referenced by placeholders or conditional blocks."""
    names = set(PLACEHOLDER_RE.findall(template))
    names.update(m.group(1) for m in CONDITIONAL_RE.finditer(template))
    return names


def has_markup(template: str) -> bool:
    return bool(PLACEHOLDER_RE.search(template) or CONDITIONAL_RE.search(template))


def _resolve_block(match: "re.Match[str]", variables: Mapping[str, str]) -> str:
    value = variables.get(match.group(1))
    if value is not None and value.strip():
        return match.group(2)
    return ""
