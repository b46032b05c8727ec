"""Renders text templates with embedded ``|<jsonpath>|`` placeholders."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

from hookrelay.errors.exceptions import ConfigError, TemplateError
from hookrelay.services.query import find_values, to_text

_PLACEHOLDER = re.compile(r"\|(.*?)\|")

MULTI_VALUE_SEPARATOR = ", "


@dataclass(frozen=True)
class Span:
    """One piece of a scanned template: literal text or a placeholder."""

    text: str
    expression: str | None = None

    @property
    def is_placeholder(self) -> bool:
        return self.expression is not None


def scan(template: str) -> list[Span]:
    """Split a template into alternating literal and placeholder spans.

    Placeholders are the shortest ``|...|`` pairs read left to right. A
    trailing unpaired ``|`` stays in the literal text.
    """
    spans: list[Span] = []
    position = 0
    for found in _PLACEHOLDER.finditer(template):
        if found.start() > position:
            spans.append(Span(template[position:found.start()]))
        spans.append(Span(found.group(0), expression=found.group(1)))
        position = found.end()
    if position < len(template):
        spans.append(Span(template[position:]))
    return spans


def substitution_value(expression: str, document: Any) -> str:
    """Text a placeholder is replaced with: empty, the single value, or all values joined."""
    if not expression.strip():
        return ""
    values = find_values(expression, document)
    return MULTI_VALUE_SEPARATOR.join(to_text(value) for value in values)


def render(template: str, document: Any) -> str:
    """Render ``template`` against ``document``.

    Identical placeholders are evaluated once and every occurrence gets the
    same text.

    Raises:
        TemplateError: if a placeholder does not parse or fails to evaluate.
    """
    evaluated: dict[str, str] = {}
    parts: list[str] = []
    for span in scan(template):
        if not span.is_placeholder:
            parts.append(span.text)
            continue
        if span.text not in evaluated:
            try:
                evaluated[span.text] = substitution_value(span.expression, document)
            except ConfigError as exc:
                raise TemplateError(template, exc.message) from exc
        parts.append(evaluated[span.text])
    return "".join(parts)
