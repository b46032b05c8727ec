"""JSONPath query compilation and evaluation against event bodies."""

from __future__ import annotations

import copy
import json
import logging
from functools import lru_cache
from typing import Any

from jsonpath_ng.exceptions import JSONPathError
from jsonpath_ng.ext import parse
from jsonpath_ng.ext.filter import Filter
from jsonpath_ng.ext.iterable import SortedThis
from jsonpath_ng.jsonpath import JSONPath, Child, Index, Intersect, Root, Slice

from hookrelay.errors.exceptions import ConfigError, QuerySyntaxError

logger = logging.getLogger(__name__)

# Raised by jsonpath-ng when a valid expression meets values it cannot compare
_EVALUATION_ERRORS = (TypeError, ValueError, KeyError, AttributeError)

# Steps that, applied straight to the root, address the list wrapping a predicate's document
_ROOT_SUBSCRIPTS = (Filter, Index, Slice, SortedThis)


@lru_cache(maxsize=256)
def compile_query(expression: str) -> JSONPath:
    """Parse a JSONPath expression using the extended grammar (filters, arithmetic).

    Raises:
        QuerySyntaxError: if the expression does not parse or uses ``&``,
            which jsonpath-ng parses but cannot evaluate.
    """
    try:
        path = parse(expression)
    except JSONPathError as exc:
        raise QuerySyntaxError(expression, str(exc)) from exc
    if _contains(path, Intersect):
        raise QuerySyntaxError(expression, "the '&' operator is not supported")
    return path


def _contains(path: JSONPath, node_type: type) -> bool:
    if isinstance(path, node_type):
        return True
    return any(
        isinstance(child, JSONPath) and _contains(child, node_type)
        for child in (getattr(path, "left", None), getattr(path, "right", None))
    )


@lru_cache(maxsize=256)
def compile_predicate(expression: str) -> JSONPath:
    """Compile a predicate meant to run against ``[document]``.

    Every root reference is rewritten to go through the wrapping list first,
    so ``$.action``, ``$..login`` and ``($.a) | ($.b)`` select exactly what they
    select on the bare document. A subscript applied directly to the root
    (``$[?(@.action == 'opened')]``, ``$[0]``, ``$[*]``) is left alone and sees
    the document as the single list element.
    """
    return _address_document(compile_query(expression))


def _address_document(path: JSONPath) -> JSONPath:
    if isinstance(path, Root):
        return Child(Root(), Slice())
    if isinstance(path, Child) and isinstance(path.left, Root) and isinstance(path.right, _ROOT_SUBSCRIPTS):
        return path
    # Child, Descendants, Union, Where, WhereNot and arithmetic all keep their operands here
    left = getattr(path, "left", None)
    right = getattr(path, "right", None)
    if not isinstance(left, JSONPath) and not isinstance(right, JSONPath):
        return path
    rewritten = copy.copy(path)
    if isinstance(left, JSONPath):
        rewritten.left = _address_document(left)
    if isinstance(right, JSONPath):
        rewritten.right = _address_document(right)
    return rewritten


def find_values(expression: str, document: Any) -> list[Any]:
    """Return every value selected by ``expression`` in result order.

    Raises:
        ConfigError: if the expression does not parse or fails on ``document``.
    """
    path = compile_query(expression)
    try:
        return _evaluate(path, document)
    except _EVALUATION_ERRORS as exc:
        logger.error("Query %r failed during evaluation: %s", expression, exc)
        raise ConfigError(f"Query {expression!r} failed during evaluation: {exc}") from exc


def has_match(expression: str, document: Any) -> bool:
    """True if the predicate selects at least one value from ``[document]``.

    A predicate that parses but cannot be applied to this body's values (for
    example comparing a number with a string) selects nothing.
    """
    path = compile_predicate(expression)
    try:
        return len(_evaluate(path, [document])) > 0
    except _EVALUATION_ERRORS as exc:
        logger.info("Predicate %r selected nothing from this body: %s", expression, exc)
        return False


def _evaluate(path: JSONPath, document: Any) -> list[Any]:
    try:
        return [match.value for match in path.find(document)]
    except (JSONPathError, NotImplementedError) as exc:
        raise ConfigError(f"Query {str(path)!r} cannot be evaluated: {exc}") from exc


def to_text(value: Any) -> str:
    """Plain textual form of a selected value, without added quoting."""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    return str(value)
