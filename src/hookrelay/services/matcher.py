"""Per-event filtering: predicate matching and the relay/drop decision table."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any

from hookrelay.models.enums import EventAction
from hookrelay.services.query import has_match

logger = logging.getLogger(__name__)


class MatchOutcome(Enum):
    """Result of checking an event body against its configured predicate."""

    PREDICATE_ABSENT = "predicate_absent"
    PREDICATE_MATCHED = "predicate_matched"
    PREDICATE_UNMATCHED = "predicate_unmatched"


def match(predicate: str | None, document: Any) -> MatchOutcome:
    """Evaluate ``predicate`` against the parsed event body.

    Raises:
        ConfigError: if the predicate does not parse or fails to evaluate.
    """
    if predicate is None:
        return MatchOutcome.PREDICATE_ABSENT
    if has_match(predicate, document):
        return MatchOutcome.PREDICATE_MATCHED
    return MatchOutcome.PREDICATE_UNMATCHED


def resolve(
    outcome: MatchOutcome,
    configured_action: EventAction | None,
    unmatched_default: EventAction = EventAction.DROP,
) -> EventAction:
    """Turn a match outcome into the action to take.

    The configured action describes what happens when the predicate matches.
    A match without an explicit action is dropped; a body that does not match
    gets the opposite of the configured action, so it is relayed unless the
    configured action was ``relay``. Events without a predicate fall back to
    ``unmatched_default``.
    """
    if outcome is MatchOutcome.PREDICATE_ABSENT:
        return unmatched_default
    if outcome is MatchOutcome.PREDICATE_MATCHED:
        return configured_action or EventAction.DROP
    if outcome is MatchOutcome.PREDICATE_UNMATCHED:
        if configured_action is EventAction.RELAY:
            return EventAction.DROP
        return EventAction.RELAY
    raise ValueError(f"Unhandled match outcome: {outcome!r}")
