"""Tests for predicate matching and the relay/drop decision table."""

import pytest

from hookrelay.config import EventFilter, MatchConfig
from hookrelay.errors.exceptions import ConfigError, QuerySyntaxError
from hookrelay.models.enums import EventAction, GitHubEvent
from hookrelay.services.matcher import MatchOutcome, match, resolve
from hookrelay.services.query import find_values


# ---------------------------------------------------------------------------
# match
# ---------------------------------------------------------------------------


def test_no_predicate_is_absent(pull_request_event):
    assert match(None, pull_request_event) is MatchOutcome.PREDICATE_ABSENT


def test_root_member_predicate_matches(pull_request_event):
    assert match("$.action", pull_request_event) is MatchOutcome.PREDICATE_MATCHED


def test_nested_member_predicate_matches(pull_request_event):
    assert match("$.pull_request.head.user.login", pull_request_event) is MatchOutcome.PREDICATE_MATCHED


def test_missing_member_is_unmatched(pull_request_event):
    assert match("$.pull_request.merged_by", pull_request_event) is MatchOutcome.PREDICATE_UNMATCHED


def test_root_filter_sees_document_as_list_element(pull_request_event):
    assert match("$[?(@.action == 'opened')]", pull_request_event) is MatchOutcome.PREDICATE_MATCHED
    assert match("$[?(@.action == 'closed')]", pull_request_event) is MatchOutcome.PREDICATE_UNMATCHED


def test_nested_filter(pull_request_event):
    predicate = "$.pull_request.labels[?(@.name == 'ci')]"
    assert match(predicate, pull_request_event) is MatchOutcome.PREDICATE_MATCHED


def test_descendant_predicate(pull_request_event):
    assert match("$..login", pull_request_event) is MatchOutcome.PREDICATE_MATCHED


def test_union_predicate_matches_either_side(pull_request_event):
    assert match("($.action) | ($.missing)", pull_request_event) is MatchOutcome.PREDICATE_MATCHED
    assert match("($.missing) | ($.action)", pull_request_event) is MatchOutcome.PREDICATE_MATCHED
    assert match("$.missing | $.action", pull_request_event) is MatchOutcome.PREDICATE_MATCHED
    assert match("($.missing) | ($.absent)", pull_request_event) is MatchOutcome.PREDICATE_UNMATCHED


@pytest.mark.parametrize(
    "expression",
    [
        "$",
        "$.action",
        "$.missing",
        "$..login",
        "$.pull_request.labels[*].name",
        "$.pull_request.labels[?(@.name == 'ci')]",
        "($.action) | ($.missing)",
        "$.missing | $.action",
        # "|" binds tighter than ".", so this reads as ($.action | $).missing
        "$.action | $.missing",
        "$.pull_request where head",
        "$.pull_request wherenot head",
    ],
)
def test_root_relative_predicate_agrees_with_plain_query(pull_request_event, expression):
    matched = match(expression, pull_request_event) is MatchOutcome.PREDICATE_MATCHED
    assert matched == bool(find_values(expression, pull_request_event))


def test_where_predicates(pull_request_event):
    assert match("$.pull_request where head", pull_request_event) is MatchOutcome.PREDICATE_MATCHED
    assert match("$.pull_request where merged_by", pull_request_event) is MatchOutcome.PREDICATE_UNMATCHED
    assert match("$.pull_request wherenot merged_by", pull_request_event) is MatchOutcome.PREDICATE_MATCHED


def test_bracketed_root_member_matches(pull_request_event):
    assert match("$['action']", pull_request_event) is MatchOutcome.PREDICATE_MATCHED


def test_intersection_predicate_is_config_error(pull_request_event):
    with pytest.raises(QuerySyntaxError, match="not supported"):
        match("$.action & $.action", pull_request_event)


def test_predicate_comparing_mismatched_types_selects_nothing():
    assert match("$[?(@.number > 'x')]", {"number": 3}) is MatchOutcome.PREDICATE_UNMATCHED


def test_invalid_predicate_is_config_error(pull_request_event):
    with pytest.raises(QuerySyntaxError):
        match("$[", pull_request_event)


def test_invalid_predicate_is_never_a_silent_miss():
    with pytest.raises(ConfigError):
        match("$.action[?(", {})


# ---------------------------------------------------------------------------
# resolve
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "outcome, configured, unmatched_default, expected",
    [
        (MatchOutcome.PREDICATE_ABSENT, None, EventAction.DROP, EventAction.DROP),
        (MatchOutcome.PREDICATE_ABSENT, None, EventAction.RELAY, EventAction.RELAY),
        (MatchOutcome.PREDICATE_ABSENT, EventAction.RELAY, EventAction.DROP, EventAction.DROP),
        (MatchOutcome.PREDICATE_MATCHED, None, EventAction.RELAY, EventAction.DROP),
        (MatchOutcome.PREDICATE_MATCHED, EventAction.RELAY, EventAction.DROP, EventAction.RELAY),
        (MatchOutcome.PREDICATE_MATCHED, EventAction.DROP, EventAction.RELAY, EventAction.DROP),
        (MatchOutcome.PREDICATE_UNMATCHED, None, EventAction.DROP, EventAction.RELAY),
        (MatchOutcome.PREDICATE_UNMATCHED, EventAction.DROP, EventAction.DROP, EventAction.RELAY),
        (MatchOutcome.PREDICATE_UNMATCHED, EventAction.RELAY, EventAction.RELAY, EventAction.DROP),
    ],
)
def test_decision_table(outcome, configured, unmatched_default, expected):
    assert resolve(outcome, configured, unmatched_default) is expected


def test_unconfigured_events_drop_by_default():
    config = MatchConfig()
    for event in GitHubEvent:
        rule = config.filter_for(event)
        outcome = match(rule.predicate, {"action": "opened"})
        assert resolve(outcome, rule.action, config.unmatched_default) is EventAction.DROP


def test_relay_action_inverts_for_unmatched_bodies():
    rule = EventFilter(predicate="$[?(@.action == 'opened')]", action=EventAction.RELAY)
    opened = resolve(match(rule.predicate, {"action": "opened"}), rule.action)
    closed = resolve(match(rule.predicate, {"action": "closed"}), rule.action)
    assert opened is EventAction.RELAY
    assert closed is EventAction.DROP


def test_match_config_lookup_by_event():
    config = MatchConfig(
        filters={GitHubEvent.PUSH: EventFilter(predicate="$.ref", action=EventAction.RELAY)},
        unmatched_default=EventAction.RELAY,
    )
    assert config.filter_for(GitHubEvent.PUSH).predicate == "$.ref"
    assert config.filter_for(GitHubEvent.ISSUES) == EventFilter()
