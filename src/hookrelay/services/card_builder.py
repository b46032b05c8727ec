"""Assembles the MS Teams card sent to the relay target."""

from __future__ import annotations

from typing import Any

from hookrelay.config import Settings
from hookrelay.models.msteams import MessageCard, PotentialAction, Section, Target
from hookrelay.services.template import render


def build_card(
    summary: str,
    title: str,
    subtitle: str,
    action_uri: str,
    action_name: str,
    theme_color: str,
) -> MessageCard:
    """Build a card with one section and one ``OpenUri`` action.

    Values are used as given; nothing is checked for length or URL shape.
    """
    return MessageCard(
        theme_color=theme_color,
        summary=summary,
        sections=[Section(activity_title=title, activity_subtitle=subtitle)],
        potential_action=[
            PotentialAction(
                name=action_name,
                targets=[Target(os="default", uri=action_uri)],
            )
        ],
    )


def render_card(settings: Settings, event_body: Any) -> MessageCard:
    """Render the four configured templates against the event body and build the card."""
    return build_card(
        summary=render(settings.ms_teams_summary_template, event_body),
        title=render(settings.ms_teams_title_template, event_body),
        subtitle=render(settings.ms_teams_subtitle_template, event_body),
        action_uri=render(settings.ms_teams_action_template_url, event_body),
        action_name=settings.ms_teams_action_name,
        theme_color=settings.ms_teams_theme_color,
    )
