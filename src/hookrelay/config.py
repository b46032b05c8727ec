"""Application configuration via environment variables."""

from pydantic import BaseModel, ConfigDict
from pydantic_settings import BaseSettings

from hookrelay.models.enums import EventAction, GitHubEvent


class EventFilter(BaseModel):
    """What to do with one event type when its predicate matches."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    predicate: str | None = None
    action: EventAction | None = None


class Settings(BaseSettings):
    # Shared secret used by GitHub to sign deliveries
    secret_token: str = ""

    # Relay destination
    target_url: str = "http://localhost:9000/webhook"
    relay_timeout_seconds: float = 10.0

    # Filtering
    unmatched_event_action: EventAction = EventAction.DROP
    event_filters: dict[GitHubEvent, EventFilter] = {}

    # MS Teams card adaptation (set to false to relay bodies verbatim)
    adapt_to_ms_teams_webhook: bool = True
    ms_teams_summary_template: str = "|$.repository.full_name| event"
    ms_teams_title_template: str = "|$.repository.full_name|"
    ms_teams_subtitle_template: str = "|$.sender.login|"
    ms_teams_action_name: str = "Open in GitHub"
    ms_teams_action_template_url: str = "|$.repository.html_url|"
    ms_teams_theme_color: str = "0076D7"

    # Inbound headers copied onto the outbound request
    forwarded_headers: list[str] = [
        "user-agent",
        "x-github-event",
        "x-github-delivery",
        "x-github-hook-id",
        "x-github-hook-installation-target-id",
        "x-github-hook-installation-target-type",
    ]

    # Server
    host: str = "0.0.0.0"
    port: int = 8080
    log_level: str = "info"
    json_logs: bool = True

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "HOOKRELAY_",
    }

    def build_match_config(self) -> "MatchConfig":
        """Build the per-event filtering rules keyed by event name."""
        return MatchConfig(
            filters=dict(self.event_filters),
            unmatched_default=self.unmatched_event_action,
        )


class MatchConfig(BaseModel):
    """Immutable filtering rules consulted once per delivery."""

    model_config = ConfigDict(frozen=True)

    filters: dict[GitHubEvent, EventFilter] = {}
    unmatched_default: EventAction = EventAction.DROP

    def filter_for(self, event: GitHubEvent) -> EventFilter:
        return self.filters.get(event, EventFilter())


settings = Settings()
