"""Pydantic models for the MS Teams connector MessageCard payload."""

from pydantic import BaseModel, ConfigDict, Field

MESSAGE_CARD_CONTEXT = "https://schema.org/extensions"


class _CardModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")


class Fact(_CardModel):
    name: str
    value: str


class Section(_CardModel):
    activity_title: str = Field(..., alias="activityTitle")
    activity_subtitle: str = Field(..., alias="activitySubtitle")
    activity_image: str | None = Field(None, alias="activityImage")
    facts: list[Fact] | None = None
    markdown: bool | None = None


class Target(_CardModel):
    os: str = "default"
    uri: str


class PotentialAction(_CardModel):
    type: str = Field("OpenUri", alias="@type")
    name: str
    targets: list[Target]


class MessageCard(_CardModel):
    type: str = Field("MessageCard", alias="@type")
    context: str = Field(MESSAGE_CARD_CONTEXT, alias="@context")
    theme_color: str = Field(..., alias="themeColor")
    summary: str
    sections: list[Section]
    potential_action: list[PotentialAction] = Field(..., alias="potentialAction")

    def to_payload(self) -> dict:
        """JSON-ready dict using the connector's field names."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
