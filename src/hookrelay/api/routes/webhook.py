"""Inbound GitHub webhook endpoint: verify, filter, adapt and relay."""

import json
import logging

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse, Response

from hookrelay.dependencies import AppMatchConfig, AppSettings, Relay
from hookrelay.errors.exceptions import (
    AuthError,
    MethodNotAllowedError,
    RequestError,
    UnsupportedMediaTypeError,
)
from hookrelay.models.enums import EventAction
from hookrelay.relay.client import passthrough_response_headers, select_forwarded_headers
from hookrelay.services.card_builder import render_card
from hookrelay.services.matcher import match, resolve
from hookrelay.services.signature import (
    SIGNATURE_HEADER,
    parse_event_name,
    raw_event_name,
    verify,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Webhook"])

DROPPED_MESSAGE = "Dropped by proxy"

# Methods outside this list are answered by the 405 handler in errors/handlers.py
_ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


@router.api_route("/{path:path}", methods=_ALL_METHODS)
async def receive_webhook(
    request: Request,
    settings: AppSettings,
    match_config: AppMatchConfig,
    relay: Relay,
) -> Response:
    """Handle one webhook delivery.

    Answers 202 when the event is filtered out, otherwise returns whatever the
    target URL answered to the relayed payload.
    """
    # Cheap sanity checks first
    if request.method != "POST":
        raise MethodNotAllowedError()

    if not request.headers.get("content-type", "").startswith("application/json"):
        raise UnsupportedMediaTypeError()

    event_name = parse_event_name(request.headers)
    if event_name is None:
        raise RequestError(
            f"Missing, invalid or unrecognized event name: {raw_event_name(request.headers)}"
        )

    raw_body = await request.body()
    try:
        body_text = raw_body.decode("utf-8")
    except UnicodeDecodeError:
        raise RequestError("The request body is not valid text")

    # Only parties knowing the shared secret get past this point
    if not verify(settings.secret_token, request.headers.get(SIGNATURE_HEADER), raw_body):
        raise AuthError()

    try:
        event_body = json.loads(body_text)
    except json.JSONDecodeError as exc:
        raise RequestError(f"JSON parse error: {exc}")

    logger.debug("Received %s event on %s", event_name, request.url.path)

    event_filter = match_config.filter_for(event_name)
    outcome = match(event_filter.predicate, event_body)
    action = resolve(outcome, event_filter.action, match_config.unmatched_default)
    logger.debug(
        "Event %s filtering outcome: %s, action: %s",
        event_name,
        outcome.value,
        action,
    )

    if action is EventAction.DROP:
        # Let GitHub know the delivery arrived even though it was filtered
        return PlainTextResponse(DROPPED_MESSAGE, status_code=202)

    if settings.adapt_to_ms_teams_webhook:
        card = render_card(settings, event_body)
        content = json.dumps(card.to_payload(), ensure_ascii=False).encode("utf-8")
    else:
        content = raw_body

    upstream = await relay.deliver_unless_disconnected(
        request.method,
        select_forwarded_headers(request.headers, settings.forwarded_headers),
        content,
        request.is_disconnected,
    )
    return Response(
        content=upstream.content,
        status_code=upstream.status_code,
        headers=passthrough_response_headers(upstream),
    )
