"""GitHub webhook signature verification and event header parsing.

GitHub signs the raw request body with HMAC-SHA256 using the webhook secret
and sends ``sha256=<hexdigest>`` in ``X-Hub-Signature-256``.
See: https://docs.github.com/en/webhooks/using-webhooks/validating-webhook-deliveries
"""

import hashlib
import hmac
from collections.abc import Mapping

from hookrelay.errors.exceptions import ConfigError
from hookrelay.models.enums import GitHubEvent

EVENT_HEADER = "X-GitHub-Event"
SIGNATURE_HEADER = "X-Hub-Signature-256"
SIGNATURE_PREFIX = "sha256="
_ALGORITHM = "sha256"


def sign(secret: str, body: bytes) -> str:
    """Return the ``sha256=<hexdigest>`` header value GitHub would send for ``body``."""
    return SIGNATURE_PREFIX + _digest(secret, body)


def verify(secret: str, signature_header: str | None, body: bytes) -> bool:
    """Check a signature header against the raw body in constant time.

    A missing, malformed or wrong signature returns False.

    Raises:
        ConfigError: if the secret is empty or the hash primitive is unavailable.
    """
    expected = _digest(secret, body)
    if not signature_header or not signature_header.startswith(SIGNATURE_PREFIX):
        return False
    provided = signature_header[len(SIGNATURE_PREFIX):].strip().lower()
    try:
        provided.encode("ascii")
    except UnicodeEncodeError:
        return False
    return hmac.compare_digest(expected, provided)


def _digest(secret: str, body: bytes) -> str:
    if not secret:
        raise ConfigError("Crypto error (bad relay configuration?): webhook secret is not set")
    try:
        return hmac.new(secret.encode("utf-8"), body, getattr(hashlib, _ALGORITHM)).hexdigest()
    except (AttributeError, ValueError, TypeError) as exc:
        raise ConfigError(f"Crypto error (bad relay configuration?): {exc}") from exc


def raw_event_name(headers: Mapping[str, str]) -> str | None:
    return headers.get(EVENT_HEADER)


def parse_event_name(headers: Mapping[str, str]) -> GitHubEvent | None:
    """Return the delivery's event name, or None if missing or not a known event."""
    raw = raw_event_name(headers)
    if raw is None:
        return None
    try:
        return GitHubEvent(raw.strip())
    except ValueError:
        return None
