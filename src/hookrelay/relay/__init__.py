"""Relay collaborator: delivers adapted events to the target URL."""

from hookrelay.relay.client import TargetRelay, passthrough_response_headers, select_forwarded_headers

__all__ = ["TargetRelay", "passthrough_response_headers", "select_forwarded_headers"]
