"""Custom exception classes for the webhook relay."""


class HookRelayError(Exception):
    """Base exception for the relay. Each subclass maps to one response."""

    def __init__(self, code: str, message: str, status_code: int = 500):
        self.code = code
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class RequestError(HookRelayError):
    """Malformed method, event name or body sent by the caller."""

    def __init__(self, message: str, status_code: int = 400):
        super().__init__("REQUEST_ERROR", message, status_code=status_code)


class MethodNotAllowedError(RequestError):
    """Anything other than POST. Answered with 400 and an ``Allow`` header."""

    def __init__(self, message: str = "Unexpected HTTP method"):
        super().__init__(message)
        self.code = "BAD_METHOD"


class UnsupportedMediaTypeError(RequestError):
    """Missing or non-JSON ``Content-Type`` header."""

    def __init__(self, message: str = "Missing or bad content type header for a JSON payload"):
        super().__init__(message, status_code=415)
        self.code = "UNSUPPORTED_MEDIA_TYPE"


class AuthError(HookRelayError):
    """Signature header missing or not matching the body."""

    def __init__(self, message: str = "Missing or invalid GitHub webhook signature"):
        super().__init__("AUTH_ERROR", message, status_code=403)


class ConfigError(HookRelayError):
    """Operator misconfiguration: unusable secret, bad predicate or template."""

    def __init__(self, message: str):
        super().__init__("CONFIG_ERROR", message, status_code=500)


class QuerySyntaxError(ConfigError):
    """A configured query expression does not parse."""

    def __init__(self, expression: str, reason: str):
        self.expression = expression
        super().__init__(f"Invalid query expression {expression!r}: {reason}")
        self.code = "QUERY_SYNTAX_ERROR"


class TemplateError(ConfigError):
    """A template placeholder could not be evaluated."""

    def __init__(self, template: str, reason: str):
        self.template = template
        super().__init__(f"Could not render template {template!r}: {reason}")
        self.code = "TEMPLATE_ERROR"


class RelayError(HookRelayError):
    """The outbound delivery to the target URL did not complete."""

    def __init__(self, message: str):
        super().__init__("RELAY_ERROR", f"Could not deliver event to target URL: {message}", status_code=500)
