"""
Error taxonomy for the proxy endpoints
Every error carries the HTTP status code it is reported with
"""

from typing import Optional


class ProxyError(Exception):
    """Base class for errors that map directly to an HTTP error response"""

    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ClientInputError(ProxyError):
    """Malformed JSON or a missing/invalid request field"""

    status_code = 400


class ServerConfigError(ProxyError):
    """The server is missing configuration, e.g. a provider credential"""

    status_code = 500


class UpstreamError(ProxyError):
    """The AI provider failed or answered with an unusable payload"""

    status_code = 500


class UpstreamTimeoutError(UpstreamError):
    """The AI provider did not answer within the configured timeout"""

    status_code = 504
