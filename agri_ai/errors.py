"""Exceptions raised across the service.

Routers map these to HTTP responses:
``InvalidRequestError`` -> 400, everything else -> 500.
"""


class AgriAIError(Exception):
    """Base class for service errors"""


class ConfigurationError(AgriAIError):
    """A required setting (credential, URL) is missing"""


class GatewayConfigError(ConfigurationError):
    """The language model credential is not configured"""


class GatewayError(AgriAIError):
    """The language model call failed"""


class InvalidRequestError(AgriAIError):
    """The caller sent an unusable request"""
