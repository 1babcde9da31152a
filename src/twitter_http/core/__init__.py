"""Core модули клиента API: исполнитель запросов и классификация ошибок."""

from .config import TimeoutConfig, ProxyConfig, HttpClientConfig
from .env_config import HttpClientSettings, load_from_env
from .exceptions import (
    ApiError,
    ApiException,
    ConfigurationError,
    decode_error_body,
)
from .error_codes import ErrorCode, ERROR_CODES, try_resolve, resolve
from .diagnosis import DiagnosticFingerprint, StackFrame, capture_stack
from .rate_limit import RateLimitStatus
from .request import (
    Authorization,
    BearerAuthorization,
    NullAuthorization,
    HttpParameter,
    HttpRequest,
    HttpResponse,
    HttpResponseEvent,
    HttpResponseListener,
    RequestMethod,
    TweetMediaType,
)
from .error_handler import ErrorHandler
from .http_client import HttpClientBase, HttpClient, create_ssl_context

__all__ = [
    # Config
    "TimeoutConfig",
    "ProxyConfig",
    "HttpClientConfig",
    "HttpClientSettings",
    "load_from_env",
    # Exceptions
    "ApiError",
    "ApiException",
    "ConfigurationError",
    "decode_error_body",
    "ErrorHandler",
    # Error codes / diagnostics
    "ErrorCode",
    "ERROR_CODES",
    "try_resolve",
    "resolve",
    "DiagnosticFingerprint",
    "StackFrame",
    "capture_stack",
    "RateLimitStatus",
    # Request / response
    "Authorization",
    "BearerAuthorization",
    "NullAuthorization",
    "HttpParameter",
    "HttpRequest",
    "HttpResponse",
    "HttpResponseEvent",
    "HttpResponseListener",
    "RequestMethod",
    "TweetMediaType",
    # Executor
    "HttpClientBase",
    "HttpClient",
    "create_ssl_context",
]
