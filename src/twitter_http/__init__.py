"""Twitter HTTP Core - request execution and error classification for the Twitter API."""

import logging

from .core.http_client import HttpClient, HttpClientBase
from .core.config import HttpClientConfig, TimeoutConfig, ProxyConfig
from .core.env_config import load_from_env
from .core.exceptions import ApiException, ConfigurationError
from .core.error_codes import ErrorCode
from .core.rate_limit import RateLimitStatus
from .core.request import (
    Authorization,
    BearerAuthorization,
    HttpParameter,
    HttpRequest,
    HttpResponse,
    HttpResponseEvent,
    HttpResponseListener,
    RequestMethod,
    TweetMediaType,
)
from .core.logging import LoggingConfig
from .core.version import get_version

# Users can configure logging themselves using logging.getLogger('twitter_http')
logging.getLogger('twitter_http').addHandler(logging.NullHandler())

__version__ = get_version()
__license__ = "MIT"

__all__ = [
    # Core
    "HttpClient",
    "HttpClientBase",

    # Config
    "HttpClientConfig",
    "TimeoutConfig",
    "ProxyConfig",
    "LoggingConfig",
    "load_from_env",

    # Exceptions
    "ApiException",
    "ConfigurationError",
    "ErrorCode",
    "RateLimitStatus",

    # Request / response
    "Authorization",
    "BearerAuthorization",
    "HttpParameter",
    "HttpRequest",
    "HttpResponse",
    "HttpResponseEvent",
    "HttpResponseListener",
    "RequestMethod",
    "TweetMediaType",

    # Version
    "__version__",
]
