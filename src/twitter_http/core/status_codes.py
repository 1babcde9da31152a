"""
Каталог HTTP статусов API.

Сопоставляет статус код с человекочитаемой причиной для диагностических
сообщений ApiException.
"""

from types import MappingProxyType
from typing import Mapping

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# СТАТУС КОДЫ
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

OK = 200
NOT_MODIFIED = 304
BAD_REQUEST = 400
UNAUTHORIZED = 401
FORBIDDEN = 403
NOT_FOUND = 404
NOT_ACCEPTABLE = 406
GONE = 410
ENHANCE_YOUR_CALM = 420  # Streaming API rate limit
UNPROCESSABLE_ENTITY = 422
TOO_MANY_REQUESTS = 429  # REST API rate limit
INTERNAL_SERVER_ERROR = 500
BAD_GATEWAY = 502
SERVICE_UNAVAILABLE = 503
GATEWAY_TIMEOUT = 504

_RATE_LIMIT_DOCS = "https://developer.twitter.com/en/docs/basics/rate-limiting.html"
_RESPONSE_CODES_DOCS = "https://developer.twitter.com/en/docs/basics/response-codes"

_CAUSES: Mapping[int, str] = MappingProxyType({
    NOT_MODIFIED: "There was no new data to return.",
    BAD_REQUEST: f"The request was invalid. See error codes: {_RESPONSE_CODES_DOCS}",
    UNAUTHORIZED: (
        "Authentication credentials were missing or incorrect. "
        "Ensure that you have set valid consumer key/secret, access token/secret, "
        "and the system clock is in sync."
    ),
    FORBIDDEN: (
        "Request refused. Possibly due to the user hitting a usage limit. "
        f"See error codes: {_RESPONSE_CODES_DOCS}"
    ),
    NOT_FOUND: "The URI requested is invalid or the resource requested, such as a user, does not exist.",
    NOT_ACCEPTABLE: "An invalid format was specified in the request.",
    GONE: "This API endpoint has been turned off.",
    ENHANCE_YOUR_CALM: (
        'The application was rate limited ("Enhance Your Calm"). '
        f"Rate Limit information: {_RATE_LIMIT_DOCS}"
    ),
    UNPROCESSABLE_ENTITY: "Data was unable to be processed. Possibly due to badly-formed JSON or an invalid image.",
    TOO_MANY_REQUESTS: f"The user or application was rate limited. Rate Limit information: {_RATE_LIMIT_DOCS}",
    INTERNAL_SERVER_ERROR: "The API had a server error. Please report it so the issue can be investigated.",
    BAD_GATEWAY: "The API is down or being upgraded.",
    SERVICE_UNAVAILABLE: "The servers are up, but overloaded with requests. Try again later.",
    GATEWAY_TIMEOUT: (
        "The servers are up, but the request couldn't be serviced due to "
        "some failure within the stack. Try again later."
    ),
})

UNRECOGNIZED_CAUSE = "Unrecognized status code."


def describe(status_code: int) -> str:
    """
    Вернуть причину для статус кода в формате ``"{code}:{cause}"``.

    Args:
        status_code: HTTP статус

    Returns:
        Строка с числовым кодом и описанием причины

    Examples:
        >>> describe(404)
        '404:The URI requested is invalid or the resource requested, such as a user, does not exist.'
        >>> describe(599)
        '599:Unrecognized status code.'
    """
    return f"{status_code}:{_CAUSES.get(status_code, UNRECOGNIZED_CAUSE)}"


def is_success(status_code: int) -> bool:
    """2xx статус."""
    return 200 <= status_code < 300
