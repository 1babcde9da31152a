"""
Request/response value objects shared by the executor and its callers.

HttpRequest and HttpResponse are immutable and live for exactly one call.
Authorization is an opaque collaborator: the executor only asks it for an
``Authorization`` header value and never interprets the credentials.
"""

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    Iterable,
    Mapping,
    Optional,
    Sequence,
    Tuple,
    Union,
)
from urllib.parse import quote

from requests.structures import CaseInsensitiveDict

if TYPE_CHECKING:
    import requests

    from .exceptions import ApiException
    from .rate_limit import RateLimitStatus


class RequestMethod(str, Enum):
    """Supported HTTP verbs."""
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    HEAD = "HEAD"

    @property
    def has_body(self) -> bool:
        """POST/PUT send parameters in the body, the rest in the query string."""
        return self in (RequestMethod.POST, RequestMethod.PUT)


class TweetMediaType(str, Enum):
    """``media_category`` values used by media upload endpoints."""
    IMAGE = "tweet_image"
    IMAGE_GIF = "tweet_gif"
    VIDEO = "tweet_video"


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# PARAMETERS
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class HttpParameter:
    """
    Request parameter: plain value, file upload or JSON body.

    Examples:
        >>> HttpParameter("status", "hello")
        >>> HttpParameter.file("media", b"...", "cat.png", "image/png")
        >>> HttpParameter.json_body({"event": {"type": "message_create"}})
    """
    name: str
    value: Optional[str] = None
    file_body: Optional[bytes] = None
    file_name: Optional[str] = None
    content_type: Optional[str] = None
    json_object: Any = None

    def __post_init__(self):
        # Values go on the wire as text
        if isinstance(self.value, Enum):
            object.__setattr__(self, "value", str(self.value.value))
        elif isinstance(self.value, bool):
            object.__setattr__(self, "value", str(self.value).lower())
        elif self.value is not None and not isinstance(self.value, str):
            object.__setattr__(self, "value", str(self.value))

    def __hash__(self):
        return hash((self.name, self.value, self.file_name, self.file_body))

    @classmethod
    def file(
        cls,
        name: str,
        body: bytes,
        file_name: str,
        content_type: str = "application/octet-stream",
    ) -> "HttpParameter":
        return cls(name, file_body=body, file_name=file_name, content_type=content_type)

    @classmethod
    def json_body(cls, obj: Any) -> "HttpParameter":
        return cls("json", json_object=obj, content_type="application/json")

    def is_file(self) -> bool:
        return self.file_body is not None

    def is_json(self) -> bool:
        return self.json_object is not None

    def __repr__(self) -> str:
        if self.is_file():
            return f"HttpParameter({self.name!r}, file={self.file_name!r}, {len(self.file_body)} bytes)"
        if self.is_json():
            return f"HttpParameter(json={json.dumps(self.json_object)[:50]})"
        return f"HttpParameter({self.name!r}, {self.value!r})"


def contains_file(parameters: Optional[Iterable[HttpParameter]]) -> bool:
    """True if any parameter is a file upload."""
    return any(p.is_file() for p in parameters or ())


def find_json_body(parameters: Optional[Iterable[HttpParameter]]) -> Optional[HttpParameter]:
    """Return the JSON body parameter, if present."""
    for p in parameters or ():
        if p.is_json():
            return p
    return None


def encode_parameters(parameters: Optional[Iterable[HttpParameter]]) -> str:
    """
    Percent-encode plain parameters as ``name=value&...`` (RFC 3986, spaces as %20).

    File and JSON parameters are skipped.

    Example:
        >>> encode_parameters([HttpParameter("q", "a b"), HttpParameter("count", 5)])
        'q=a%20b&count=5'
    """
    return "&".join(
        f"{quote(p.name, safe='~')}={quote(p.value or '', safe='~')}"
        for p in parameters or ()
        if not p.is_file() and not p.is_json()
    )


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# AUTHORIZATION
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class Authorization(ABC):
    """
    Opaque authorization capability attached to a request.

    Implementations sign the request (OAuth 1.0a, OAuth 2 bearer, ...);
    the executor only asks for the header value.
    """

    @abstractmethod
    def get_authorization_header(self, request: "HttpRequest") -> Optional[str]:
        """Value for the ``Authorization`` header, or None to send nothing."""

    def is_enabled(self) -> bool:
        return True


class NullAuthorization(Authorization):
    """Anonymous access."""

    def get_authorization_header(self, request: "HttpRequest") -> Optional[str]:
        return None

    def is_enabled(self) -> bool:
        return False

    def __eq__(self, other):
        return isinstance(other, NullAuthorization)

    def __hash__(self):
        return hash(NullAuthorization)

    def __repr__(self):
        return "NullAuthorization()"


class BearerAuthorization(Authorization):
    """OAuth 2 application-only bearer token."""

    def __init__(self, token: str):
        if not token:
            raise ValueError("bearer token must be non-empty")
        self._token = token

    def get_authorization_header(self, request: "HttpRequest") -> Optional[str]:
        return f"Bearer {self._token}"

    def __repr__(self):
        return "BearerAuthorization(token=***)"


def validate_header(name: Any, value: Any) -> None:
    """
    Проверить, что заголовок можно отправить по HTTP/1.1.

    Имя - непустая ASCII строка, значение - строка в latin-1 без переводов строк.

    Raises:
        ValueError: Заголовок не может быть отправлен
    """
    if not isinstance(name, str) or not name or not name.isascii():
        raise ValueError(f"Invalid header name: {name!r}")
    if not isinstance(value, str):
        raise ValueError(f"Header {name!r} value must be a string, got {type(value).__name__}")
    if "\r" in value or "\n" in value:
        raise ValueError(f"Header {name!r} value must not contain line breaks")
    try:
        value.encode("latin-1")
    except UnicodeEncodeError:
        raise ValueError(f"Header {name!r} value is not latin-1 encodable") from None


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# REQUEST / RESPONSE
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class HttpRequest:
    """
    Immutable outgoing request.

    Args:
        method: HTTP verb (RequestMethod or its name)
        url: Absolute URL, must be non-empty
        parameters: Ordered parameters (None if absent)
        authorization: Authorization capability (None for anonymous)
        headers: Per-request headers

    Raises:
        ValueError: Empty URL, unsupported method or a header that cannot be sent
    """
    method: RequestMethod
    url: str
    parameters: Optional[Tuple[HttpParameter, ...]] = None
    authorization: Optional[Authorization] = None
    headers: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    def __post_init__(self):
        if not self.url:
            raise ValueError("request url must be non-empty")
        if not isinstance(self.method, RequestMethod):
            try:
                object.__setattr__(self, "method", RequestMethod(str(self.method).upper()))
            except ValueError:
                raise ValueError(f"Unsupported request method: {self.method!r}") from None
        if self.parameters is not None and not isinstance(self.parameters, tuple):
            object.__setattr__(self, "parameters", tuple(self.parameters))
        if not isinstance(self.headers, MappingProxyType):
            object.__setattr__(self, "headers", MappingProxyType(dict(self.headers or {})))
        for name, value in self.headers.items():
            validate_header(name, value)

    def __hash__(self):
        return hash((self.method, self.url, self.parameters, tuple(sorted(self.headers.items()))))


@dataclass(frozen=True)
class HttpResponse:
    """
    Immutable response snapshot.

    Attributes:
        status_code: HTTP status
        headers: Case-insensitive mapping name -> tuple of values
        body: Raw payload (already decompressed by the transport)
        url: Final URL
        encoding: Text encoding declared by the server
    """
    status_code: int
    headers: Mapping[str, Tuple[str, ...]] = field(default_factory=CaseInsensitiveDict)
    body: bytes = b""
    url: str = ""
    encoding: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.headers, CaseInsensitiveDict):
            normalized = CaseInsensitiveDict()
            for name, values in (self.headers or {}).items():
                normalized[name] = (values,) if isinstance(values, str) else tuple(values)
            object.__setattr__(self, "headers", normalized)

    @classmethod
    def from_requests(cls, response: "requests.Response") -> "HttpResponse":
        """Snapshot a ``requests.Response``."""
        headers = CaseInsensitiveDict()
        raw_headers = getattr(response.raw, "headers", None)
        if raw_headers is not None and hasattr(raw_headers, "getlist"):
            for name in raw_headers.keys():
                headers[name] = tuple(raw_headers.getlist(name))
        else:
            for name, value in response.headers.items():
                headers[name] = (value,)
        return cls(
            status_code=response.status_code,
            headers=headers,
            body=response.content or b"",
            url=response.url or "",
            encoding=response.encoding,
        )

    @property
    def text(self) -> str:
        return self.body.decode(self.encoding or "utf-8", errors="replace")

    def as_json(self) -> Any:
        """Decode body as JSON (raises ValueError on malformed payload)."""
        return json.loads(self.text)

    def response_header(self, name: str) -> Optional[str]:
        """First value of header ``name`` or None."""
        values = self.headers.get(name)
        if not values:
            return None
        return values[0]

    def rate_limit_status(self) -> Optional["RateLimitStatus"]:
        from .rate_limit import RateLimitStatus
        return RateLimitStatus.from_response(self)

    def __hash__(self):
        return hash((self.status_code, self.body, self.url))

    def __repr__(self):
        return f"HttpResponse(status_code={self.status_code}, url={self.url!r}, {len(self.body)} bytes)"


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# LISTENER
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class HttpResponseEvent:
    """Outcome of one call: either ``response`` or ``exception`` is set."""
    request: HttpRequest
    response: Optional[HttpResponse] = None
    exception: Optional["ApiException"] = None

    @property
    def succeeded(self) -> bool:
        return self.exception is None


class HttpResponseListener(ABC):
    """Observer notified once per call after the round trip completes."""

    @abstractmethod
    def http_response_received(self, event: HttpResponseEvent) -> None:
        pass


ListenerLike = Union[HttpResponseListener, Callable[[HttpResponseEvent], None]]

ParametersLike = Optional[Sequence[HttpParameter]]
