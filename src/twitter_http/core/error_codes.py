"""
Таблица кодов ошибок API.

Каждый код ошибки из тела ответа ``{"errors": [{"code": ...}]}`` связан
с HTTP статусом, с которым API его обычно возвращает (если такой есть).

Таблица строится один раз при импорте модуля. Дубликаты кодов - дефект
сборки, а не runtime ошибка: они обнаруживаются при загрузке модуля.

Reference: https://developer.twitter.com/en/docs/basics/response-codes
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Mapping, Optional, Tuple

from . import status_codes as status
from .exceptions import ConfigurationError


@dataclass(frozen=True)
class ErrorCode:
    """
    Код ошибки API.

    Args:
        name: Символическое имя
        code: Числовой код (уникальный ключ)
        associated_status_code: HTTP статус, с которым приходит код (или None)
    """
    name: str
    code: int
    associated_status_code: Optional[int] = None


_ERROR_CODE_LITERALS: Tuple[Tuple[str, int, Optional[int]], ...] = (
    ("INVALID_COORDINATE", 3, status.BAD_REQUEST),
    ("MISSING_LOCATION", 13, status.NOT_FOUND),
    ("MISSING_USER_SEARCH", 17, status.NOT_FOUND),
    ("MISSING_QUERY_PARAMETERS", 25, status.BAD_REQUEST),
    ("INVALID_AUTHENTICATION_DATA", 32, status.UNAUTHORIZED),
    ("MISSING_RESOURCE", 34, status.NOT_FOUND),
    ("INVALID_SPAM_REPORT", 36, status.FORBIDDEN),
    ("INVALID_ATTACHMENT_URL", 44, status.BAD_REQUEST),
    ("MISSING_USER", 50, status.NOT_FOUND),
    ("FORBIDDEN_USER_SUSPENDED", 63, status.FORBIDDEN),
    ("FORBIDDEN_ACCOUNT_SUSPENDED", 64, status.FORBIDDEN),
    ("INVALID_API_VERSION", 68, None),
    ("FORBIDDEN_ACTION", 87, None),
    ("FORBIDDEN_RATE_LIMIT", 88, None),
    ("INVALID_TOKEN", 89, None),
    ("FORBIDDEN_SSL_REQUIRED", 92, None),
    ("FORBIDDEN_DIRECT_MESSAGE_ACCESS", 93, status.FORBIDDEN),
    ("INVALID_OAUTH_CREDENTIALS", 99, status.FORBIDDEN),
    ("INVALID_ACCOUNT_LONG_VALUE", 120, status.FORBIDDEN),
    ("FAILED_OVER_CAPACITY", 130, status.SERVICE_UNAVAILABLE),
    ("FAILED_UNKNOWN", 131, status.INTERNAL_SERVER_ERROR),
    ("INVALID_AUTHENTICATION_TIMESTAMP", 135, status.UNAUTHORIZED),
    ("MISSING_STATUS", 144, status.NOT_FOUND),
    ("INVALID_DIRECT_MESSAGE_REQUEST", 150, status.FORBIDDEN),
    ("FAILED_DIRECT_MESSAGE", 151, status.FORBIDDEN),
    ("INVALID_FOLLOW_DUPLICATE", 160, status.FORBIDDEN),
    ("FORBIDDEN_FOLLOW_LIMIT", 161, status.FORBIDDEN),
    ("FORBIDDEN_STATUS_VIEW", 179, status.FORBIDDEN),
    ("FORBIDDEN_STATUS_LIMIT", 185, status.FORBIDDEN),
    ("INVALID_STATUS_LENGTH", 186, status.FORBIDDEN),
    ("INVALID_STATUS_DUPLICATE", 187, status.FORBIDDEN),
    ("INVALID_URL_PARAMETER", 195, status.FORBIDDEN),
    ("FORBIDDEN_SPAM_REPORT_LIMIT", 205, status.FORBIDDEN),
    ("MISSING_AUTHENTICATION_DATA", 215, status.BAD_REQUEST),
    ("FORBIDDEN_ACCESS_DENIED", 220, status.FORBIDDEN),
    ("FORBIDDEN_AUTOMATED", 226, None),
    ("FORBIDDEN_VERIFY_LOGIN", 231, None),
    ("INVALID_ENDPOINT_RETIRED", 251, None),
    ("FORBIDDEN_WRITE_ACCESS_DENIED", 261, status.FORBIDDEN),
    ("INVALID_MUTE_REQUEST", 271, status.FORBIDDEN),
    ("INVALID_UNMUTE_REQUEST", 272, status.FORBIDDEN),
    ("INVALID_MULTIPLE_ANIMATED_GIF", 323, status.BAD_REQUEST),
    ("INVALID_MEDIA_ID", 324, status.BAD_REQUEST),
    ("MISSING_MEDIA_ID", 325, status.BAD_REQUEST),
    ("FORBIDDEN_TEMPORARY_LOCK", 326, status.FORBIDDEN),
    ("INVALID_RETWEET_DUPLICATE", 327, status.FORBIDDEN),
    ("INVALID_DIRECT_MESSAGE_LENGTH", 354, status.FORBIDDEN),
    ("INVALID_REPLY_TARGET", 385, status.FORBIDDEN),
    ("INVALID_ATTACHMENT_TYPE_QUANTITY", 386, status.FORBIDDEN),
    ("INVALID_URL", 407, status.BAD_REQUEST),
)


def build_table(
    literals: Iterable[Tuple[str, int, Optional[int]]]
) -> Mapping[int, ErrorCode]:
    """
    Построить неизменяемую таблицу code -> ErrorCode.

    Args:
        literals: Последовательность (name, code, associated_status_code)

    Returns:
        MappingProxyType с ключом по числовому коду

    Raises:
        ConfigurationError: Если код или имя встречается дважды
    """
    by_code = {}
    names = set()
    for name, code, associated_status_code in literals:
        if code in by_code:
            raise ConfigurationError(
                f"Duplicate error code {code} ({by_code[code].name} and {name})"
            )
        if name in names:
            raise ConfigurationError(f"Duplicate error code name {name}")
        names.add(name)
        by_code[code] = ErrorCode(name, code, associated_status_code)
    return MappingProxyType(by_code)


ERROR_CODES: Mapping[int, ErrorCode] = build_table(_ERROR_CODE_LITERALS)


def try_resolve(code: int) -> Optional[ErrorCode]:
    """
    Найти код ошибки в таблице.

    Никогда не бросает исключений: для неизвестного кода возвращает None.

    Examples:
        >>> try_resolve(88).name
        'FORBIDDEN_RATE_LIMIT'
        >>> try_resolve(-1) is None
        True
    """
    return ERROR_CODES.get(code)


def resolve(code: int) -> ErrorCode:
    """
    Найти код ошибки, который заведомо есть в таблице.

    Raises:
        ValueError: Для неизвестного кода (ошибка программиста)
    """
    entry = try_resolve(code)
    if entry is None:
        raise ValueError(f"{code} is not a valid API error code")
    return entry
