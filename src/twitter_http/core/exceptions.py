"""
Исключения клиента API.

Все транспортные и протокольные ошибки нормализуются в один тип -
ApiException. Классификация (retry или нет) делается предикатами:
- is_rate_limited() / retry_after_seconds() - лимиты, можно повторить позже
- is_network_failure() - сетевая ошибка, можно повторить
- is_server_error() - 5xx, можно повторить
- is_resource_not_found() - 404, повторять бессмысленно

ConfigurationError - ошибка конфигурации при старте, в ApiException не оборачивается.
"""

import json
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Iterator, List, Optional

import requests

from . import status_codes as status
from .diagnosis import (
    DEFAULT_INTERNAL_PREFIXES,
    DiagnosticFingerprint,
    StackFrame,
    capture_stack,
)

if TYPE_CHECKING:
    from .error_codes import ErrorCode
    from .rate_limit import RateLimitStatus
    from .request import HttpResponse

UNSET = -1

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# КОНФИГУРАЦИЯ
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class ConfigurationError(RuntimeError):
    """
    Ошибка конфигурации при старте.

    Примеры: платформа не поддерживает нужную версию TLS,
    дубликаты в таблице кодов ошибок.
    """

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# ТЕЛО ОШИБКИ
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class ApiError:
    """
    Структурированная ошибка из тела ответа.

    Args:
        code: Код ошибки API или -1, если код отсутствует или некорректен
        message: Сообщение API
    """
    code: int
    message: str


def decode_error_body(text: Optional[str]) -> Optional[ApiError]:
    """
    Разобрать тело вида ``{"errors": [{"message": ..., "code": ...}]}``.

    Используется только первый элемент ``errors``. Без строкового
    ``message`` ошибки нет; без корректного ``code`` сообщение сохраняется
    с кодом -1. Любая другая форма - "нет структурированной ошибки".
    Никогда не бросает исключений.

    Args:
        text: Тело ответа или сообщение исключения

    Returns:
        ApiError или None

    Examples:
        >>> decode_error_body('{"errors":[{"message":"Rate limit exceeded","code":88}]}')
        ApiError(code=88, message='Rate limit exceeded')
        >>> decode_error_body("boom") is None
        True
    """
    if not text or not text.lstrip().startswith("{"):
        return None
    try:
        payload = json.loads(text)
    except (ValueError, RecursionError):
        return None

    if not isinstance(payload, dict):
        return None
    errors = payload.get("errors")
    if not isinstance(errors, list) or not errors or not isinstance(errors[0], dict):
        return None

    first = errors[0]
    message = first.get("message")
    if not isinstance(message, str):
        return None
    return ApiError(code=_error_code(first.get("code")), message=message)


def _error_code(value: Any) -> int:
    """Целый код ошибки или UNSET (нет кода, bool, дробь, inf/nan, не число)."""
    if isinstance(value, bool):
        return UNSET
    if isinstance(value, float):
        return int(value) if value.is_integer() else UNSET
    if isinstance(value, (int, str)):
        try:
            return int(value)
        except ValueError:
            return UNSET
    return UNSET

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# API EXCEPTION
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class ApiException(Exception):
    """
    Ошибка вызова API.

    Args:
        message: Сообщение или тело ответа (JSON тело декодируется)
        cause: Исходное исключение (транспорт, парсинг)
        response: Ответ сервера; задаёт status_code
        status_code: Явный HTTP статус (переопределяет статус из response)

    Attributes:
        message: Исходное сообщение
        status_code: HTTP статус или -1
        error_code: Код ошибки API или -1
        error_message: Сообщение API или None
        cause: Исходное исключение или None
        response: HttpResponse или None

    Examples:
        >>> ApiException('{"errors":[{"message":"Rate limit exceeded","code":88}]}').error_code
        88
        >>> ApiException("boom").error_code
        -1
        >>> ApiException.wrap(ApiException("inner"))
    """

    internal_prefixes = DEFAULT_INTERNAL_PREFIXES
    max_cause_depth = 10

    def __init__(
        self,
        message: Optional[str] = None,
        cause: Optional[BaseException] = None,
        response: Optional["HttpResponse"] = None,
        status_code: Optional[int] = None,
    ):
        self.message = message
        self.cause = cause
        self.response = response
        self.status_code = UNSET
        self.error_code = UNSET
        self.error_message: Optional[str] = None
        self._nested = False
        self._fingerprint: Optional[DiagnosticFingerprint] = None
        self._stack: List[StackFrame] = capture_stack(skip=1)

        if response is not None:
            self.status_code = response.status_code
        if status_code is not None:
            self.status_code = status_code

        decoded = decode_error_body(message)
        if decoded is not None:
            self.error_code = decoded.code
            self.error_message = decoded.message

        super().__init__(message)
        if cause is not None:
            self.__cause__ = cause

    @classmethod
    def wrap(cls, exc: BaseException) -> "ApiException":
        """
        Обернуть исключение.

        Если оборачивается ApiException, внутреннее помечается как nested:
        его fingerprint больше не выводится, чтобы не дублировать диагностику.
        """
        if isinstance(exc, ApiException):
            message = exc.rendered_message
            exc._set_nested()
        else:
            message = str(exc)
        return cls(message, cause=exc)

    # ==================== Состояние ====================

    def _set_nested(self) -> None:
        self._nested = True

    @property
    def nested(self) -> bool:
        return self._nested

    @property
    def stack(self) -> List[StackFrame]:
        return list(self._stack)

    @property
    def fingerprint(self) -> DiagnosticFingerprint:
        """Лениво вычисляемый диагностический fingerprint."""
        if self._fingerprint is None:
            self._fingerprint = DiagnosticFingerprint.from_frames(
                self._stack, self.internal_prefixes
            )
        return self._fingerprint

    @property
    def exception_code(self) -> str:
        """Fingerprint в виде ``XXXXXXXX:YYYYYYYY``."""
        return self.fingerprint.as_hex()

    @property
    def error_code_entry(self) -> Optional["ErrorCode"]:
        """Запись таблицы кодов ошибок для error_code (или None)."""
        from .error_codes import try_resolve
        return try_resolve(self.error_code)

    def is_error_message_available(self) -> bool:
        return self.error_message is not None

    # ==================== Ответ и лимиты ====================

    def response_header(self, name: str) -> Optional[str]:
        """Первое значение заголовка ответа или None."""
        if self.response is None:
            return None
        return self.response.response_header(name)

    def rate_limit_status(self) -> Optional["RateLimitStatus"]:
        """Снимок лимитов из заголовков ответа; None без ответа."""
        if self.response is None:
            return None
        return self.response.rate_limit_status()

    def retry_after_seconds(self) -> int:
        """
        Через сколько секунд можно повторить запрос.

        - 420 (Streaming API): seconds_until_reset из заголовков лимитов
        - 429 (REST API): значение заголовка Retry-After
        - остальное: -1
        """
        if self.status_code == status.ENHANCE_YOUR_CALM:
            rate_limit = self.rate_limit_status()
            if rate_limit is not None:
                return rate_limit.seconds_until_reset
        elif self.status_code == status.TOO_MANY_REQUESTS:
            raw = self.response_header("Retry-After")
            if raw is not None:
                try:
                    return int(raw.strip())
                except ValueError:
                    pass
        return UNSET

    # ==================== Классификация ====================

    def iter_causes(self) -> Iterator[BaseException]:
        """Цепочка причин, не глубже max_cause_depth."""
        current = self.cause
        depth = 0
        while current is not None and depth < self.max_cause_depth:
            yield current
            depth += 1
            if isinstance(current, ApiException):
                current = current.cause
            else:
                current = current.__cause__

    def root_cause(self) -> Optional[BaseException]:
        """Последняя причина в цепочке (или None)."""
        root = None
        for root in self.iter_causes():
            pass
        return root

    def is_network_failure(self) -> bool:
        """True если в цепочке причин есть I/O ошибка транспорта."""
        return any(_is_io_failure(exc) for exc in self.iter_causes())

    def is_rate_limited(self) -> bool:
        return (
            (self.status_code == status.BAD_REQUEST and self.rate_limit_status() is not None)
            or self.status_code == status.ENHANCE_YOUR_CALM
            or self.status_code == status.TOO_MANY_REQUESTS
        )

    def is_resource_not_found(self) -> bool:
        return self.status_code == status.NOT_FOUND

    def is_server_error(self) -> bool:
        return 500 <= self.status_code < 600

    def is_retryable(self) -> bool:
        """Временная ошибка: лимиты, сеть, 5xx."""
        return self.is_rate_limited() or self.is_network_failure() or self.is_server_error()

    # ==================== Представление ====================

    @property
    def rendered_message(self) -> str:
        """
        Сообщение для человека.

        ``"{status}:{cause}\\n"`` + (``"message - ..\\ncode - ..\\n"`` или исходное сообщение).
        """
        if self.error_message is not None and self.error_code != UNSET:
            value = f"message - {self.error_message}\ncode - {self.error_code}\n"
        else:
            value = self.message if self.message is not None else ""
        if self.status_code != UNSET:
            return f"{status.describe(self.status_code)}\n{value}"
        return value

    def details(self) -> str:
        from .version import get_version

        exception_code = "" if self._nested else f"exceptionCode=[{self.exception_code}], "
        return (
            f"{type(self).__name__}{{{exception_code}"
            f"statusCode={self.status_code}, "
            f"message={self.error_message}, "
            f"code={self.error_code}, "
            f"retryAfter={self.retry_after_seconds()}, "
            f"rateLimitStatus={self.rate_limit_status()}, "
            f"version={get_version()}}}"
        )

    def __str__(self) -> str:
        return f"{self.rendered_message}\n{self.details()}"

    def __repr__(self) -> str:
        return self.details()

    def _identity(self):
        return (
            self.status_code,
            self.error_code,
            self.fingerprint,
            self.response,
            self.error_message,
            self._nested,
        )

    def __eq__(self, other):
        if self is other:
            return True
        if other is None or type(self) is not type(other):
            return NotImplemented
        return self._identity() == other._identity()

    def __hash__(self):
        return hash(self._identity())

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# УТИЛИТЫ
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

_NOT_IO_FAILURES = (
    ValueError,  # InvalidURL, MissingSchema, InvalidJSONError
    requests.exceptions.HTTPError,
    requests.exceptions.TooManyRedirects,
)


def _is_io_failure(exc: BaseException) -> bool:
    """I/O ошибка: OSError (requests.RequestException тоже OSError), кроме ошибок использования."""
    return isinstance(exc, OSError) and not isinstance(exc, _NOT_IO_FAILURES)
