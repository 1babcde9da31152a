# src/twitter_http/core/error_handler.py

from typing import NoReturn, Optional

from requests.exceptions import (
    ConnectionError as RequestsConnectionError,
)
from requests.exceptions import (
    ProxyError,
    RequestException,
    SSLError,
    Timeout,
)

from .exceptions import ApiException
from .request import HttpRequest, HttpResponse


class ErrorHandler:
    """Преобразует ошибки транспорта и не-2xx ответы в ApiException"""

    @staticmethod
    def handle_request_exception(error: BaseException, request: Optional[HttpRequest] = None) -> NoReturn:
        """Оборачивает исключение транспорта (requests / OSError) в ApiException"""

        url = request.url if request is not None else None
        suffix = f" (url: {url})" if url else ""

        if isinstance(error, ApiException):
            raise error

        if isinstance(error, Timeout):
            message = f"Request timeout{suffix}: {error}"

        elif isinstance(error, ProxyError):
            message = f"Proxy error{suffix}: {error}"

        elif isinstance(error, SSLError):
            message = f"TLS error{suffix}: {error}"

        elif isinstance(error, RequestsConnectionError):
            message = f"Connection error{suffix}: {error}"

        elif isinstance(error, RequestException):
            message = f"Request failed{suffix}: {error}"

        elif isinstance(error, OSError):
            message = f"I/O error{suffix}: {error}"

        else:
            message = f"Unexpected error{suffix}: {error}"

        raise ApiException(message, cause=error) from error

    @staticmethod
    def handle_http_error(response: HttpResponse) -> NoReturn:
        """Не-2xx ответ: тело ответа становится сообщением (JSON тело декодируется)"""

        if response is None:
            raise ApiException("HTTP error occurred but no response object available")

        raise ApiException(response.text, response=response)

    @staticmethod
    def is_retryable_error(error: BaseException) -> bool:
        """Проверяет, можно ли повторить запрос после этой ошибки"""

        return isinstance(error, ApiException) and error.is_retryable()
