# src/twitter_http/core/http_client.py
"""
Исполнитель запросов к API.

HttpClientBase отвечает за всё, что не зависит от транспорта:
дефолтные заголовки, TLS-контекст, проверку прокси, сборку запроса
и уведомление listener'а. HttpClient - транспорт на requests.
"""
import logging
import ssl
import threading
import time
import uuid
from abc import ABC, abstractmethod
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

import requests
from requests import certs
from requests.adapters import HTTPAdapter
from requests.structures import CaseInsensitiveDict

from . import status_codes as status
from .config import HttpClientConfig
from .error_handler import ErrorHandler
from .exceptions import ApiException, ConfigurationError
from .logging import HttpClientLogger, clear_request_id, set_request_id
from .request import (
    Authorization,
    HttpRequest,
    HttpResponse,
    HttpResponseEvent,
    HttpResponseListener,
    ListenerLike,
    ParametersLike,
    RequestMethod,
    contains_file,
    encode_parameters,
    find_json_body,
    validate_header,
)
from .session_manager import ThreadSafeSessionManager
from ..utils.sanitizer import mask_headers

logger = logging.getLogger(__name__)


def create_ssl_context(tls_version: str = "TLSv1.2", verify: bool = True) -> ssl.SSLContext:
    """
    Создать SSL контекст, зафиксированный на одной версии TLS.

    Raises:
        ConfigurationError: Платформа не может построить контекст с этой версией
    """
    try:
        version = getattr(ssl.TLSVersion, tls_version.replace(".", "_"))
        context = ssl.create_default_context(cafile=certs.where())
        context.minimum_version = version
        context.maximum_version = version
        if not verify:
            context.check_hostname = False
            context.verify_mode = ssl.CERT_NONE
    except (AttributeError, ValueError, ssl.SSLError) as e:
        raise ConfigurationError(f"Generating {tls_version} SSL context failed") from e
    return context


class TLSAdapter(HTTPAdapter):
    """HTTPAdapter, использующий заранее построенный SSL контекст (в т.ч. через прокси)."""

    def __init__(self, ssl_context: ssl.SSLContext, **kwargs):
        self._ssl_context = ssl_context
        super().__init__(**kwargs)

    def init_poolmanager(self, connections, maxsize, block=False, **pool_kwargs):
        pool_kwargs["ssl_context"] = self._ssl_context
        super().init_poolmanager(connections, maxsize, block, **pool_kwargs)

    def proxy_manager_for(self, proxy, **proxy_kwargs):
        proxy_kwargs["ssl_context"] = self._ssl_context
        return super().proxy_manager_for(proxy, **proxy_kwargs)


class HttpClientBase(ABC):
    """
    Базовый исполнитель запросов.

    Все методы (get/post/put/delete/head и request) сводятся к одному
    примитиву handle_request(), который реализует транспорт. Один вызов -
    один сетевой запрос, повторов на этом уровне нет: решение о повторе
    принимает вызывающий код по ApiException.is_rate_limited() и
    retry_after_seconds().

    Thread-safe: дефолтные заголовки заменяются целиком (copy-on-write)
    под блокировкой, каждый запрос получает их снимок.
    """

    def __init__(self, config: Optional[HttpClientConfig] = None):
        self._config = config or HttpClientConfig()
        self._headers_lock = threading.Lock()

        headers = self._config.identity_headers()
        headers.update(self._config.headers)
        for name, value in headers.items():
            validate_header(name, value)
        self._default_headers: Dict[str, str] = headers

        self._ssl_context = create_ssl_context(
            self._config.tls_version, self._config.verify_ssl
        )
        logger.debug("SSL context created for %s", self._config.tls_version)

    # ==================== Конфигурация ====================

    @property
    def config(self) -> HttpClientConfig:
        return self._config

    @property
    def ssl_context(self) -> ssl.SSLContext:
        """SSL контекст, общий для всех запросов этого клиента."""
        return self._ssl_context

    @property
    def request_headers(self) -> Mapping[str, str]:
        """Снимок дефолтных заголовков (read-only)."""
        return MappingProxyType(self._default_headers)

    def add_default_request_header(self, name: str, value: str) -> None:
        """
        Добавить (или заменить) дефолтный заголовок для всех последующих запросов.

        Raises:
            ValueError: Заголовок не может быть отправлен по HTTP

        Example:
            >>> client.add_default_request_header("X-Request-Source", "batch")
        """
        validate_header(name, value)
        with self._headers_lock:
            headers = dict(self._default_headers)
            headers[name] = value
            self._default_headers = headers

    def is_proxy_configured(self) -> bool:
        return self._config.proxy.is_configured

    # ==================== Выполнение ====================

    def request(self, req: HttpRequest, listener: Optional[ListenerLike] = None) -> HttpResponse:
        """
        Выполнить запрос.

        Listener (если задан) вызывается ровно один раз, синхронно, с
        ответом или с ApiException. Исключение после уведомления
        пробрасывается вызывающему коду.

        Raises:
            ApiException: Ошибка транспорта или не-2xx ответ
        """
        prepared = self._prepare(req)
        try:
            response = self.handle_request(prepared)
        except ApiException as e:
            self._notify(listener, HttpResponseEvent(request=prepared, exception=e))
            raise
        self._notify(listener, HttpResponseEvent(request=prepared, response=response))
        return response

    @abstractmethod
    def handle_request(self, req: HttpRequest) -> HttpResponse:
        """
        Один сетевой запрос. Реализация транспорта.

        Должна возвращать HttpResponse для 2xx и бросать только ApiException.
        """

    def _prepare(self, req: HttpRequest) -> HttpRequest:
        """Дефолтные заголовки + Authorization + заголовки вызова (последние важнее)."""
        headers = CaseInsensitiveDict(self._default_headers)

        if req.authorization is not None and req.authorization.is_enabled():
            value = req.authorization.get_authorization_header(req)
            if value:
                headers["Authorization"] = value

        headers.update(req.headers)

        return HttpRequest(
            method=req.method,
            url=req.url,
            parameters=req.parameters,
            authorization=req.authorization,
            headers=dict(headers.items()),
        )

    @staticmethod
    def _notify(listener: Optional[ListenerLike], event: HttpResponseEvent) -> None:
        if listener is None:
            return
        if isinstance(listener, HttpResponseListener):
            listener.http_response_received(event)
        else:
            listener(event)

    # ==================== HTTP методы ====================

    def _call(
        self,
        method: RequestMethod,
        url: str,
        parameters: ParametersLike,
        authorization: Optional[Authorization],
        listener: Optional[ListenerLike],
        headers: Optional[Mapping[str, str]],
    ) -> HttpResponse:
        req = HttpRequest(
            method=method,
            url=url,
            parameters=parameters,
            authorization=authorization,
            headers=headers or {},
        )
        return self.request(req, listener)

    def get(
        self,
        url: str,
        parameters: ParametersLike = None,
        authorization: Optional[Authorization] = None,
        listener: Optional[ListenerLike] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> HttpResponse:
        """
        Выполняет GET запрос (параметры уходят в query string).

        Example:
            >>> client.get("https://api.example.com/1.1/statuses/show.json",
            ...            [HttpParameter("id", 20)])
        """
        return self._call(RequestMethod.GET, url, parameters, authorization, listener, headers)

    def post(
        self,
        url: str,
        parameters: ParametersLike = None,
        authorization: Optional[Authorization] = None,
        listener: Optional[ListenerLike] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> HttpResponse:
        """Выполняет POST запрос (form, multipart или JSON тело)."""
        return self._call(RequestMethod.POST, url, parameters, authorization, listener, headers)

    def put(
        self,
        url: str,
        parameters: ParametersLike = None,
        authorization: Optional[Authorization] = None,
        listener: Optional[ListenerLike] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> HttpResponse:
        return self._call(RequestMethod.PUT, url, parameters, authorization, listener, headers)

    def delete(
        self,
        url: str,
        parameters: ParametersLike = None,
        authorization: Optional[Authorization] = None,
        listener: Optional[ListenerLike] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> HttpResponse:
        return self._call(RequestMethod.DELETE, url, parameters, authorization, listener, headers)

    def head(
        self,
        url: str,
        parameters: ParametersLike = None,
        authorization: Optional[Authorization] = None,
        listener: Optional[ListenerLike] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> HttpResponse:
        return self._call(RequestMethod.HEAD, url, parameters, authorization, listener, headers)

    # ==================== Жизненный цикл ====================

    def close(self) -> None:
        """Освободить ресурсы транспорта."""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


class HttpClient(HttpClientBase):
    """
    Исполнитель запросов на requests.

    Features:
        - TLS фиксированной версии (общий SSL контекст для всех потоков)
        - Thread-safe: каждый поток получает собственную сессию
        - Прокси из конфигурации
        - Структурное логирование с request id (если задан config.logging)

    Example:
        >>> with HttpClient(HttpClientConfig(gzip_enabled=False)) as client:
        ...     response = client.get("https://api.example.com/1.1/help/configuration.json")
        ...     data = response.as_json()
    """

    def __init__(
        self,
        config: Optional[HttpClientConfig] = None,
        http_logger: Optional[HttpClientLogger] = None,
    ):
        super().__init__(config)

        if http_logger is None and self._config.logging is not None:
            http_logger = HttpClientLogger(self._config.logging)
        self._logger = http_logger

        self._session_manager = ThreadSafeSessionManager(session_factory=self._create_session)

    def _create_session(self) -> requests.Session:
        session = requests.Session()
        # Заголовки приходят только из конфигурации клиента
        session.headers.clear()

        # Ретраи - ответственность вызывающего кода
        session.mount("https://", TLSAdapter(self._ssl_context, max_retries=0))
        session.mount("http://", HTTPAdapter(max_retries=0))

        if self.is_proxy_configured():
            session.proxies.update(self._config.proxy.as_requests_proxies())

        return session

    @property
    def session(self) -> requests.Session:
        """Сессия текущего потока."""
        return self._session_manager.get_session()

    def handle_request(self, req: HttpRequest) -> HttpResponse:
        request_id = uuid.uuid4().hex
        set_request_id(request_id)
        started = time.monotonic()

        if self._logger:
            fields: Dict[str, Any] = {"method": req.method.value, "url": req.url}
            if self._logger.config is None or self._logger.config.log_headers:
                fields["headers"] = mask_headers(req.headers)
            self._logger.debug("Request started", request_id=request_id, **fields)

        try:
            response = self._send(req)
        except ApiException as e:
            self._log_failure(req, e, started, request_id)
            raise
        else:
            if self._logger:
                self._logger.info(
                    "Request completed",
                    method=req.method.value,
                    url=req.url,
                    status_code=response.status_code,
                    duration_ms=_elapsed_ms(started),
                    request_id=request_id,
                )
            return response
        finally:
            clear_request_id()

    def _send(self, req: HttpRequest) -> HttpResponse:
        try:
            raw = self.session.request(**self._build_kwargs(req))
        except (requests.RequestException, OSError) as e:
            ErrorHandler.handle_request_exception(e, req)

        response = HttpResponse.from_requests(raw)
        if not status.is_success(response.status_code):
            ErrorHandler.handle_http_error(response)
        return response

    def _build_kwargs(self, req: HttpRequest) -> Dict[str, Any]:
        """Аргументы для requests.Session.request()."""
        headers = CaseInsensitiveDict(req.headers)
        kwargs: Dict[str, Any] = {
            "method": req.method.value,
            "url": req.url,
            "headers": headers,
            "timeout": self._config.timeout.as_tuple(),
            "verify": self._config.verify_ssl,
        }

        parameters = req.parameters or ()
        if not parameters:
            return kwargs

        if not req.method.has_body:
            separator = "&" if "?" in req.url else "?"
            kwargs["url"] = f"{req.url}{separator}{encode_parameters(parameters)}"
            return kwargs

        json_parameter = find_json_body(parameters)
        if json_parameter is not None:
            kwargs["json"] = json_parameter.json_object
        elif contains_file(parameters):
            kwargs["data"] = [
                (p.name, p.value or "") for p in parameters if not p.is_file() and not p.is_json()
            ]
            kwargs["files"] = [
                (p.name, (p.file_name, p.file_body, p.content_type))
                for p in parameters if p.is_file()
            ]
        else:
            kwargs["data"] = encode_parameters(parameters)
            headers.setdefault("Content-Type", "application/x-www-form-urlencoded")

        return kwargs

    def _log_failure(self, req: HttpRequest, error: ApiException, started: float, request_id: str) -> None:
        if not self._logger:
            return
        log = self._logger.warning if error.is_retryable() else self._logger.error
        log(
            "Request failed",
            method=req.method.value,
            url=req.url,
            status_code=error.status_code,
            error_code=error.error_code,
            rate_limited=error.is_rate_limited(),
            retry_after=error.retry_after_seconds(),
            exception_code=error.exception_code,
            error=error.rendered_message.strip(),
            duration_ms=_elapsed_ms(started),
            request_id=request_id,
        )

    def close(self) -> None:
        """
        Закрывает сессии всех потоков и handlers логгера.

        Повторный вызов безопасен.
        """
        if self._logger is not None:
            self._logger.close()
        self._session_manager.close_all()


def _elapsed_ms(started: float) -> float:
    return round((time.monotonic() - started) * 1000, 2)
