"""
Система конфигурации для клиента API.

Все конфиги immutable (frozen dataclasses) для потокобезопасности.
"""

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import TYPE_CHECKING, Dict, Mapping, Optional, Tuple, Union

from .exceptions import ConfigurationError
from .version import get_version

if TYPE_CHECKING:
    from .logging import LoggingConfig

SUPPORTED_TLS_VERSIONS = ("TLSv1.2", "TLSv1.3")

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# TIMEOUT CONFIG
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class TimeoutConfig:
    """
    Конфигурация таймаутов.

    Args:
        connect: Таймаут подключения (сек)
        read: Таймаут чтения данных (сек)

    Examples:
        >>> TimeoutConfig(connect=20, read=120)
    """
    connect: float = 20
    read: float = 120

    def __post_init__(self):
        """Валидация."""
        if self.connect <= 0:
            raise ValueError("connect timeout must be positive")
        if self.read <= 0:
            raise ValueError("read timeout must be positive")

    def as_tuple(self) -> Tuple[float, float]:
        """Вернуть как (connect, read) для requests."""
        return (self.connect, self.read)

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# PROXY CONFIG
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class ProxyConfig:
    """
    Конфигурация HTTP прокси.

    Args:
        host: Хост прокси (None или "" - прокси не используется)
        port: Порт прокси
        user: Пользователь для авторизации на прокси
        password: Пароль для авторизации на прокси

    Examples:
        >>> ProxyConfig(host="proxy.local", port=3128).as_url()
        'http://proxy.local:3128'
    """
    host: Optional[str] = None
    port: Optional[int] = None
    user: Optional[str] = None
    password: Optional[str] = None

    def __post_init__(self):
        """Валидация."""
        if self.port is not None and not 0 < self.port < 65536:
            raise ValueError("proxy port must be in 1..65535")

    @property
    def is_configured(self) -> bool:
        return self.host is not None and self.host != ""

    def as_url(self) -> Optional[str]:
        if not self.is_configured:
            return None
        credentials = ""
        if self.user:
            credentials = f"{self.user}:{self.password or ''}@"
        port = f":{self.port}" if self.port else ""
        return f"http://{credentials}{self.host}{port}"

    def as_requests_proxies(self) -> Dict[str, str]:
        url = self.as_url()
        if url is None:
            return {}
        return {"http": url, "https": url}

    def __repr__(self):
        # Пароль не выводим
        return f"ProxyConfig(host={self.host!r}, port={self.port!r}, user={self.user!r})"

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# MAIN CONFIG
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class HttpClientConfig:
    """
    Главная конфигурация клиента.

    Args:
        gzip_enabled: Добавлять ``Accept-Encoding: gzip``
        tls_version: Фиксированная версия TLS (TLSv1.2 или TLSv1.3)
        verify_ssl: Проверять SSL сертификаты
        timeout: Конфигурация таймаутов
        proxy: Конфигурация прокси
        client_name: Значение ``X-Client-Name``
        client_version: Значение ``X-Client-Version``
        client_url: Значение ``X-Client-URL``
        user_agent: Значение ``User-Agent``
        headers: Дополнительные дефолтные заголовки
        logging: Конфигурация структурного логгера (None = выключен)

    Examples:
        >>> config = HttpClientConfig(gzip_enabled=False)
        >>> config = HttpClientConfig.create(proxy_host="proxy.local", proxy_port=3128)
    """
    gzip_enabled: bool = True
    tls_version: str = "TLSv1.2"
    verify_ssl: bool = True
    timeout: TimeoutConfig = field(default_factory=TimeoutConfig)
    proxy: ProxyConfig = field(default_factory=ProxyConfig)

    client_name: str = "twitter-http-core"
    client_version: str = field(default_factory=get_version)
    client_url: Optional[str] = None
    user_agent: Optional[str] = None

    headers: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    logging: Optional['LoggingConfig'] = None

    def __post_init__(self):
        """Валидация и заморозка словарей."""
        if self.tls_version not in SUPPORTED_TLS_VERSIONS:
            raise ConfigurationError(
                f"tls_version must be one of {', '.join(SUPPORTED_TLS_VERSIONS)}, "
                f"got {self.tls_version!r}"
            )
        if isinstance(self.headers, dict):
            object.__setattr__(self, 'headers', MappingProxyType(dict(self.headers)))
        if self.client_url is None:
            object.__setattr__(
                self, 'client_url',
                f"https://pypi.org/project/twitter-http-core/{self.client_version}/"
            )
        if self.user_agent is None:
            object.__setattr__(
                self, 'user_agent', f"{self.client_name}/{self.client_version}"
            )

    def identity_headers(self) -> Dict[str, str]:
        """Заголовки, которые присутствуют в каждом запросе."""
        headers = {
            "X-Client-Version": self.client_version,
            "X-Client-URL": self.client_url,
            "X-Client-Name": self.client_name,
            "User-Agent": self.user_agent,
        }
        if self.gzip_enabled:
            headers["Accept-Encoding"] = "gzip"
        return headers

    @classmethod
    def create(
        cls,
        gzip_enabled: bool = True,
        tls_version: str = "TLSv1.2",
        verify_ssl: bool = True,
        timeout: Union[float, Tuple[float, float], TimeoutConfig] = 120,
        connect_timeout: Optional[float] = None,
        proxy_host: Optional[str] = None,
        proxy_port: Optional[int] = None,
        proxy_user: Optional[str] = None,
        proxy_password: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
        logging: Optional['LoggingConfig'] = None,
        **kwargs
    ) -> 'HttpClientConfig':
        """
        Удобный конструктор конфигурации.

        Args:
            gzip_enabled: Включить gzip
            tls_version: Версия TLS
            verify_ssl: Проверять SSL
            timeout: Таймаут чтения (число), (connect, read) или TimeoutConfig
            connect_timeout: Таймаут подключения (переопределяет timeout)
            proxy_host: Хост прокси
            proxy_port: Порт прокси
            proxy_user: Пользователь прокси
            proxy_password: Пароль прокси
            headers: Дополнительные заголовки
            logging: Конфигурация логирования
            **kwargs: Остальные поля HttpClientConfig (client_name, user_agent, ...)

        Returns:
            HttpClientConfig instance

        Examples:
            >>> config = HttpClientConfig.create(timeout=(5, 60), gzip_enabled=False)
        """
        if isinstance(timeout, TimeoutConfig):
            timeout_cfg = timeout
        elif isinstance(timeout, tuple):
            timeout_cfg = TimeoutConfig(connect=timeout[0], read=timeout[1])
        else:
            timeout_cfg = TimeoutConfig(read=timeout)

        if connect_timeout is not None:
            timeout_cfg = TimeoutConfig(connect=connect_timeout, read=timeout_cfg.read)

        proxy_cfg = ProxyConfig(
            host=proxy_host,
            port=proxy_port,
            user=proxy_user,
            password=proxy_password,
        )

        return cls(
            gzip_enabled=gzip_enabled,
            tls_version=tls_version,
            verify_ssl=verify_ssl,
            timeout=timeout_cfg,
            proxy=proxy_cfg,
            headers=headers or {},
            logging=logging,
            **kwargs
        )

    def with_headers(self, headers: Dict[str, str]) -> 'HttpClientConfig':
        """
        Создать новый конфиг с дополнительными заголовками.

        Example:
            >>> new_config = config.with_headers({"X-Request-Source": "batch"})
        """
        merged = dict(self.headers)
        merged.update(headers)
        return replace(self, headers=merged)
