"""
Конфигурация клиента из переменных окружения.

Переменные с префиксом TWITTER_HTTP_ (и .env файл) валидируются
pydantic-settings и превращаются в HttpClientConfig.

Example .env file:
    TWITTER_HTTP_GZIP_ENABLED=false
    TWITTER_HTTP_TLS_VERSION=TLSv1.2
    TWITTER_HTTP_TIMEOUT_CONNECT=10
    TWITTER_HTTP_TIMEOUT_READ=60
    TWITTER_HTTP_PROXY_HOST=proxy.local
    TWITTER_HTTP_PROXY_PORT=3128
    TWITTER_HTTP_LOG_ENABLED=true
    TWITTER_HTTP_LOG_LEVEL=DEBUG
"""

from typing import Any, Literal, Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .config import HttpClientConfig, ProxyConfig, TimeoutConfig
from .logging import LoggingConfig

ENV_PREFIX = "TWITTER_HTTP_"


class HttpClientSettings(BaseSettings):
    """
    Настройки клиента из окружения.

    Приоритет: аргументы конструктора > переменные окружения > .env > значения по умолчанию.
    """

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_file='.env',
        env_file_encoding='utf-8',
        case_sensitive=False,
        extra='ignore',
    )

    gzip_enabled: bool = Field(default=True)
    tls_version: Literal["TLSv1.2", "TLSv1.3"] = Field(default="TLSv1.2")
    verify_ssl: bool = Field(default=True)

    timeout_connect: float = Field(default=20.0, gt=0)
    timeout_read: float = Field(default=120.0, gt=0)

    proxy_host: Optional[str] = None
    proxy_port: Optional[int] = Field(default=None, ge=1, le=65535)
    proxy_user: Optional[str] = None
    proxy_password: Optional[str] = None

    user_agent: Optional[str] = None

    log_enabled: bool = Field(default=False)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="INFO")
    log_format: Literal["json", "text"] = Field(default="text")
    log_file_path: Optional[str] = None

    @field_validator('log_level', mode='before')
    @classmethod
    def normalize_level(cls, v: Any) -> Any:
        return v.upper() if isinstance(v, str) else v

    @field_validator('proxy_host')
    @classmethod
    def empty_host_is_none(cls, v: Optional[str]) -> Optional[str]:
        """Пустая строка = прокси не настроен."""
        if v is not None and not v.strip():
            return None
        return v

    @model_validator(mode='after')
    def check_proxy_port(self) -> 'HttpClientSettings':
        if self.proxy_port is not None and self.proxy_host is None:
            raise ValueError("proxy_port requires proxy_host")
        return self

    def to_logging_config(self) -> Optional[LoggingConfig]:
        if not self.log_enabled:
            return None
        return LoggingConfig.create(
            level=self.log_level,
            format=self.log_format,
            enable_file=self.log_file_path is not None,
            file_path=self.log_file_path,
        )

    def to_config(self) -> HttpClientConfig:
        """Собрать HttpClientConfig."""
        extra = {}
        if self.user_agent:
            extra['user_agent'] = self.user_agent
        return HttpClientConfig(
            gzip_enabled=self.gzip_enabled,
            tls_version=self.tls_version,
            verify_ssl=self.verify_ssl,
            timeout=TimeoutConfig(connect=self.timeout_connect, read=self.timeout_read),
            proxy=ProxyConfig(
                host=self.proxy_host,
                port=self.proxy_port,
                user=self.proxy_user,
                password=self.proxy_password,
            ),
            logging=self.to_logging_config(),
            **extra
        )


def load_from_env(env_file: Optional[str] = None, **overrides: Any) -> HttpClientConfig:
    """
    Загрузить HttpClientConfig из окружения.

    Args:
        env_file: Путь к .env файлу (по умолчанию ./.env, если есть)
        **overrides: Значения, переопределяющие окружение

    Raises:
        pydantic.ValidationError: Некорректные значения

    Example:
        >>> config = load_from_env(gzip_enabled=False)
    """
    if env_file is not None:
        settings = HttpClientSettings(_env_file=env_file, **overrides)
    else:
        settings = HttpClientSettings(**overrides)
    return settings.to_config()
