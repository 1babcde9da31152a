"""
Маскирование учетных данных API в логах.

Заголовок Authorization, OAuth-параметры (oauth_token, oauth_signature, ...)
и секреты приложения не должны попадать в логи ни в каком виде.
"""

import re
from typing import Any, Dict, Mapping

REDACTED = "***REDACTED***"

# Ключи сравниваются без учета регистра; ключ считается чувствительным,
# если содержит одно из этих слов
SENSITIVE_KEYS = {
    'authorization', 'proxy-authorization', 'cookie', 'set-cookie',
    'password', 'passwd', 'secret', 'token', 'api_key', 'apikey',
    'oauth_token', 'oauth_signature', 'oauth_nonce', 'oauth_verifier',
    'consumer_key', 'consumer_secret', 'access_token_secret',
    'bearer',
}

SENSITIVE_PATTERNS = [
    (re.compile(r'(Bearer\s+)([A-Za-z0-9\-._~+/%]+=*)', re.IGNORECASE), r'\1' + REDACTED),
    (re.compile(r'(Basic\s+)([A-Za-z0-9+/]+=*)', re.IGNORECASE), r'\1' + REDACTED),
    # OAuth 1.0a: oauth_signature="..."
    (re.compile(r'(oauth_[a-z_]+=")([^"]*)(")', re.IGNORECASE), r'\1' + REDACTED + r'\3'),
]

_QUERY_PARAM = re.compile(r'([?&])([^=&#\s]+)=([^&#\s]*)')
_URL_USERINFO = re.compile(r'://([^:/@]+):([^@/]+)@')


def mask_sensitive_data(data: Any, mask: str = REDACTED) -> Any:
    """
    Рекурсивно маскирует чувствительные данные в словарях, списках и строках.

    Возвращает копию; исходные данные не изменяются. Значения прочих
    типов (числа, объекты) возвращаются как есть.

    Examples:
        >>> mask_sensitive_data({"Authorization": "Bearer abc", "count": 5})
        {'Authorization': '***REDACTED***', 'count': 5}
    """
    if isinstance(data, str):
        return _mask_string(data, mask)

    if isinstance(data, Mapping):
        return _mask_dict(data, mask)

    if isinstance(data, (list, tuple)):
        return type(data)(mask_sensitive_data(item, mask) for item in data)

    return data


def mask_headers(headers: Mapping[str, str], mask: str = REDACTED) -> Dict[str, str]:
    """Маскирует значения чувствительных HTTP-заголовков."""
    return _mask_dict(headers, mask)


def mask_url(url: str, mask: str = REDACTED) -> str:
    """
    Маскирует пароль в userinfo и чувствительные query-параметры.

    Examples:
        >>> mask_url("https://api.example.com/1.1/x.json?oauth_token=abc&count=5")
        'https://api.example.com/1.1/x.json?oauth_token=***REDACTED***&count=5'
    """
    url = _URL_USERINFO.sub(rf'://\1:{mask}@', url)

    def _replace(match):
        sep, name, value = match.groups()
        if is_sensitive_key(name):
            value = mask
        return f"{sep}{name}={value}"

    return _QUERY_PARAM.sub(_replace, url)


def is_sensitive_key(key: Any) -> bool:
    key = str(key).lower()
    return any(sensitive in key for sensitive in SENSITIVE_KEYS)


def _mask_dict(data: Mapping[Any, Any], mask: str) -> Dict[Any, Any]:
    return {
        key: mask if is_sensitive_key(key) else mask_sensitive_data(value, mask)
        for key, value in data.items()
    }


def _mask_string(text: str, mask: str) -> str:
    if '://' in text:
        text = mask_url(text, mask)
    for pattern, replacement in SENSITIVE_PATTERNS:
        text = pattern.sub(replacement.replace(REDACTED, mask), text)
    return text
