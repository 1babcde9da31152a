"""Вспомогательные утилиты."""

from .sanitizer import mask_headers, mask_sensitive_data, mask_url

__all__ = ["mask_sensitive_data", "mask_headers", "mask_url"]
