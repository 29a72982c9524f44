"""
Клиент Gemini: сборка запроса, транспорт с повторами, разбор ответа.
"""

from .extractor import extract
from .request_builder import build_request
from .transport import RetryingTransport

__all__ = [
    "build_request",
    "extract",
    "RetryingTransport",
]
