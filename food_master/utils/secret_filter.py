"""
Фильтр для маскирования секретных данных в логах (API keys, tokens, image payloads).

Предотвращает утечку ключа Gemini и base64-изображений при DEBUG_MODE=True или verbose logging.
"""

import logging
import re
from typing import Pattern


class SecretMaskingFilter(logging.Filter):
    """
    Logging filter для маскирования секретных данных в log records.

    Маскирует:
    - Google API keys (AIza...) и параметр ?key=...
    - заголовок x-goog-api-key
    - API keys в формате "Bearer <key>"
    - длинные hex/base64 строки (в том числе данные изображений)
    """

    # Паттерны для поиска секретов
    PATTERNS: list[tuple[Pattern[str], str]] = [
        # Google API keys (формат: AIza + 35 символов)
        (re.compile(r'AIza[0-9A-Za-z_\-]{35}'), '***MASKED_GOOGLE_KEY***'),

        # Ключ в query string (?key=... / &key=...)
        (re.compile(r'([?&]key=)[^&\s\'"]+', re.IGNORECASE), r'\1***MASKED***'),

        # Заголовок x-goog-api-key в логах httpx
        (re.compile(r"'x-goog-api-key':\s*'([^']+)'", re.IGNORECASE), r"'x-goog-api-key': '***MASKED***'"),
        (re.compile(r'"x-goog-api-key":\s*"([^"]+)"', re.IGNORECASE), r'"x-goog-api-key": "***MASKED***"'),

        # Bearer tokens (Authorization: Bearer <token>)
        (re.compile(r'Bearer\s+([a-zA-Z0-9_\-\.]{20,})', re.IGNORECASE), r'Bearer ***MASKED***'),

        # Generic secrets: длинные hex строки (64+ символов)
        (re.compile(r'\b[a-fA-F0-9]{64,}\b'), '***MASKED_HEX***'),

        # Generic secrets и base64 изображений: длинные base64-like строки (40+ символов)
        (re.compile(r'\b[a-zA-Z0-9+/=]{40,}\b'), '***MASKED_B64***'),
    ]

    def filter(self, record: logging.LogRecord) -> bool:
        """
        Фильтрует log record, маскируя секретные данные.

        Args:
            record: Log record для фильтрации

        Returns:
            True (always) - record всегда проходит, но с замаскированными данными
        """
        if hasattr(record, 'msg') and isinstance(record.msg, str):
            record.msg = self._mask_secrets(record.msg)

        if hasattr(record, 'args') and record.args:
            if isinstance(record.args, dict):
                record.args = {
                    key: self._mask_secrets(value) if isinstance(value, str) else value
                    for key, value in record.args.items()
                }
            elif isinstance(record.args, tuple):
                record.args = tuple(
                    self._mask_secrets(arg) if isinstance(arg, str) else arg
                    for arg in record.args
                )

        return True

    def _mask_secrets(self, text: str) -> str:
        for pattern, replacement in self.PATTERNS:
            text = pattern.sub(replacement, text)
        return text


def apply_secret_filter_to_logger(logger: logging.Logger) -> None:
    """
    Применяет SecretMaskingFilter к логгеру и всем его handlers.

    Уже установленный фильтр переиспользуется, повторный вызов ничего не дублирует.

    Args:
        logger: Logger для применения фильтра
    """
    secret_filter = next(
        (f for f in logger.filters if isinstance(f, SecretMaskingFilter)),
        None,
    )
    if secret_filter is None:
        secret_filter = SecretMaskingFilter()
        logger.addFilter(secret_filter)

    for handler in logger.handlers:
        if not any(isinstance(f, SecretMaskingFilter) for f in handler.filters):
            handler.addFilter(secret_filter)
