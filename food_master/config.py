"""
Конфигурация приложения - загрузка настроек из .env файла.
"""

import logging
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Настройки приложения из переменных окружения."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Gemini Vision API
    GEMINI_API_KEY: str = ""  # Выдаётся снаружи (секрет окружения), в коде не хранится
    GEMINI_BASE_URL: str = "https://generativelanguage.googleapis.com/v1beta"
    GEMINI_MODEL: str = "gemini-2.5-flash-preview-05-20"
    GEMINI_TIMEOUT: int = 60  # Таймаут чтения ответа (сек)

    # Gemini Retry Configuration
    GEMINI_RETRY_ATTEMPTS: int = 3  # Всего попыток (1 + 2 повтора)
    GEMINI_RETRY_BASE_DELAY: float = 1.0  # Задержка после первого 429 (сек), дальше x2

    # Image validation
    MAX_IMAGE_MB: int = 5
    ALLOWED_IMAGE_TYPES: str = "image/png,image/jpeg"
    VERIFY_IMAGE_DECODE: bool = True  # Проверять, что Pillow может прочитать файл

    # Язык ответа модели и сообщений для пользователя
    LOCALE: str = "ko"

    # Feature Flags
    DEBUG_MODE: bool = False  # Включает DEBUG логирование независимо от LOG_LEVEL

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: Optional[str] = None
    LOG_MAX_BYTES: int = 10485760  # 10 MB
    LOG_BACKUP_COUNT: int = 5

    @property
    def max_image_bytes(self) -> int:
        """Максимальный размер изображения в байтах."""
        return self.MAX_IMAGE_MB * 1024 * 1024

    @property
    def allowed_image_types(self) -> frozenset[str]:
        """Возвращает множество разрешённых MIME-типов из ALLOWED_IMAGE_TYPES."""
        types: list[str] = []

        for raw_type in self.ALLOWED_IMAGE_TYPES.split(','):
            raw_type = raw_type.strip().lower()
            if not raw_type:
                continue
            if "/" not in raw_type:
                logging.getLogger(__name__).warning(
                    "[CONFIG] ALLOWED_IMAGE_TYPES содержит некорректное значение: %s", raw_type
                )
                continue
            types.append(raw_type)

        return frozenset(types)


# Глобальный экземпляр настроек
settings = Settings()
