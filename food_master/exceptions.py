"""
exceptions.py — типы ошибок пайплайна распознавания.

Простыми словами:
- мы не хотим в коде ловить “голые Exception”
- нам нужны понятные категории ошибок:
  1) Ошибка изображения (валидация) — повторять запрос бессмысленно
  2) Ошибка транспорта (сеть, 429 после всех попыток, HTTP статус)
  3) Ошибка ответа (нет текста в ответе модели)

Все они превращаются в Failure в InferenceController
(apps-уровень никогда не видит эти исключения).
"""

from typing import Optional

from .constants import ErrorKind


class FoodMasterError(Exception):
    """Базовая ошибка пайплайна (любой тип)."""

    kind: ErrorKind = ErrorKind.UNEXPECTED


# ---------------------------------------------------------------------------
# ImageCodec
# ---------------------------------------------------------------------------


class ImageValidationError(FoodMasterError, ValueError):
    """Изображение не прошло проверку до кодирования."""

    kind = ErrorKind.MALFORMED_INPUT


class ImageTooLargeError(ImageValidationError):
    """
    Файл больше допустимого размера (MAX_IMAGE_MB).
    """

    kind = ErrorKind.TOO_LARGE

    def __init__(self, size: int, max_bytes: int) -> None:
        self.size = size
        self.max_bytes = max_bytes
        super().__init__(f"Image is too large: {size} bytes (limit {max_bytes})")


class MalformedImageError(ImageValidationError):
    """
    Не удалось разобрать MIME-тип или закодировать файл.
    Пример: пустой файл, image/gif, битые байты.
    """

    kind = ErrorKind.MALFORMED_INPUT


# ---------------------------------------------------------------------------
# RetryingTransport
# ---------------------------------------------------------------------------


class TransportError(FoodMasterError):
    """Ошибка HTTP вызова Gemini."""

    kind = ErrorKind.EXHAUSTED


class TransportExhaustedError(TransportError):
    """
    Все попытки израсходованы (сетевые ошибки или 429 до последней попытки).
    """

    kind = ErrorKind.EXHAUSTED

    def __init__(self, attempts: int, last_error: str = "") -> None:
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(f"Gemini request failed after {attempts} attempts: {last_error}")


class TransportHTTPError(TransportError):
    """
    Неуспешный HTTP статус (кроме 429) — не ретраится.
    """

    kind = ErrorKind.HTTP_ERROR

    def __init__(self, status: int, detail: Optional[str] = None) -> None:
        self.status = status
        self.detail = detail or ""
        super().__init__(f"Gemini HTTP error {status}: {self.detail or 'no detail'}")


# ---------------------------------------------------------------------------
# ResultExtractor
# ---------------------------------------------------------------------------


class ExtractionError(FoodMasterError):
    """Ответ получен, но в нём нет пригодного текста."""

    kind = ErrorKind.EMPTY_RESPONSE


class EmptyResponseError(ExtractionError):
    """candidates[0].content.parts[0].text отсутствует или пустой."""

    kind = ErrorKind.EMPTY_RESPONSE
