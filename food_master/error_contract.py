"""
Error Contract — единый реестр сообщений об ошибках распознавания.

Принципы:
1. Пользователь видит только короткое понятное сообщение на своём языке
2. Технические детали (статус, тело ответа, request_id) уходят в лог
3. Все ошибки инференса показываются одной обнадёживающей фразой
   ("проверьте, что фото чёткое, и попробуйте ещё раз")

Использование:
    from food_master.error_contract import FailureRegistry

    FailureRegistry.user_message(ErrorKind.TOO_LARGE, locale="ru")
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional

from .config import settings
from .constants import ErrorKind

DEFAULT_LOCALE = "ko"


@dataclass(frozen=True)
class FailureDefinition:
    """
    Определение ошибки.

    Fields:
        kind: ErrorKind
        allow_retry: есть ли смысл нажать кнопку ещё раз с тем же фото
        messages: locale -> сообщение для пользователя
    """

    kind: ErrorKind
    allow_retry: bool
    messages: Mapping[str, str] = field(default_factory=dict)

    def user_message(self, locale: Optional[str] = None) -> str:
        locale = (locale or settings.LOCALE or DEFAULT_LOCALE).lower()
        return self.messages.get(locale) or self.messages[DEFAULT_LOCALE]


_RECOGNITION_FAILED = {
    "ko": "음식 인식에 실패했습니다. 이미지가 명확한지 확인하고 다시 시도해 주세요.",
    "ru": "Не удалось распознать блюдо. Проверьте, что фото чёткое, и попробуйте ещё раз.",
    "en": "Food recognition failed. Make sure the image is clear and try again.",
}


class FailureRegistry:
    """
    Реестр всех возможных ошибок.

    Все ErrorKind определены здесь, чтобы тексты не расползались по коду.
    """

    TOO_LARGE = FailureDefinition(
        kind=ErrorKind.TOO_LARGE,
        allow_retry=False,
        messages={
            "ko": "이미지 파일은 {max_mb}MB를 초과할 수 없습니다.",
            "ru": "Размер изображения не должен превышать {max_mb} MB.",
            "en": "The image file cannot exceed {max_mb}MB.",
        },
    )

    MALFORMED_INPUT = FailureDefinition(
        kind=ErrorKind.MALFORMED_INPUT,
        allow_retry=False,
        messages={
            "ko": "이미지 변환 중 오류가 발생했습니다. PNG 또는 JPG 파일을 선택해 주세요.",
            "ru": "Не удалось обработать изображение. Выберите файл PNG или JPG.",
            "en": "Could not process the image. Please choose a PNG or JPG file.",
        },
    )

    NO_IMAGE = FailureDefinition(
        kind=ErrorKind.NO_IMAGE,
        allow_retry=False,
        messages={
            "ko": "먼저 이미지를 업로드해주세요.",
            "ru": "Сначала загрузите изображение.",
            "en": "Please upload an image first.",
        },
    )

    BUSY = FailureDefinition(
        kind=ErrorKind.BUSY,
        allow_retry=False,
        messages={
            "ko": "이미 인식 중입니다. 잠시만 기다려 주세요.",
            "ru": "Распознавание уже идёт. Подождите немного.",
            "en": "Recognition is already in progress. Please wait.",
        },
    )

    EXHAUSTED = FailureDefinition(
        kind=ErrorKind.EXHAUSTED,
        allow_retry=True,
        messages=_RECOGNITION_FAILED,
    )

    HTTP_ERROR = FailureDefinition(
        kind=ErrorKind.HTTP_ERROR,
        allow_retry=True,
        messages=_RECOGNITION_FAILED,
    )

    EMPTY_RESPONSE = FailureDefinition(
        kind=ErrorKind.EMPTY_RESPONSE,
        allow_retry=True,
        messages=_RECOGNITION_FAILED,
    )

    UNEXPECTED = FailureDefinition(
        kind=ErrorKind.UNEXPECTED,
        allow_retry=True,
        messages=_RECOGNITION_FAILED,
    )

    _BY_KIND: Dict[ErrorKind, FailureDefinition] = {}

    @classmethod
    def get(cls, kind: ErrorKind) -> FailureDefinition:
        if not cls._BY_KIND:
            cls._BY_KIND = {
                value.kind: value
                for value in vars(cls).values()
                if isinstance(value, FailureDefinition)
            }
        return cls._BY_KIND.get(kind, cls.UNEXPECTED)

    @classmethod
    def user_message(cls, kind: ErrorKind, locale: Optional[str] = None) -> str:
        """Сообщение для пользователя (плейсхолдеры уже подставлены)."""
        return cls.get(kind).user_message(locale).format(max_mb=settings.MAX_IMAGE_MB)
