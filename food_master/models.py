"""
models.py — данные пайплайна распознавания.

Поток данных (строго вниз):
    RawImageFile -> EncodedImage -> InferenceRequest -> RawResponse -> InferenceOutcome

SessionState — единственный изменяемый объект, пишет в него только InferenceController.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Union

from .constants import ErrorKind


@dataclass(frozen=True)
class EncodedImage:
    """
    Изображение, готовое для вставки в JSON запроса.

    media_type — MIME-тип из разрешённого списка ("image/png", "image/jpeg")
    data       — base64 текст (никогда не пустой)
    """

    media_type: str
    data: str

    @property
    def data_url(self) -> str:
        """data URL для превью в UI."""
        return f"data:{self.media_type};base64,{self.data}"

    def __repr__(self) -> str:
        # base64 может весить мегабайты — в repr и логи не пускаем
        return f"EncodedImage(media_type={self.media_type!r}, data=<{len(self.data)} chars>)"


@dataclass(frozen=True)
class InferenceRequest:
    """Один запрос к Gemini: системная инструкция + вопрос + изображение."""

    instruction: str
    query: str
    image: EncodedImage

    def to_payload(self) -> Dict[str, Any]:
        """JSON body для generateContent."""
        return {
            "contents": [
                {
                    "role": "user",
                    "parts": [
                        {"text": self.query},
                        {
                            "inlineData": {
                                "mimeType": self.image.media_type,
                                "data": self.image.data,
                            }
                        },
                    ],
                }
            ],
            "systemInstruction": {
                "parts": [{"text": self.instruction}],
            },
        }


@dataclass(frozen=True)
class RawResponse:
    """Успешный (2xx) HTTP ответ, ещё не разобранный."""

    status_code: int
    text: str
    attempts: int = 1


@dataclass(frozen=True)
class Success:
    """Распознавание удалось: description готов к показу."""

    description: str
    request_id: str = ""

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    """
    Распознавание не удалось.

    message — сообщение для пользователя (без технических деталей)
    detail  — диагностика для логов (статус, ошибка парсинга), в UI не показывается
    allow_retry — показывать ли кнопку "попробовать ещё раз" с тем же фото
    """

    kind: ErrorKind
    message: str
    detail: str = ""
    request_id: str = ""
    allow_retry: bool = False

    @property
    def ok(self) -> bool:
        return False


InferenceOutcome = Union[Success, Failure]


class Phase(str, Enum):
    """Фаза сессии (что сейчас показывает UI)."""

    IDLE = "idle"
    LOADING = "loading"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass
class SessionState:
    """
    Состояние одной пользовательской сессии.

    Single-writer: изменяет только InferenceController.
    UI читает поля или берёт consistent копию через InferenceController.snapshot().
    """

    phase: Phase = Phase.IDLE
    current_image: Optional[EncodedImage] = None
    last_outcome: Optional[InferenceOutcome] = None
    # Отказ последнего select_image(); сбрасывается следующим удачным выбором
    selection_failure: Optional[Failure] = None

    @property
    def is_busy(self) -> bool:
        return self.phase is Phase.LOADING

    @property
    def can_identify(self) -> bool:
        """Кнопка "распознать" активна: есть фото и нет запроса в полёте."""
        return self.current_image is not None and not self.is_busy

    @property
    def preview_data_url(self) -> Optional[str]:
        if self.current_image is None:
            return None
        return self.current_image.data_url
