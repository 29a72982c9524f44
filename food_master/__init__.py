"""
food_master — распознавание еды по фото через Gemini Vision.

Простыми словами:
- UI отдаёт фото в InferenceController.select_image()
- по кнопке вызывает await InferenceController.identify()
- читает state: фаза, превью, описание блюда или сообщение об ошибке
"""

from __future__ import annotations

from .constants import ErrorKind
from .exceptions import (
    EmptyResponseError,
    ExtractionError,
    FoodMasterError,
    ImageTooLargeError,
    ImageValidationError,
    MalformedImageError,
    TransportError,
    TransportExhaustedError,
    TransportHTTPError,
)
from .models import (
    EncodedImage,
    Failure,
    InferenceOutcome,
    InferenceRequest,
    Phase,
    RawResponse,
    SessionState,
    Success,
)
from .services.image_codec import RawImageFile
from .services.inference import InferenceController

__all__ = [
    "InferenceController",
    "RawImageFile",
    "SessionState",
    "Phase",
    "EncodedImage",
    "InferenceRequest",
    "InferenceOutcome",
    "RawResponse",
    "Success",
    "Failure",
    "ErrorKind",
    "FoodMasterError",
    "ImageValidationError",
    "ImageTooLargeError",
    "MalformedImageError",
    "TransportError",
    "TransportExhaustedError",
    "TransportHTTPError",
    "ExtractionError",
    "EmptyResponseError",
]
