"""
Constants shared by the recognition pipeline.

ErrorKind is the SSOT for failure classification: exceptions carry it,
Failure outcomes expose it, error_contract maps it to user messages.
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Категория неудачи распознавания (для логов и выбора сообщения)."""

    # ImageCodec
    TOO_LARGE = "too_large"
    MALFORMED_INPUT = "malformed_input"

    # InferenceController guards
    NO_IMAGE = "no_image"
    BUSY = "busy"

    # RetryingTransport
    EXHAUSTED = "exhausted"
    HTTP_ERROR = "http_error"

    # ResultExtractor
    EMPTY_RESPONSE = "empty_response"

    # Anything else that escaped the pipeline
    UNEXPECTED = "unexpected"


# Too Many Requests — единственный статус, который ретраим с backoff
RATE_LIMIT_STATUS = 429

# Endpoint относительно GEMINI_BASE_URL
GENERATE_CONTENT_PATH = "/models/{model}:generateContent"
