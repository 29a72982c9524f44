"""
Разбор ответа Gemini в InferenceOutcome.

Наружу исключения не выходят: любая проблема с телом ответа → Failure(EMPTY_RESPONSE).
"""

import logging
from typing import Any, Dict, Optional

from food_master.constants import ErrorKind
from food_master.error_contract import FailureRegistry
from food_master.exceptions import EmptyResponseError
from food_master.models import Failure, InferenceOutcome, RawResponse, Success
from food_master.utils.helpers import safe_json_loads

logger = logging.getLogger(__name__)


def _first(value: Any) -> Dict[str, Any]:
    """Первый элемент списка, если это dict; иначе пустой dict."""
    if isinstance(value, list) and value and isinstance(value[0], dict):
        return value[0]
    return {}


def _block_reason(payload: Dict[str, Any]) -> str:
    """Причина, по которой модель не дала текст (safety block, MAX_TOKENS и т.п.)."""
    feedback = payload.get("promptFeedback")
    if isinstance(feedback, dict) and feedback.get("blockReason"):
        return f"blockReason={feedback['blockReason']}"
    finish_reason = _first(payload.get("candidates")).get("finishReason")
    if finish_reason and finish_reason != "STOP":
        return f"finishReason={finish_reason}"
    return ""


def _find_text(payload: Dict[str, Any]) -> str:
    """
    candidates[0].content.parts[0].text

    Raises:
        EmptyResponseError: путь отсутствует или текст пустой
    """
    content = _first(payload.get("candidates")).get("content")
    if not isinstance(content, dict):
        raise EmptyResponseError("candidates[0].content is missing")

    text = _first(content.get("parts")).get("text")
    if not isinstance(text, str) or not text:
        raise EmptyResponseError("candidates[0].content.parts[0].text is missing or empty")

    return text


def extract(
    raw: RawResponse,
    *,
    locale: Optional[str] = None,
    request_id: str = "",
) -> InferenceOutcome:
    """
    Превращает сырой ответ в Success(description) или Failure(EMPTY_RESPONSE).

    Args:
        raw: Успешный HTTP ответ от транспорта
        locale: Язык сообщения для пользователя при ошибке
        request_id: ID для трассировки

    Returns:
        Success или Failure (никогда не бросает исключений)
    """
    payload, preview = safe_json_loads(raw.text)

    try:
        if not payload:
            raise EmptyResponseError(f"response is not a JSON object: {preview or '<empty body>'}")
        description = _find_text(payload)

    except EmptyResponseError as e:
        reason = _block_reason(payload)
        detail = f"{e} ({reason})" if reason else str(e)
        logger.warning("[Gemini] request_id=%s empty response: %s", request_id, detail)
        return Failure(
            kind=ErrorKind.EMPTY_RESPONSE,
            message=FailureRegistry.user_message(ErrorKind.EMPTY_RESPONSE, locale),
            detail=detail,
            request_id=request_id,
            allow_retry=FailureRegistry.get(ErrorKind.EMPTY_RESPONSE).allow_retry,
        )

    logger.info(
        "[Gemini] request_id=%s description extracted, length=%d", request_id, len(description)
    )
    return Success(description=description, request_id=request_id)
