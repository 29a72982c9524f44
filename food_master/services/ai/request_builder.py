"""
Сборка запроса к Gemini.

Меняется только изображение: инструкция и вопрос — фиксированные тексты из prompts.
"""

from typing import Optional

from food_master.models import EncodedImage, InferenceRequest
from food_master.prompts import get_system_prompt, get_user_query


def build_request(image: EncodedImage, *, locale: Optional[str] = None) -> InferenceRequest:
    """
    Собирает InferenceRequest для одного вызова identify().

    Чистая функция: одинаковые image/locale → равные запросы.

    Args:
        image: Закодированное изображение
        locale: Язык ответа ("ko" / "ru" / "en"), по умолчанию settings.LOCALE

    Returns:
        Неизменяемый InferenceRequest
    """
    return InferenceRequest(
        instruction=get_system_prompt(locale),
        query=get_user_query(locale),
        image=image,
    )
