"""
Промпты Gemini для распознавания и описания блюда по фото.

Текст промптов фиксирован: меняется только изображение.
Язык ответа модели задаётся языком системной инструкции.
"""

from typing import Optional

from food_master.config import settings

PROMPT_VERSION = "v1.0"

DEFAULT_LOCALE = "ko"

SYSTEM_PROMPT_KO = (
    "당신은 전문적인 미식 AI 비서입니다. "
    "당신의 임무는 이미지에 보이는 음식을 정확하게 식별하고, "
    "해당 요리에 대한 간결하고 매력적인 설명을 한국어로 제공하는 것입니다. "
    "가능한 주재료와 일반적인 서빙 방식에 대해 언급해 주세요. "
    "이미지를 분석했다는 사실을 언급하지 마세요. "
    "마치 눈앞에 음식을 보고 말하는 것처럼 자신감 있는 어투로 정보를 제시하세요."
)

SYSTEM_PROMPT_RU = (
    "Ты — профессиональный гастрономический AI-ассистент. "
    "Твоя задача — точно определить блюдо и дать короткое привлекательное описание на русском языке. "
    "Назови вероятные основные ингредиенты и то, как блюдо обычно подают. "
    "Не упоминай, что ты анализировал изображение. "
    "Говори уверенно, от первого лица, как будто блюдо стоит прямо перед тобой."
)

SYSTEM_PROMPT_EN = (
    "You are a professional gourmet AI assistant. "
    "Your task is to identify the dish precisely and give a short, appealing description in English. "
    "Mention the likely main ingredients and how the dish is typically served. "
    "Never mention that you analyzed an image. "
    "Speak confidently in the first person, as if the food were right in front of you."
)

_SYSTEM_PROMPTS = {
    "ko": SYSTEM_PROMPT_KO,
    "ru": SYSTEM_PROMPT_RU,
    "en": SYSTEM_PROMPT_EN,
}

_USER_QUERIES = {
    "ko": "이 음식은 무엇인가요? 식별하고 설명해 주세요.",
    "ru": "Что это за блюдо? Определи и опиши его.",
    "en": "What is this food? Identify it and describe it.",
}

SUPPORTED_LOCALES = frozenset(_SYSTEM_PROMPTS)


def _resolve_locale(locale: Optional[str]) -> str:
    locale = (locale or settings.LOCALE or DEFAULT_LOCALE).lower()
    return locale if locale in SUPPORTED_LOCALES else DEFAULT_LOCALE


def get_system_prompt(locale: Optional[str] = None) -> str:
    """
    Возвращает системную инструкцию (персона, стиль и язык ответа).

    Args:
        locale: "ko" / "ru" / "en"; неизвестный язык → DEFAULT_LOCALE

    Returns:
        Текст системной инструкции
    """
    return _SYSTEM_PROMPTS[_resolve_locale(locale)]


def get_user_query(locale: Optional[str] = None) -> str:
    """Возвращает вопрос пользователя, который идёт вместе с фото."""
    return _USER_QUERIES[_resolve_locale(locale)]

