"""
Промпты для распознавания еды.
"""

from .food_recognition import (
    get_system_prompt,
    get_user_query,
    PROMPT_VERSION,
    SUPPORTED_LOCALES,
    SYSTEM_PROMPT_KO,
)

__all__ = [
    "get_system_prompt",
    "get_user_query",
    "PROMPT_VERSION",
    "SUPPORTED_LOCALES",
    "SYSTEM_PROMPT_KO",
]
