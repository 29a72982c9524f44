"""
helpers.py — вспомогательные функции без зависимостей от остального пакета.

Правила:
- никаких секретов в логах
- никаких больших данных (байты/base64 изображений) в логах
"""

import json
from typing import Any, Dict, Tuple
import uuid


def new_request_id() -> str:
    """
    Генерирует request_id для трассировки одного запуска распознавания.

    Все строки лога одного identify() содержат этот идентификатор.
    """
    return uuid.uuid4().hex


def join_url(base_url: str, path: str) -> str:
    """
    Склеивает base_url и path без двойных слешей.

    join_url("https://x/v1beta", "/models/m:generateContent") -> "https://x/v1beta/models/m:generateContent"
    """
    base = (base_url or "").rstrip("/")
    p = path if (path or "").startswith("/") else f"/{path}"
    return f"{base}{p}"


def safe_json_loads(raw_text: str, *, max_preview: int = 300) -> Tuple[Dict[str, Any], str]:
    """
    Безопасно парсит JSON строку.

    Возвращает:
    - dict (если удалось и это объект)
    - preview текста (если не удалось/не dict), чтобы логировать кратко
    """
    text = (raw_text or "").strip()
    if not text:
        return {}, ""

    try:
        parsed = json.loads(text)
    except json.JSONDecodeError:
        return {}, text[:max_preview]

    if isinstance(parsed, dict):
        return parsed, ""
    # Список/число/строка — ошибка формата
    return {}, text[:max_preview]
