"""
Pytest fixtures for testing.
"""
import json
import os
from io import BytesIO
from typing import Any, Callable, Dict, List, Optional

# КРИТИЧНО: установить ДО импорта food_master (settings читаются при импорте)
os.environ["GEMINI_API_KEY"] = "test-api-key"
os.environ["GEMINI_MODEL"] = "test-model"
os.environ["LOCALE"] = "ko"
os.environ["MAX_IMAGE_MB"] = "5"
os.environ.pop("LOG_FILE", None)

import httpx
import pytest
from PIL import Image

from food_master.models import EncodedImage
from food_master.services.ai.transport import RetryingTransport
from food_master.services.image_codec import RawImageFile


def _image_bytes(fmt: str) -> bytes:
    buf = BytesIO()
    Image.new("RGB", (4, 4), (200, 80, 40)).save(buf, format=fmt)
    return buf.getvalue()


@pytest.fixture
def png_bytes() -> bytes:
    """Маленький валидный PNG."""
    return _image_bytes("PNG")


@pytest.fixture
def jpeg_bytes() -> bytes:
    """Маленький валидный JPEG."""
    return _image_bytes("JPEG")


@pytest.fixture
def png_file(png_bytes) -> RawImageFile:
    return RawImageFile.from_bytes(png_bytes, "image/png", name="dish.png")


@pytest.fixture
def encoded_image() -> EncodedImage:
    return EncodedImage(media_type="image/png", data="iVBORw0KGgo=")


def gemini_body(text: Optional[str]) -> Dict[str, Any]:
    """Ответ generateContent с текстом в candidates[0].content.parts[0].text."""
    return {
        "candidates": [
            {
                "content": {"role": "model", "parts": [{"text": text}]},
                "finishReason": "STOP",
            }
        ]
    }


@pytest.fixture
def success_body() -> Callable[[str], Dict[str, Any]]:
    return gemini_body


class SleepRecorder:
    """Подменяет asyncio.sleep: запоминает задержки и не ждёт."""

    def __init__(self) -> None:
        self.delays: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(float(seconds))


@pytest.fixture
def sleep_recorder() -> SleepRecorder:
    return SleepRecorder()


class ScriptedHandler:
    """
    Handler для httpx.MockTransport: отдаёт ответы по очереди.

    Элемент сценария — httpx.Response, статус (int), dict (200 + JSON)
    или исключение (сетевая ошибка).
    Последний элемент повторяется, если сценарий закончился.
    """

    def __init__(self, script: List[Any]) -> None:
        self.script = list(script)
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        index = min(len(self.requests), len(self.script)) - 1
        item = self.script[index]

        if isinstance(item, Exception):
            raise item
        if isinstance(item, httpx.Response):
            return item
        if isinstance(item, int):
            return httpx.Response(item, json={"error": {"code": item, "message": f"status {item}"}})
        return httpx.Response(200, text=json.dumps(item, ensure_ascii=False))

    @property
    def calls(self) -> int:
        return len(self.requests)


@pytest.fixture
def make_transport(sleep_recorder):
    """Factory: RetryingTransport поверх httpx.MockTransport со сценарием ответов."""

    def _make(script: List[Any], **kwargs) -> tuple[RetryingTransport, ScriptedHandler]:
        handler = ScriptedHandler(script)
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        transport = RetryingTransport(
            base_url="https://gemini.test/v1beta",
            api_key="test-api-key",
            model="test-model",
            client=client,
            sleep=sleep_recorder,
            **kwargs,
        )
        return transport, handler

    return _make
