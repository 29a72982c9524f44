"""
image_codec.py — проверка и кодирование изображения для Gemini.

Простыми словами:
- принимаем файл от UI (объявленный размер + объявленный MIME-тип)
- проверяем размер ДО чтения байтов
- кодируем в base64 через data URL и вытаскиваем MIME-тип из его префикса
- никакой сети, никаких изменений изображения (не ресайзим, не пережимаем)
"""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass
from io import BytesIO
import logging
import mimetypes
from pathlib import Path
import re
from typing import Iterable, Optional, Protocol, Tuple, Union

from PIL import Image

from food_master.config import settings
from food_master.exceptions import ImageTooLargeError, MalformedImageError
from food_master.models import EncodedImage

logger = logging.getLogger(__name__)

# "data:image/png;base64" (допускаем параметры вроде "; charset=binary")
_DATA_URL_HEADER_RE = re.compile(
    r"^data:([a-z0-9.+-]+/[a-z0-9.+-]+)(?:\s*;\s*[^;,]*)*;base64$",
    re.IGNORECASE,
)


class ImageUpload(Protocol):
    """Что должен уметь файл от UI."""

    content_type: str
    size: int

    def read(self) -> bytes:
        ...


@dataclass(frozen=True)
class RawImageFile:
    """
    Файл изображения в том виде, как его отдаёт поле выбора файла.

    content_type — объявленный MIME-тип ("image/png", "image/jpeg")
    size         — объявленный размер в байтах
    data         — сырые байты
    """

    content_type: str
    size: int
    data: bytes
    name: str = ""

    def read(self) -> bytes:
        return self.data

    def __repr__(self) -> str:
        return (
            f"RawImageFile(name={self.name!r}, content_type={self.content_type!r}, "
            f"size={self.size})"
        )

    @classmethod
    def from_bytes(cls, data: bytes, content_type: str, name: str = "") -> "RawImageFile":
        return cls(content_type=content_type, size=len(data), data=data, name=name)

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> "RawImageFile":
        """MIME-тип угадываем по расширению (как это делает браузер)."""
        path = Path(path)
        content_type, _ = mimetypes.guess_type(path.name)
        return cls(
            content_type=content_type or "",
            size=path.stat().st_size,
            data=path.read_bytes(),
            name=path.name,
        )

    @classmethod
    def from_data_url(cls, data_url: str, name: str = "") -> "RawImageFile":
        """Файл из data URL (вывод FileReader.readAsDataURL)."""
        data, content_type = parse_data_url(data_url)
        return cls.from_bytes(data, content_type, name=name)


def _split_data_url(data_url: str) -> Tuple[str, str]:
    """
    Делит data URL на (media_type, base64 payload).

    Raises:
        MalformedImageError: нет префикса data:, нет ;base64, пустые данные
    """
    header, sep, payload = (data_url or "").partition(",")
    match = _DATA_URL_HEADER_RE.match(header.strip())
    if not sep or not match:
        raise MalformedImageError("Could not parse media type from data URL")
    if not payload:
        raise MalformedImageError("Data URL has empty payload")
    return match.group(1).lower(), payload


def _check_allowed(media_type: str, allowed_types: Iterable[str]) -> None:
    if media_type not in allowed_types:
        raise MalformedImageError(f"Unsupported media type: {media_type}")


def _verify_decodable(data: bytes) -> None:
    """Pillow должен узнать формат. Изображение НЕ изменяется."""
    try:
        with Image.open(BytesIO(data)) as img:
            img.verify()
    except Exception as e:
        logger.warning("Image decode check failed: %s", type(e).__name__)
        raise MalformedImageError(f"Image bytes are not decodable: {type(e).__name__}") from e


def parse_data_url(
    data_url: str,
    *,
    allowed_types: Optional[Iterable[str]] = None,
) -> Tuple[bytes, str]:
    """
    Парсит data URL и возвращает (image_bytes, content_type).

    data:image/jpeg;base64,/9j/4AAQ... -> (b"\\xff\\xd8...", "image/jpeg")

    Raises:
        MalformedImageError (это ValueError): неверный формат, неразрешённый тип,
        битый base64, пустые данные
    """
    allowed = frozenset(allowed_types) if allowed_types is not None else settings.allowed_image_types

    media_type, payload = _split_data_url(data_url)
    _check_allowed(media_type, allowed)

    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise MalformedImageError(f"Invalid base64 payload: {e}") from e

    if not data:
        raise MalformedImageError("Data URL decodes to empty bytes")

    return data, media_type


def encode(
    raw_file: ImageUpload,
    *,
    max_bytes: Optional[int] = None,
    allowed_types: Optional[Iterable[str]] = None,
    verify: Optional[bool] = None,
) -> EncodedImage:
    """
    Проверяет файл и кодирует его в EncodedImage.

    Порядок:
    1. объявленный размер <= max_bytes (байты ещё не читаем)
    2. читаем байты, повторно проверяем фактический размер
    3. base64 → data URL → media_type из префикса
    4. media_type из разрешённого списка
    5. (опционально) Pillow узнаёт формат

    Raises:
        ImageTooLargeError: файл больше лимита
        MalformedImageError: MIME-тип не разобран/не разрешён, пустой или битый файл
    """
    max_bytes = max_bytes if max_bytes is not None else settings.max_image_bytes
    allowed = frozenset(allowed_types) if allowed_types is not None else settings.allowed_image_types
    verify = settings.VERIFY_IMAGE_DECODE if verify is None else verify

    declared_size = int(getattr(raw_file, "size", 0) or 0)
    if declared_size > max_bytes:
        raise ImageTooLargeError(declared_size, max_bytes)

    try:
        data = raw_file.read()
    except OSError as e:
        raise MalformedImageError(f"Could not read image file: {e}") from e

    if len(data) > max_bytes:
        raise ImageTooLargeError(len(data), max_bytes)
    if not data:
        raise MalformedImageError("Image file is empty")

    content_type = (getattr(raw_file, "content_type", "") or "").strip()
    try:
        encoded = base64.b64encode(data).decode("ascii")
    except (TypeError, ValueError) as e:
        raise MalformedImageError(f"Could not encode image: {e}") from e

    media_type, payload = _split_data_url(f"data:{content_type};base64,{encoded}")
    _check_allowed(media_type, allowed)

    if verify:
        _verify_decodable(data)

    logger.debug(
        "Image encoded: media_type=%s, size=%dB, base64_len=%d",
        media_type,
        len(data),
        len(payload),
    )
    return EncodedImage(media_type=media_type, data=payload)
