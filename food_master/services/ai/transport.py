"""
HTTP транспорт к Gemini generateContent с ограниченными повторами.

Политика повторов (максимум GEMINI_RETRY_ATTEMPTS попыток, по умолчанию 3):
- сетевая ошибка (ответа нет)      → повтор сразу, без задержки
- 429 Too Many Requests            → повтор через base_delay * 2^attempt (1s, 2s)
- любой другой не-2xx статус       → TransportHTTPError сразу, без повторов
- попытки кончились (сеть или 429) → TransportExhaustedError
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, Optional

import httpx
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    RetryError,
    before_sleep_log,
    retry_if_exception,
    stop_after_attempt,
)

from food_master.config import settings
from food_master.constants import GENERATE_CONTENT_PATH, RATE_LIMIT_STATUS
from food_master.exceptions import TransportExhaustedError, TransportHTTPError
from food_master.models import InferenceRequest, RawResponse
from food_master.utils.helpers import join_url, safe_json_loads
from food_master.utils.logger import logger


SleepFunc = Callable[[float], Awaitable[Any]]


def _is_rate_limited(exception: Optional[BaseException]) -> bool:
    return (
        isinstance(exception, httpx.HTTPStatusError)
        and exception.response.status_code == RATE_LIMIT_STATUS
    )


def _is_network_error(exception: Optional[BaseException]) -> bool:
    # ConnectError, ReadTimeout, RemoteProtocolError... — ответа нет
    return isinstance(exception, httpx.TransportError)


def _is_retryable(exception: BaseException) -> bool:
    """
    Определяет, стоит ли делать повтор для данного исключения.

    Returns:
        True для сетевых ошибок и 429, False для всего остального
    """
    return _is_network_error(exception) or _is_rate_limited(exception)


def _error_detail(response: httpx.Response) -> str:
    """Достаёт error.message из JSON ошибки Google API (или короткий preview тела)."""
    payload, preview = safe_json_loads(response.text)
    error = payload.get("error")
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    return preview or response.reason_phrase or ""


def _describe(exception: Optional[BaseException]) -> str:
    if isinstance(exception, httpx.HTTPStatusError):
        return f"HTTP {exception.response.status_code}"
    if exception is None:
        return "unknown error"
    return f"{type(exception).__name__}: {exception}"


class RetryingTransport:
    """
    Async клиент Gemini с retry логикой.

    Использует httpx для async запросов и tenacity для повторов.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[int] = None,
        max_attempts: Optional[int] = None,
        base_delay: Optional[float] = None,
        *,
        client: Optional[httpx.AsyncClient] = None,
        sleep: Optional[SleepFunc] = None,
    ) -> None:
        """
        Инициализация транспорта.

        Args:
            base_url: Base URL Gemini API
            api_key: API ключ (передаётся только в заголовке x-goog-api-key)
            model: Название модели
            timeout: Таймаут чтения ответа в секундах
            max_attempts: Всего попыток (включая первую)
            base_delay: Задержка после первого 429 в секундах
            client: Готовый httpx.AsyncClient (не закрывается транспортом)
            sleep: Функция ожидания между попытками (для тестов)
        """
        self.base_url = base_url or settings.GEMINI_BASE_URL
        self.api_key = api_key if api_key is not None else settings.GEMINI_API_KEY
        self.model = model or settings.GEMINI_MODEL
        self.timeout = settings.GEMINI_TIMEOUT if timeout is None else timeout
        self.max_attempts = settings.GEMINI_RETRY_ATTEMPTS if max_attempts is None else max_attempts
        self.base_delay = settings.GEMINI_RETRY_BASE_DELAY if base_delay is None else base_delay
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {self.max_attempts}")

        self._client = client
        self._sleep = sleep or asyncio.sleep

        if not self.api_key:
            logger.warning("[Gemini] GEMINI_API_KEY не задан — запросы будут отклонены сервисом")

    @property
    def url(self) -> str:
        return join_url(self.base_url, GENERATE_CONTENT_PATH.format(model=self.model))

    def _wait(self, retry_state: RetryCallState) -> float:
        """
        Задержка перед следующей попыткой.

        429 после попытки N (1, 2, ...) → base_delay * 2^(N-1); сетевая ошибка → 0.
        """
        exception = retry_state.outcome.exception() if retry_state.outcome else None
        if _is_rate_limited(exception):
            return self.base_delay * 2 ** (retry_state.attempt_number - 1)
        return 0.0

    async def _post(self, payload: Dict[str, Any], request_id: str) -> httpx.Response:
        headers = {
            "Content-Type": "application/json",
            "x-goog-api-key": self.api_key,
        }
        if request_id:
            headers["X-Request-ID"] = request_id

        if self._client is not None:
            response = await self._client.post(self.url, headers=headers, json=payload)
        else:
            # Раздельные таймауты: быстрое подключение, долгое чтение ответа
            timeout_config = httpx.Timeout(
                connect=5.0,
                read=self.timeout,
                write=15.0,  # тело запроса содержит base64 изображения
                pool=5.0,
            )
            async with httpx.AsyncClient(timeout=timeout_config) as client:
                response = await client.post(self.url, headers=headers, json=payload)

        response.raise_for_status()
        return response

    async def send(self, request: InferenceRequest, *, request_id: str = "") -> RawResponse:
        """
        Отправляет запрос в Gemini с повторами.

        Args:
            request: Собранный InferenceRequest
            request_id: ID для трассировки в логах

        Returns:
            RawResponse успешного (2xx) ответа

        Raises:
            TransportExhaustedError: Все попытки израсходованы (сеть / 429)
            TransportHTTPError: Неуспешный статус, кроме 429
        """
        payload = request.to_payload()
        attempts = 0

        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=self._wait,
            retry=retry_if_exception(_is_retryable),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            sleep=self._sleep,
        )

        try:
            async for attempt in retrying:
                with attempt:
                    attempts = attempt.retry_state.attempt_number
                    logger.debug(
                        "[Gemini] request_id=%s attempt %d/%d", request_id, attempts, self.max_attempts
                    )
                    response = await self._post(payload, request_id)

        except RetryError as e:
            last_exception = e.last_attempt.exception()
            attempts = e.last_attempt.attempt_number
            logger.error(
                "[Gemini] request_id=%s retries exhausted after %d attempts: %s",
                request_id, attempts, _describe(last_exception),
            )
            raise TransportExhaustedError(attempts, _describe(last_exception)) from last_exception

        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            detail = _error_detail(e.response)
            logger.error(
                "[Gemini] request_id=%s HTTP error %d (non-retryable): %s",
                request_id, status, detail,
            )
            raise TransportHTTPError(status, detail) from e

        logger.info(
            "[Gemini] request_id=%s response %d after %d attempt(s)",
            request_id, response.status_code, attempts,
        )
        return RawResponse(status_code=response.status_code, text=response.text, attempts=attempts)
