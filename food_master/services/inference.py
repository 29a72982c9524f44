"""
inference.py — оркестратор распознавания и владелец SessionState.

Простыми словами:
- UI вызывает только select_image() и identify()
- UI читает state / snapshot() (фаза, превью, результат или сообщение об ошибке)
- одновременно идёт максимум один identify(): пока фаза LOADING, второй вызов ничего не запускает

Переходы:
    IDLE/SUCCEEDED/FAILED --select_image(ok)--> IDLE
    любая (кроме LOADING) --select_image(bad)--> FAILED
    IDLE/SUCCEEDED/FAILED --identify()--> LOADING --> SUCCEEDED | FAILED
    LOADING --select_image()--> LOADING (меняется только фото для следующего запуска,
                                         отказ валидации кладётся в selection_failure)
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Optional

from food_master.constants import ErrorKind
from food_master.error_contract import FailureRegistry
from food_master.exceptions import ImageValidationError, TransportError
from food_master.models import (
    EncodedImage,
    Failure,
    InferenceOutcome,
    Phase,
    SessionState,
)
from food_master.prompts import PROMPT_VERSION
from food_master.services.ai import RetryingTransport, build_request, extract
from food_master.services.image_codec import ImageUpload, encode
from food_master.utils.helpers import new_request_id

logger = logging.getLogger(__name__)


class InferenceController:
    """
    Единственный писатель SessionState.

    Все переходы состояния выполняются синхронно между await-точками,
    поэтому для других корутин они атомарны.
    """

    def __init__(
        self,
        transport: Optional[RetryingTransport] = None,
        *,
        state: Optional[SessionState] = None,
        locale: Optional[str] = None,
    ) -> None:
        self._transport = transport or RetryingTransport()
        self._state = state if state is not None else SessionState()
        self.locale = locale

    @property
    def state(self) -> SessionState:
        """Живое состояние (только чтение для всех, кроме контроллера)."""
        return self._state

    def snapshot(self) -> SessionState:
        """Копия состояния для UI."""
        return dataclasses.replace(self._state)

    def _failure(self, kind: ErrorKind, *, detail: str = "", request_id: str = "") -> Failure:
        return Failure(
            kind=kind,
            message=FailureRegistry.user_message(kind, self.locale),
            detail=detail,
            request_id=request_id,
            allow_retry=FailureRegistry.get(kind).allow_retry,
        )

    def _finish(self, outcome: InferenceOutcome) -> None:
        # last_outcome выставляется раньше фазы: выход из LOADING всегда с результатом
        self._state.last_outcome = outcome
        self._state.phase = Phase.SUCCEEDED if outcome.ok else Phase.FAILED

    # ------------------------------------------------------------------
    # select_image
    # ------------------------------------------------------------------

    def select_image(self, raw_file: ImageUpload) -> SessionState:
        """
        Принимает новое фото.

        Во время LOADING меняется только current_image (для следующего identify()),
        текущий запрос и фаза не трогаются. Отказ валидации в любой фазе
        виден в selection_failure.

        Returns:
            snapshot() после перехода
        """
        try:
            image = encode(raw_file)
        except ImageValidationError as e:
            logger.warning("Image rejected: kind=%s, %s", e.kind.value, e)
            failure = self._failure(e.kind, detail=str(e))
            self._state.current_image = None
            self._state.selection_failure = failure
            if not self._state.is_busy:
                self._finish(failure)
            return self.snapshot()

        self._state.current_image = image
        self._state.selection_failure = None
        if not self._state.is_busy:
            self._state.phase = Phase.IDLE
            self._state.last_outcome = None

        logger.info("Image selected: media_type=%s, busy=%s", image.media_type, self._state.is_busy)
        return self.snapshot()

    # ------------------------------------------------------------------
    # identify
    # ------------------------------------------------------------------

    async def _run_pipeline(self, image: EncodedImage, request_id: str) -> InferenceOutcome:
        request = build_request(image, locale=self.locale)

        try:
            raw = await self._transport.send(request, request_id=request_id)
        except TransportError as e:
            # Детали уже в логе транспорта; пользователю — общая фраза
            return self._failure(e.kind, detail=str(e), request_id=request_id)

        return extract(raw, locale=self.locale, request_id=request_id)

    async def identify(self) -> InferenceOutcome:
        """
        Распознаёт блюдо на текущем фото.

        Returns:
            Success(description) или Failure(kind, message).
            Failure(BUSY) — если запрос уже идёт; состояние при этом не меняется.
        """
        if self._state.is_busy:
            logger.warning("identify() ignored: recognition already in progress")
            return self._failure(ErrorKind.BUSY)

        image = self._state.current_image
        if image is None:
            failure = self._failure(ErrorKind.NO_IMAGE)
            self._finish(failure)
            return failure

        request_id = new_request_id()
        self._state.phase = Phase.LOADING
        self._state.last_outcome = None
        logger.info(
            "Recognition started: request_id=%s, media_type=%s, prompt=%s",
            request_id, image.media_type, PROMPT_VERSION,
        )

        outcome: Optional[InferenceOutcome] = None
        try:
            outcome = await self._run_pipeline(image, request_id)
        except Exception as e:
            logger.error("Unexpected recognition error: request_id=%s, error=%s", request_id, e, exc_info=True)
            outcome = self._failure(
                ErrorKind.UNEXPECTED,
                detail=f"{type(e).__name__}: {e}",
                request_id=request_id,
            )
        finally:
            if outcome is None:
                # Задачу отменили снаружи — из LOADING всё равно выходим с результатом
                outcome = self._failure(ErrorKind.UNEXPECTED, detail="cancelled", request_id=request_id)
            self._finish(outcome)

        if outcome.ok:
            logger.info("Recognition succeeded: request_id=%s", request_id)
        else:
            logger.info(
                "Recognition failed: request_id=%s, kind=%s, detail=%s",
                request_id, outcome.kind.value, outcome.detail,
            )
        return outcome
