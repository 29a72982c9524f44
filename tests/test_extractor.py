"""
test_extractor.py — unit tests for ResultExtractor.

extract() никогда не бросает исключений: всё, что не текст, — Failure(EMPTY_RESPONSE).
"""

import json

import pytest

from food_master.constants import ErrorKind
from food_master.error_contract import FailureRegistry
from food_master.models import Failure, RawResponse, Success
from food_master.services.ai.extractor import extract


def _raw(body) -> RawResponse:
    text = body if isinstance(body, str) else json.dumps(body)
    return RawResponse(status_code=200, text=text)


class TestExtract:
    """Tests for extract()."""

    def test_text_is_returned_as_success(self, success_body):
        outcome = extract(_raw(success_body("X")), request_id="req-1")

        assert outcome == Success(description="X", request_id="req-1")
        assert outcome.ok is True

    def test_text_is_returned_unchanged(self, success_body):
        text = "\n  비빔밥은 밥 위에 나물을 올린 요리입니다.  \n"

        outcome = extract(_raw(success_body(text)))

        assert isinstance(outcome, Success)
        assert outcome.description == text

    def test_whitespace_only_text_is_still_success(self, success_body):
        outcome = extract(_raw(success_body("   ")))

        assert isinstance(outcome, Success)
        assert outcome.description == "   "

    @pytest.mark.parametrize(
        "body",
        [
            {},
            {"candidates": []},
            {"candidates": [{}]},
            {"candidates": [{"content": {"parts": []}}]},
            {"candidates": [{"content": {"parts": [{"inlineData": {}}]}}]},
            {"candidates": [{"content": {"parts": [{"text": ""}]}}]},
            {"candidates": [{"content": {"parts": [{"text": None}]}}]},
            {"candidates": "not-a-list"},
        ],
    )
    def test_missing_text_is_empty_response(self, body):
        outcome = extract(_raw(body))

        assert isinstance(outcome, Failure)
        assert outcome.kind is ErrorKind.EMPTY_RESPONSE
        assert outcome.ok is False
        assert outcome.allow_retry is True

    @pytest.mark.parametrize("text", ["", "<html>502 Bad Gateway</html>", "[1, 2, 3]", "null"])
    def test_non_object_body_is_empty_response(self, text):
        outcome = extract(_raw(text))

        assert isinstance(outcome, Failure)
        assert outcome.kind is ErrorKind.EMPTY_RESPONSE

    def test_user_message_is_generic_and_detail_is_diagnostic(self):
        outcome = extract(_raw({"candidates": []}), locale="en")

        assert outcome.message == FailureRegistry.user_message(ErrorKind.EMPTY_RESPONSE, "en")
        assert "candidates" in outcome.detail
        assert "candidates" not in outcome.message

    def test_block_reason_goes_to_detail(self):
        body = {"promptFeedback": {"blockReason": "SAFETY"}}

        outcome = extract(_raw(body))

        assert isinstance(outcome, Failure)
        assert "blockReason=SAFETY" in outcome.detail

    def test_finish_reason_goes_to_detail(self):
        body = {"candidates": [{"content": {"parts": []}, "finishReason": "MAX_TOKENS"}]}

        outcome = extract(_raw(body))

        assert "finishReason=MAX_TOKENS" in outcome.detail
