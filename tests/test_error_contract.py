"""
Tests for FailureRegistry, Settings and helpers.
"""

import pytest

from food_master.config import Settings
from food_master.constants import ErrorKind
from food_master.error_contract import FailureRegistry
from food_master.utils.helpers import join_url, new_request_id, safe_json_loads

INFERENCE_KINDS = [
    ErrorKind.EXHAUSTED,
    ErrorKind.HTTP_ERROR,
    ErrorKind.EMPTY_RESPONSE,
    ErrorKind.UNEXPECTED,
]


class TestFailureRegistry:

    @pytest.mark.parametrize("kind", list(ErrorKind))
    def test_every_kind_has_all_locales(self, kind):
        definition = FailureRegistry.get(kind)

        assert definition.kind is kind
        assert {"ko", "ru", "en"} <= set(definition.messages)

    def test_inference_failures_share_generic_message(self):
        messages = {FailureRegistry.user_message(kind, "ru") for kind in INFERENCE_KINDS}

        assert messages == {"Не удалось распознать блюдо. Проверьте, что фото чёткое, и попробуйте ещё раз."}

    def test_too_large_message_contains_limit(self):
        assert FailureRegistry.user_message(ErrorKind.TOO_LARGE, "en") == "The image file cannot exceed 5MB."

    def test_unknown_locale_falls_back_to_korean(self):
        assert FailureRegistry.user_message(ErrorKind.NO_IMAGE, "de") == "먼저 이미지를 업로드해주세요."

    def test_validation_errors_are_not_retryable(self):
        assert FailureRegistry.get(ErrorKind.TOO_LARGE).allow_retry is False
        assert FailureRegistry.get(ErrorKind.EXHAUSTED).allow_retry is True


class TestSettings:

    def test_defaults(self):
        config = Settings(_env_file=None)

        assert config.GEMINI_RETRY_ATTEMPTS == 3
        assert config.GEMINI_RETRY_BASE_DELAY == 1.0
        assert config.max_image_bytes == 5 * 1024 * 1024
        assert config.allowed_image_types == frozenset({"image/png", "image/jpeg"})

    def test_allowed_image_types_skips_garbage(self):
        config = Settings(_env_file=None, ALLOWED_IMAGE_TYPES=" image/PNG , ,webp, image/webp ")

        assert config.allowed_image_types == frozenset({"image/png", "image/webp"})


class TestHelpers:

    def test_join_url(self):
        assert join_url("https://x/v1beta/", "/models/m") == "https://x/v1beta/models/m"
        assert join_url("https://x/v1beta", "models/m") == "https://x/v1beta/models/m"

    def test_safe_json_loads(self):
        assert safe_json_loads('{"a": 1}') == ({"a": 1}, "")
        assert safe_json_loads("") == ({}, "")
        assert safe_json_loads("[1]") == ({}, "[1]")
        assert safe_json_loads("<html>") == ({}, "<html>")

    def test_new_request_id_is_unique(self):
        assert new_request_id() != new_request_id()
        assert len(new_request_id()) == 32
