"""
test_request_builder.py — unit tests for build_request() and prompts.
"""

from food_master.models import EncodedImage
from food_master.prompts import SYSTEM_PROMPT_KO, get_system_prompt, get_user_query
from food_master.services.ai.request_builder import build_request


class TestBuildRequest:
    """Tests for build_request()."""

    def test_is_pure(self, encoded_image):
        first = build_request(encoded_image)
        second = build_request(EncodedImage(media_type="image/png", data=encoded_image.data))

        assert first == second
        assert first.to_payload() == second.to_payload()

    def test_default_locale_is_korean(self, encoded_image):
        request = build_request(encoded_image)

        assert request.instruction == SYSTEM_PROMPT_KO
        assert request.query == "이 음식은 무엇인가요? 식별하고 설명해 주세요."

    def test_only_image_varies(self, encoded_image):
        other = EncodedImage(media_type="image/jpeg", data="/9j/4AAQ")

        first = build_request(encoded_image)
        second = build_request(other)

        assert first.instruction == second.instruction
        assert first.query == second.query
        assert first.image != second.image

    def test_locale_selects_prompt_language(self, encoded_image):
        request = build_request(encoded_image, locale="ru")

        assert request.instruction == get_system_prompt("ru")
        assert "на русском" in request.instruction
        assert request.query == get_user_query("ru")

    def test_unknown_locale_falls_back_to_default(self, encoded_image):
        assert build_request(encoded_image, locale="xx") == build_request(encoded_image, locale="ko")

    def test_payload_shape(self, encoded_image):
        payload = build_request(encoded_image).to_payload()

        assert set(payload) == {"contents", "systemInstruction"}
        assert payload["contents"][0]["parts"][1]["inlineData"] == {
            "mimeType": "image/png",
            "data": encoded_image.data,
        }


class TestPrompts:
    """Instruction text fixes persona and style."""

    def test_instruction_forbids_mentioning_image_analysis(self):
        assert "이미지를 분석했다는 사실을 언급하지 마세요" in get_system_prompt("ko")
        assert "Never mention that you analyzed an image" in get_system_prompt("en")

    def test_instruction_mentions_ingredients_and_serving(self):
        prompt = get_system_prompt("en")

        assert "ingredients" in prompt
        assert "served" in prompt
