"""Tests for the plant scanner, the chat consultant and the answer parsers."""

import pytest

from adoptd.modules.achievements.domain.models.achievement import ActionType
from adoptd.modules.entitlement.domain.models.entitlement import UsageAction
from adoptd.modules.plant_ai.domain.models.plant_ai import ChatRole, ScanType
from adoptd.modules.plant_ai.domain.services.parsers import (
    UNKNOWN_PLANT,
    parse_diagnosis,
    parse_identification,
)
from adoptd.modules.plant_ai.domain.services.prompts import CHAT_APOLOGY
from adoptd.shared.core.exceptions import (
    ExternalAPIError,
    FileTooLargeError,
    InvalidFileTypeError,
    QuotaExceededError,
    ValidationError,
)
from tests.fakes import USER_ID

JPEG = b"\xff\xd8\xff\xe0" + b"\x00" * 64

DIAGNOSIS = (
    "1. Диагноз: Хлороз листьев\n"
    "Листья желтеют между жилками.\n"
    "2. Лечение: Внесите хелат железа. Повторите через 5-7 дней.\n"
    "3. Профилактика: Обработайте каждые 2 недели."
)


async def _scan(scope, scan_type=ScanType.IDENTIFY, data=JPEG, filename="plant.jpg", content_type="image/jpeg"):
    return await scope.scanner.scan(scan_type, data, filename, content_type)


# =============================================================================
# Scanner
# =============================================================================


class TestScanner:
    async def test_identify_parses_fields(self, scope, model, achievement_repo):
        result = await _scan(scope)

        assert result.identification.name == "Фикус"
        assert result.identification.variety == "Бенджамина"
        assert result.identification.origin == "Азия"
        assert (USER_ID, ActionType.PLANT_SCANNED, None) in achievement_repo.actions

    async def test_diagnose_uses_plant_name(self, scope, model):
        model.reply = DIAGNOSIS

        result = await scope.scanner.scan("diagnose", JPEG, "plant.png", "image/png", plant_name=" Монстера ")

        assert "Монстера" in model.prompts[0]
        assert [s.heading for s in result.diagnosis.sections] == ["Диагноз", "Лечение", "Профилактика"]
        assert [r.days for r in result.diagnosis.recommendations] == [6, 14]

    async def test_disallowed_image_is_rejected_before_quota(self, scope, model, entitlement_repo):
        with pytest.raises(InvalidFileTypeError):
            await _scan(scope, data=b"GIF89a", filename="plant.gif", content_type="image/gif")

        assert entitlement_repo.increments == []
        assert model.prompts == []

    async def test_oversized_image_is_rejected(self, scope, settings, entitlement_repo):
        with pytest.raises(FileTooLargeError):
            await _scan(scope, data=b"\x00" * (settings.MAX_IMAGE_SIZE + 1))

        assert entitlement_repo.increments == []

    async def test_eighth_scan_exceeds_quota(self, scope, model, settings):
        for _ in range(settings.FREE_DAILY_SCANS):
            await _scan(scope)

        with pytest.raises(QuotaExceededError):
            await _scan(scope)

        assert len(model.prompts) == settings.FREE_DAILY_SCANS

    async def test_model_failure_still_counts_the_scan(self, scope, model, entitlement_repo):
        model.error = ExternalAPIError(api_name="gemini")

        with pytest.raises(ExternalAPIError):
            await _scan(scope)

        assert entitlement_repo.increments == [UsageAction.SCAN]


# =============================================================================
# Chat
# =============================================================================


class TestChat:
    async def test_reply_is_appended_and_recorded(self, scope, model, achievement_repo):
        model.reply = "Поливайте раз в неделю."

        reply = await scope.chat.send("Как часто поливать фикус?")

        assert reply.content == "Поливайте раз в неделю."
        assert [m.role for m in scope.chat.snapshot] == [ChatRole.USER, ChatRole.ASSISTANT]
        assert (USER_ID, ActionType.CHATBOT_MESSAGE_SENT, None) in achievement_repo.actions

    async def test_history_excludes_current_message(self, scope, model):
        await scope.chat.send("Первый вопрос")
        await scope.chat.send("Второй вопрос")

        assert model.histories[0] == []
        assert [m.content for m in model.histories[1]][0] == "Первый вопрос"
        assert len(model.histories[1]) == 2

    async def test_failure_appends_apology_and_raises(self, scope, model, achievement_repo):
        model.error = ExternalAPIError(api_name="gemini")

        with pytest.raises(ExternalAPIError):
            await scope.chat.send("Помогите")

        assert scope.chat.snapshot[-1].content == CHAT_APOLOGY
        assert not any(a[1] is ActionType.CHATBOT_MESSAGE_SENT for a in achievement_repo.actions)

    async def test_blank_message_is_rejected(self, scope, entitlement_repo):
        with pytest.raises(ValidationError):
            await scope.chat.send("   ")

        assert entitlement_repo.increments == []

    async def test_weather_context_is_optional(self, scope, model, weather_provider):
        weather_provider.error = ExternalAPIError(api_name="weatherapi", api_status_code=503)

        await scope.chat.send("Что делать в жару?", city="Москва")

        assert weather_provider.calls == [("current", "Москва")]
        assert len(model.prompts) == 1

    async def test_clear_empties_history(self, scope):
        await scope.chat.send("Привет")

        await scope.chat.clear()

        assert scope.chat.snapshot == ()


# =============================================================================
# Parsers
# =============================================================================


class TestParsers:
    def test_identification_without_name(self):
        assert parse_identification("Не удалось распознать").name == UNKNOWN_PLANT

    def test_diagnosis_heading_keeps_inline_text(self):
        result = parse_diagnosis(DIAGNOSIS)

        first = result.sections[0]
        assert first.content == ["Хлороз листьев", "Листья желтеют между жилками."]
        assert result.sections[1].recommendations[0].days == 6

    def test_unnumbered_answer_is_one_section(self):
        result = parse_diagnosis("Растение здорово.")

        assert len(result.sections) == 1
        assert result.sections[0].heading is None
