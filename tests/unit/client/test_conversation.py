"""
Unit tests for the conversation engine.
"""

import asyncio
from unittest.mock import AsyncMock

import httpx
import pytest

from vmake_ai_bot.client.api_client import VMakeApiClient
from vmake_ai_bot.client.conversation import ConversationEngine, ConversationPhase
from vmake_ai_bot.config.chat_config import BOT_RESPONSES, QUESTIONS
from vmake_ai_bot.core.app import create_app
from vmake_ai_bot.core.exceptions import NetworkError, ServerResponseError
from vmake_ai_bot.services.project_store import ProjectStore

from tests.conftest import ANALYSIS, PARTS_LIST, SUBMISSION, InMemoryRowStore

ANSWERS = [SUBMISSION[question.id] for question in QUESTIONS]


@pytest.fixture
def api_client():
    client = AsyncMock()
    client.process_project.return_value = {
        "success": True,
        "partsList": PARTS_LIST,
        "analysis": ANALYSIS,
        "submissionId": "sub-1",
    }
    client.store_project.return_value = {"success": True, "data": {"submissionId": "sub-1"}}
    client.verify_payment.return_value = {"success": True, "message": "Payment verified successfully"}
    client.update_project_status.return_value = {"success": True}
    return client


@pytest.fixture
def engine(api_client):
    return ConversationEngine(api_client)


async def answer_all(engine, answers=ANSWERS):
    for answer in answers:
        await engine.send(answer)


def bot_texts(engine):
    return [m.text for m in engine.state.messages if m.sender == "bot"]


class TestCollecting:

    def test_starts_with_first_question(self, engine):
        assert engine.state.phase == ConversationPhase.COLLECTING
        assert bot_texts(engine) == [QUESTIONS[0].text]
        assert engine.current_question.id == "name"

    @pytest.mark.asyncio
    async def test_valid_answer_advances(self, engine):
        await engine.send("Asha")

        assert engine.state.responses == {"name": "Asha"}
        assert engine.state.current_question_index == 1
        assert bot_texts(engine)[-1] == QUESTIONS[1].text

    @pytest.mark.asyncio
    async def test_invalid_answer_keeps_the_question(self, engine):
        await engine.send("Asha")
        await engine.send("abc")

        assert engine.state.error == "Please enter a valid email"
        assert engine.state.current_question_index == 1
        assert "email" not in engine.state.responses
        assert [m.text for m in engine.state.messages if m.sender == "user"] == ["Asha"]

    @pytest.mark.asyncio
    async def test_next_valid_answer_clears_error(self, engine):
        await engine.send("Asha")
        await engine.send("abc")
        await engine.send("a@b.co")

        assert engine.state.error is None
        assert engine.state.responses["email"] == "a@b.co"

    @pytest.mark.asyncio
    async def test_blank_input_is_ignored(self, engine):
        await engine.send("   ")

        assert engine.state.error is None
        assert engine.state.responses == {}
        assert len(engine.state.messages) == 1

    @pytest.mark.asyncio
    async def test_question_delay_uses_sleep(self, api_client):
        sleep = AsyncMock()
        engine = ConversationEngine(api_client, question_delay=0.5, sleep=sleep)

        await engine.send("Asha")

        sleep.assert_awaited_once_with(0.5)

    def test_requires_questions(self, api_client):
        with pytest.raises(ValueError):
            ConversationEngine(api_client, questions=[])


class TestAnalysis:

    @pytest.mark.asyncio
    async def test_last_answer_triggers_one_analysis(self, engine, api_client):
        await answer_all(engine)
        await engine.wait_for_background()

        history = engine.state.phase_history
        assert history == [
            ConversationPhase.COLLECTING,
            ConversationPhase.ANALYZING,
            ConversationPhase.OPTIONS_SHOWN,
        ]
        api_client.process_project.assert_awaited_once_with(SUBMISSION)
        assert engine.state.submission_id == "sub-1"

        results_message = engine.state.messages[-2]
        assert results_message.parts_list == PARTS_LIST
        assert results_message.analysis == ANALYSIS
        assert engine.state.messages[-1].show_options is True

    @pytest.mark.asyncio
    async def test_results_are_stored_in_background(self, engine, api_client):
        await answer_all(engine)
        await engine.wait_for_background()

        api_client.store_project.assert_awaited_once_with(
            dict(SUBMISSION, partsList=PARTS_LIST, analysis=ANALYSIS, submissionId="sub-1")
        )

    @pytest.mark.asyncio
    async def test_store_failure_does_not_interrupt_chat(self, engine, api_client):
        api_client.store_project.side_effect = NetworkError("offline")

        await answer_all(engine)
        await engine.wait_for_background()

        assert engine.state.phase == ConversationPhase.OPTIONS_SHOWN
        assert engine.state.error is None

    @pytest.mark.asyncio
    async def test_failure_shows_banner_and_allows_retry(self, engine, api_client):
        result = api_client.process_project.return_value
        api_client.process_project.side_effect = [ServerResponseError("Invalid response format from AI", 500), result]

        await answer_all(engine)

        assert engine.state.phase == ConversationPhase.ANALYSIS_FAILED
        assert engine.state.error == BOT_RESPONSES["analysis_failed"]
        assert engine.state.input_enabled is True
        api_client.store_project.assert_not_awaited()

        await engine.retry_analysis()
        await engine.wait_for_background()

        assert engine.state.phase == ConversationPhase.OPTIONS_SHOWN
        assert engine.state.error is None
        assert api_client.process_project.await_count == 2
        assert engine.state.phase_history.count(ConversationPhase.ANALYZING) == 2

    @pytest.mark.asyncio
    async def test_typing_after_failure_retries(self, engine, api_client):
        result = api_client.process_project.return_value
        api_client.process_project.side_effect = [NetworkError("down"), result]

        await answer_all(engine)
        await engine.send("try again")
        await engine.wait_for_background()

        assert engine.state.phase == ConversationPhase.OPTIONS_SHOWN


class TestOptionsAndPayment:

    @pytest.mark.asyncio
    async def test_select_option_shows_payment_details(self, engine):
        await answer_all(engine)

        await engine.select_option("expertBuild")

        assert engine.state.phase == ConversationPhase.AWAITING_PAYMENT
        user_message, bot_message = engine.state.messages[-2:]
        assert user_message.text == "You've selected: Get started with expert build assistance"
        assert "₹499.00" in bot_message.text
        assert bot_message.payment_details.amount == 499
        assert bot_message.payment_details.upi_id == "vmake@upi"
        assert engine.state.input_placeholder == "Enter UPI transaction ID"

    @pytest.mark.asyncio
    async def test_option_by_number(self, engine):
        await answer_all(engine)

        await engine.send("2")

        assert engine.state.selected_option.id == "guidanceCall"

    @pytest.mark.asyncio
    async def test_unknown_option_is_rejected(self, engine):
        await answer_all(engine)

        await engine.send("7")

        assert engine.state.phase == ConversationPhase.OPTIONS_SHOWN
        assert engine.state.error

    @pytest.mark.asyncio
    async def test_payment_completes_chat(self, engine, api_client):
        await answer_all(engine)
        await engine.select_option("expertBuild")

        await engine.send("UPI123456")

        api_client.verify_payment.assert_awaited_once_with("UPI123456")
        api_client.update_project_status.assert_awaited_once_with(dict(
            SUBMISSION,
            serviceType="expertBuild",
            transactionId="UPI123456",
            status="PAYMENT_COMPLETED",
            submissionId="sub-1",
        ))
        assert engine.state.phase == ConversationPhase.COMPLETE
        assert bot_texts(engine)[-2:] == [BOT_RESPONSES["payment_confirmation"], BOT_RESPONSES["completion"]]
        assert engine.state.input_enabled is False

    @pytest.mark.asyncio
    async def test_failed_verification_keeps_awaiting_payment(self, engine, api_client):
        api_client.verify_payment.side_effect = [ServerResponseError("Invalid transaction ID", 400), {"success": True}]
        await answer_all(engine)
        await engine.select_option("guidanceCall")

        await engine.send("abc")

        assert engine.state.phase == ConversationPhase.AWAITING_PAYMENT
        assert engine.state.error == BOT_RESPONSES["payment_failed"]
        api_client.update_project_status.assert_not_awaited()

        await engine.send("UPI123456")

        assert engine.state.phase == ConversationPhase.COMPLETE

    @pytest.mark.asyncio
    async def test_complete_chat_ignores_input(self, engine, api_client):
        await answer_all(engine)
        await engine.select_option("expertBuild")
        await engine.send("UPI123456")
        message_count = len(engine.state.messages)

        await engine.send("hello?")

        assert len(engine.state.messages) == message_count
        assert api_client.verify_payment.await_count == 1


@pytest.mark.asyncio
async def test_full_chat_against_the_app(app, row_store):
    """Drive a whole session through the real HTTP app."""
    transport = httpx.ASGITransport(app=app)
    async with VMakeApiClient(base_url="http://test", transport=transport) as client:
        engine = ConversationEngine(client)

        await answer_all(engine)
        await engine.wait_for_background()

        assert engine.state.phase == ConversationPhase.OPTIONS_SHOWN
        assert engine.state.parts_list["totalCost"] == 1180
        assert len(row_store.rows) == 2
        assert row_store.rows[1][13] == engine.state.submission_id

        await engine.send("1")
        await engine.send("UPI123456")

    assert engine.state.phase == ConversationPhase.COMPLETE
    assert engine.state.error is None
    assert row_store.rows[1][10:13] == ["expertBuild", "UPI123456", "PAYMENT_COMPLETED"]


class SlowAppendRowStore(InMemoryRowStore):

    async def append_row(self, values):
        await asyncio.sleep(0.2)
        return await super().append_row(values)


@pytest.mark.asyncio
async def test_payment_right_after_options_waits_for_storage(settings, ai_service):
    """Paying before the background store finishes still updates the stored row."""
    row_store = SlowAppendRowStore()
    app = create_app(settings, ai_service=ai_service, project_store=ProjectStore(row_store))
    transport = httpx.ASGITransport(app=app)

    async with VMakeApiClient(base_url="http://test", transport=transport) as client:
        engine = ConversationEngine(client)

        await answer_all(engine)
        await engine.send("1")
        await engine.send("UPI123456")

    assert engine.state.error is None
    assert engine.state.phase == ConversationPhase.COMPLETE
    assert row_store.rows[1][10:13] == ["expertBuild", "UPI123456", "PAYMENT_COMPLETED"]
