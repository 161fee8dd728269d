"""
Conversation engine for the project intake chat.

A sequential form driven as a state machine:

    COLLECTING -> ANALYZING -> OPTIONS_SHOWN -> AWAITING_PAYMENT -> COMPLETE
                      |  ^
                      v  |
                 ANALYSIS_FAILED

The message log is for rendering only; decisions are made from the phase,
the question index and the recorded responses.
"""

import asyncio
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence, Set

import structlog

from ..config.chat_config import (
    BOT_RESPONSES,
    PAYMENT_COMPLETED_STATUS,
    QUESTIONS,
    SERVICE_OPTIONS,
    UPI_DETAILS,
    Question,
    ServiceOption,
    format_amount,
    get_service_option
)
from ..core.exceptions import AnswerValidationError, ApiClientError
from .api_client import VMakeApiClient

logger = structlog.get_logger(__name__)


class ConversationPhase(str, Enum):
    COLLECTING = "collecting"
    ANALYZING = "analyzing"
    ANALYSIS_FAILED = "analysis_failed"
    OPTIONS_SHOWN = "options_shown"
    AWAITING_PAYMENT = "awaiting_payment"
    COMPLETE = "complete"


@dataclass(frozen=True)
class PaymentDetails:
    option_id: str
    amount: float
    upi_id: str
    payee_name: str


@dataclass
class ChatMessage:
    sender: str  # "user" | "bot"
    text: str
    parts_list: Optional[Dict[str, Any]] = None
    analysis: Optional[Dict[str, Any]] = None
    show_options: bool = False
    payment_details: Optional[PaymentDetails] = None


@dataclass
class ConversationState:
    phase: ConversationPhase = ConversationPhase.COLLECTING
    current_question_index: int = 0
    responses: Dict[str, str] = field(default_factory=dict)
    messages: List[ChatMessage] = field(default_factory=list)
    phase_history: List[ConversationPhase] = field(default_factory=lambda: [ConversationPhase.COLLECTING])
    parts_list: Optional[Dict[str, Any]] = None
    analysis: Optional[Dict[str, Any]] = None
    submission_id: Optional[str] = None
    selected_option: Optional[ServiceOption] = None
    error: Optional[str] = None

    @property
    def input_enabled(self) -> bool:
        return self.phase not in (ConversationPhase.ANALYZING, ConversationPhase.COMPLETE)

    @property
    def input_placeholder(self) -> str:
        if self.phase == ConversationPhase.COMPLETE:
            return "Chat complete"
        if self.phase == ConversationPhase.AWAITING_PAYMENT:
            return "Enter UPI transaction ID"
        return "Type your message here"


class ConversationEngine:
    """Drives one chat session against the API."""

    def __init__(
        self,
        api_client: VMakeApiClient,
        questions: Sequence[Question] = QUESTIONS,
        question_delay: float = 0.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        if not questions:
            raise ValueError("at least one question is required")

        self.api_client = api_client
        self.questions = list(questions)
        self.question_delay = question_delay
        self.sleep = sleep
        self.state = ConversationState()
        self._background: Set[asyncio.Task] = set()

        self._bot(self.questions[0].text)

    @property
    def current_question(self) -> Optional[Question]:
        if self.state.phase != ConversationPhase.COLLECTING:
            return None
        return self.questions[self.state.current_question_index]

    async def send(self, text: str) -> ConversationState:
        """Handle one line of user input in whatever phase the chat is in."""
        if not text.strip():
            return self.state
        if not self.state.input_enabled:
            logger.debug("Input ignored", phase=self.state.phase.value)
            return self.state

        self.state.error = None
        phase = self.state.phase

        if phase == ConversationPhase.AWAITING_PAYMENT:
            await self._confirm_payment(text.strip())
        elif phase == ConversationPhase.ANALYSIS_FAILED:
            await self.retry_analysis()
        elif phase == ConversationPhase.OPTIONS_SHOWN:
            option = self._resolve_option(text.strip())
            if option is None:
                self.state.error = "Please choose one of the options above."
            else:
                await self.select_option(option.id)
        else:
            await self._answer(text)

        return self.state

    async def select_option(self, option_id: str) -> ConversationState:
        """Pick a service option and show the payment instructions."""
        if self.state.phase != ConversationPhase.OPTIONS_SHOWN:
            logger.warning("Option selected outside the options phase", phase=self.state.phase.value)
            return self.state

        option = get_service_option(option_id)
        if option is None:
            self.state.error = "Please choose one of the options above."
            return self.state

        self.state.error = None
        self.state.selected_option = option
        self._user(f"You've selected: {option.text}")
        self._bot(
            BOT_RESPONSES["payment_prompt"].format(amount=format_amount(option.price)),
            payment_details=PaymentDetails(
                option_id=option.id,
                amount=option.price,
                upi_id=UPI_DETAILS.id,
                payee_name=UPI_DETAILS.name,
            ),
        )
        self._transition(ConversationPhase.AWAITING_PAYMENT)
        return self.state

    async def retry_analysis(self) -> ConversationState:
        """Resend the collected answers after a failed analysis."""
        if self.state.phase != ConversationPhase.ANALYSIS_FAILED:
            return self.state
        self.state.error = None
        await self._analyze()
        return self.state

    def dismiss_error(self) -> None:
        self.state.error = None

    async def wait_for_background(self) -> None:
        """Wait for fire-and-forget calls (project storage) to finish."""
        if self._background:
            await asyncio.gather(*self._background, return_exceptions=True)

    async def _answer(self, text: str) -> None:
        question = self.questions[self.state.current_question_index]
        try:
            self._validate(question, text)
        except AnswerValidationError as e:
            self.state.error = e.message
            return

        self._user(text)
        self.state.responses[question.id] = text

        if self.state.current_question_index < len(self.questions) - 1:
            self.state.current_question_index += 1
            if self.question_delay:
                await self.sleep(self.question_delay)
            self._bot(self.questions[self.state.current_question_index].text)
        else:
            await self._analyze()

    @staticmethod
    def _validate(question: Question, text: str) -> None:
        message = question.validation(text) if question.validation else None
        if message:
            raise AnswerValidationError(question.id, message)

    async def _analyze(self) -> None:
        self._transition(ConversationPhase.ANALYZING)
        self._bot(BOT_RESPONSES["analyzing"])
        payload = dict(self.state.responses)

        try:
            result = await self.api_client.process_project(payload)
        except ApiClientError as e:
            logger.error("Error processing project", error=str(e), error_type=type(e).__name__)
            self.state.error = BOT_RESPONSES["analysis_failed"]
            self._transition(ConversationPhase.ANALYSIS_FAILED)
            return

        self.state.parts_list = result.get("partsList")
        self.state.analysis = result.get("analysis")
        self.state.submission_id = result.get("submissionId")

        self._bot(
            BOT_RESPONSES["parts_list_generated"],
            parts_list=self.state.parts_list,
            analysis=self.state.analysis,
        )
        self._bot(BOT_RESPONSES["options_prompt"], show_options=True)
        self._transition(ConversationPhase.OPTIONS_SHOWN)

        store_payload = {
            **payload,
            "partsList": self.state.parts_list,
            "analysis": self.state.analysis,
            "submissionId": self.state.submission_id,
        }
        task = asyncio.create_task(self._store_project(store_payload))
        self._background.add(task)
        task.add_done_callback(self._background.discard)

    async def _store_project(self, payload: Dict[str, Any]) -> None:
        try:
            await self.api_client.store_project(payload)
            logger.info("Project stored", submission_id=payload.get("submissionId"))
        except ApiClientError as e:
            logger.error("Failed to store project", error=str(e))

    async def _confirm_payment(self, transaction_id: str) -> None:
        option = self.state.selected_option
        try:
            await self.api_client.verify_payment(transaction_id)
            # the status update needs the stored row to exist
            await self.wait_for_background()
            await self.api_client.update_project_status({
                **self.state.responses,
                "serviceType": option.id,
                "transactionId": transaction_id,
                "status": PAYMENT_COMPLETED_STATUS,
                "submissionId": self.state.submission_id,
            })
        except ApiClientError as e:
            logger.error("Payment confirmation failed", error=str(e))
            self.state.error = BOT_RESPONSES["payment_failed"]
            return

        self._bot(BOT_RESPONSES["payment_confirmation"])
        self._transition(ConversationPhase.COMPLETE)
        self._bot(BOT_RESPONSES["completion"])

    @staticmethod
    def _resolve_option(text: str) -> Optional[ServiceOption]:
        """Match free text to an option by id or 1-based position."""
        options = list(SERVICE_OPTIONS.values())
        if text.isdigit() and 1 <= int(text) <= len(options):
            return options[int(text) - 1]
        return get_service_option(text)

    def _transition(self, phase: ConversationPhase) -> None:
        logger.debug("Conversation phase change", old=self.state.phase.value, new=phase.value)
        self.state.phase = phase
        self.state.phase_history.append(phase)

    def _user(self, text: str) -> None:
        self.state.messages.append(ChatMessage(sender="user", text=text))

    def _bot(self, text: str, **attachments) -> None:
        self.state.messages.append(ChatMessage(sender="bot", text=text, **attachments))
