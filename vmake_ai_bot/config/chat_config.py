"""
Static chat configuration: the intake questions, canned bot replies,
service catalog and payment details.
"""

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from ..utils import validators


@dataclass(frozen=True)
class Question:
    """One intake question and the validator for its answer."""
    id: str
    text: str
    validation: Callable[[str], Optional[str]]


@dataclass(frozen=True)
class ServiceOption:
    """A purchasable service offered once the analysis is shown."""
    id: str
    text: str
    price: float
    description: str


@dataclass(frozen=True)
class UpiDetails:
    id: str
    name: str


QUESTIONS: List[Question] = [
    Question(
        id="name",
        text="👋 Hi! I'm here to help you with your electronics/robotics project. What's your name?",
        validation=validators.validate_name,
    ),
    Question(
        id="email",
        text="What is your email address?",
        validation=validators.validate_email,
    ),
    Question(
        id="phone",
        text="What is your phone number?",
        validation=validators.validate_phone,
    ),
    Question(
        id="projectName",
        text="What is the name of your project?",
        validation=validators.validate_project_name,
    ),
    Question(
        id="description",
        text="Please provide a detailed description of your project:",
        validation=validators.validate_description,
    ),
    Question(
        id="timeline",
        text="What's your expected timeline for completing this project?",
        validation=validators.validate_timeline,
    ),
    Question(
        id="budget",
        text="What's your budget for this project (in INR)?",
        validation=validators.validate_budget,
    ),
    Question(
        id="location",
        text="Where are you located? This helps us plan logistics:",
        validation=validators.validate_location,
    ),
]

BOT_RESPONSES: Dict[str, str] = {
    "greeting": "Welcome! I'm here to help you plan your electronics/robotics project.",
    "analyzing": "📊 Analyzing your project requirements and generating recommendations...",
    "parts_list_generated": "I've analyzed your project and prepared a parts list. Here's what you'll need:",
    "options_prompt": "Would you like to proceed with one of these options?",
    "payment_prompt": "Great choice! To proceed, please complete the payment of {amount} using the UPI details below:",
    "payment_instructions": "After completing the payment, please enter the UPI transaction ID below to confirm your payment.",
    "completion": "Thank you! Your submission has been recorded. Someone from the VMake team will contact you within 24-48 hours.",
    "payment_confirmation": "Payment received! We've recorded your request and our team will be in touch soon.",
    "analysis_failed": "Failed to process your project. Please try again.",
    "payment_failed": "Failed to verify payment. Please try again or contact support.",
}

SERVICE_OPTIONS: Dict[str, ServiceOption] = {
    "EXPERT_BUILD": ServiceOption(
        id="expertBuild",
        text="Get started with expert build assistance",
        price=499,
        description="Our experts will analyze your project in detail and provide a comprehensive build plan.",
    ),
    "GUIDANCE_CALL": ServiceOption(
        id="guidanceCall",
        text="Schedule a basic guidance call",
        price=499,
        description="30-minute consultation call with our electronics expert.",
    ),
}

UPI_DETAILS = UpiDetails(id="vmake@upi", name="VMake Technologies")

DEFAULT_CURRENCY = "INR"
PAYMENT_COMPLETED_STATUS = "PAYMENT_COMPLETED"


def get_service_option(option_id: str) -> Optional[ServiceOption]:
    """Look up a service option by its id (e.g. "expertBuild")."""
    for option in SERVICE_OPTIONS.values():
        if option.id == option_id:
            return option
    return None


def format_amount(amount: float) -> str:
    """Format an amount as Indian rupees with lakh grouping, e.g. ₹1,00,000.00."""
    sign = "-" if amount < 0 else ""
    whole, fraction = f"{abs(amount):.2f}".split(".")
    if len(whole) > 3:
        head, tail = whole[:-3], whole[-3:]
        groups = []
        while len(head) > 2:
            groups.insert(0, head[-2:])
            head = head[:-2]
        if head:
            groups.insert(0, head)
        whole = ",".join(groups + [tail])
    return f"{sign}₹{whole}.{fraction}"
