"""
Answer validators for the intake questions.

Each validator takes the raw answer and returns an error message, or None when
the answer is acceptable. They are pure functions so the conversation engine can
run them before anything touches the network.
"""

import math
import re
from typing import Optional

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_PATTERN = re.compile(r"^[0-9]{10}$")
BUDGET_STRIP_PATTERN = re.compile(r"[^0-9.]")
FLOAT_PREFIX_PATTERN = re.compile(r"^[0-9]*\.?[0-9]+|^[0-9]+\.?")

MIN_DESCRIPTION_LENGTH = 10


def required(label: str):
    """Build a validator that only checks the answer is not blank."""

    def validate(value: str) -> Optional[str]:
        if not value.strip():
            return f"{label} is required"
        return None

    return validate


validate_name = required("Name")
validate_project_name = required("Project name")
validate_timeline = required("Timeline")
validate_location = required("Location")


def validate_email(value: str) -> Optional[str]:
    if not value.strip():
        return "Email is required"
    if not EMAIL_PATTERN.match(value):
        return "Please enter a valid email"
    return None


def validate_phone(value: str) -> Optional[str]:
    if not value.strip():
        return "Phone number is required"
    if not PHONE_PATTERN.match(value):
        return "Please enter a valid 10-digit phone number"
    return None


def validate_description(value: str) -> Optional[str]:
    if not value.strip():
        return "Project description is required"
    if len(value) < MIN_DESCRIPTION_LENGTH:
        return "Please provide more details"
    return None


def parse_budget(value: str) -> Optional[float]:
    """
    Parse a free-form budget such as "₹1,000" or "INR 2500".

    Everything that is not a digit or a dot is dropped and the leading numeric
    part of what remains is read as a float, so "1.000.5" reads as 1.0.
    Returns None when no finite number can be read.
    """
    cleaned = BUDGET_STRIP_PATTERN.sub("", value)
    match = FLOAT_PREFIX_PATTERN.match(cleaned)
    if not match:
        return None
    amount = float(match.group(0))
    if not math.isfinite(amount):
        return None
    return amount


def validate_budget(value: str) -> Optional[str]:
    if not value.strip():
        return "Budget is required"
    if parse_budget(value) is None:
        return "Please enter a valid budget amount"
    return None
