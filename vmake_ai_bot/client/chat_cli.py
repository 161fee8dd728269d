"""
Terminal chat for the project intake bot.

Usage:
    vmake-chat [--base-url URL]
"""

import argparse
import asyncio
from typing import Any, Dict, List, Optional

from ..config.chat_config import SERVICE_OPTIONS, format_amount
from ..config.settings import get_settings
from ..core.app import configure_logging
from ..core.exceptions import ApiClientError
from .api_client import VMakeApiClient
from .conversation import ChatMessage, ConversationEngine

EXIT_COMMANDS = {"exit", "quit"}


def render_parts_list(parts_list: Dict[str, Any]) -> List[str]:
    lines = ["", "Recommended Parts List:"]
    for part in parts_list.get("parts", []):
        optional = " (Optional)" if part.get("optional") else ""
        lines.append(
            f"  - {part.get('name')}{optional} x{part.get('quantity')} "
            f"@ {format_amount(part.get('price', 0))}: {part.get('description', '')}"
        )
    lines.append(f"Estimated Total Cost: {format_amount(parts_list.get('totalCost', 0))}")
    notes = parts_list.get("additionalNotes") or []
    if notes:
        lines.append("Additional Notes:")
        lines.extend(f"  • {note}" for note in notes)
    return lines


def render_analysis(analysis: Dict[str, Any]) -> List[str]:
    lines = [
        "",
        f"Feasibility: {analysis.get('feasibility') or 'n/a'}   "
        f"Complexity: {analysis.get('complexity') or 'n/a'}   "
        f"Estimated time: {analysis.get('estimatedTime') or 'n/a'}",
    ]
    for challenge in analysis.get("challenges", []):
        lines.append(f"  [{challenge.get('type')}] {challenge.get('description')}")
    for recommendation in analysis.get("recommendations", []):
        lines.append(f"  -> {recommendation.get('category')}: {recommendation.get('description')}")
    return lines


def render_message(message: ChatMessage) -> str:
    speaker = "You" if message.sender == "user" else "Bot"
    lines = [f"{speaker}: {message.text}"]

    if message.parts_list:
        lines.extend(render_parts_list(message.parts_list))
    if message.analysis:
        lines.extend(render_analysis(message.analysis))
    if message.show_options:
        for number, option in enumerate(SERVICE_OPTIONS.values(), start=1):
            lines.append(f"  {number}. {option.text} ({format_amount(option.price)})")
            lines.append(f"     {option.description}")
    if message.payment_details:
        details = message.payment_details
        lines.extend([
            "",
            "Payment Details",
            f"  Amount: {format_amount(details.amount)}",
            f"  UPI ID: {details.upi_id}",
            f"  Payee Name: {details.payee_name}",
            "After completing the payment, please enter the UPI transaction ID below to confirm your payment.",
        ])
    return "\n".join(lines)


async def check_connection(client: VMakeApiClient) -> Optional[str]:
    """Return a warning when the backend or AI service is unavailable."""
    try:
        health = await client.health()
    except ApiClientError as e:
        return f"Backend unavailable: {e}"
    if not health.get("aiService"):
        return "Some services are not available. The app may have limited functionality."
    return None


async def run_chat(base_url: Optional[str] = None) -> None:
    async with VMakeApiClient(base_url=base_url) as client:
        warning = await check_connection(client)
        if warning:
            print(f"⚠️  {warning}")

        engine = ConversationEngine(client, question_delay=0.5)
        shown = 0
        print("🟢 VMake Project Assistant\nType 'exit' to quit.\n")

        while True:
            for message in engine.state.messages[shown:]:
                if message.sender == "bot":
                    print(render_message(message))
            shown = len(engine.state.messages)

            if engine.state.error:
                print(f"❌ {engine.state.error}")
                engine.dismiss_error()

            if not engine.state.input_enabled:
                break

            user_input = (await asyncio.to_thread(input, f"[{engine.state.input_placeholder}] > ")).strip()
            if user_input.lower() in EXIT_COMMANDS:
                print("👋 Exiting chat. Have a great day!")
                break

            await engine.send(user_input)

        await engine.wait_for_background()


def main():
    parser = argparse.ArgumentParser(description="Chat with the VMake project assistant.")
    parser.add_argument("--base-url", default=get_settings().api_base_url, help="API base URL")
    args = parser.parse_args()
    configure_logging("WARNING")
    asyncio.run(run_chat(args.base_url))


if __name__ == "__main__":
    main()
