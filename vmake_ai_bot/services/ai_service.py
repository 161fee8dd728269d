"""
Project AI service.
Turns a project description into a parts list and a feasibility analysis by
prompting a text-completion model for JSON and validating what comes back.
"""

import json
import re
from typing import Any, Dict, Optional, Type

import structlog
from pydantic import ValidationError

from ..config.settings import Settings
from ..core.exceptions import FormatError, GenerationError, ParseError
from ..integrations.completion_client import TextCompletionClient
from ..integrations.gemini import GeminiCompletionClient
from ..models.project import PartsList, ProjectAnalysis, ProjectSubmission

logger = structlog.get_logger(__name__)

CODE_FENCE_PATTERN = re.compile(r"```json|```JSON|```")

ANALYSIS_LIST_FIELDS = (
    "challenges",
    "recommendations",
    "safetyConsiderations",
    "prerequisiteKnowledge",
)

CONNECTION_TEST_PROMPT = 'Respond with a simple "Hello World!" if you can receive this message.'

PARTS_LIST_PROMPT = """
You are an electronics expert. Generate a detailed parts list for this project.
Consider all necessary components including tools and accessories.
Respond with ONLY the JSON data, no markdown formatting or additional text.
Project: {description}

The response should be a JSON object with this structure:
{{
  "parts": [
    {{
      "name": "part name",
      "quantity": number,
      "price": number,
      "description": "brief description of part's purpose",
      "optional": boolean
    }}
  ],
  "totalCost": number,
  "additionalNotes": [
    "note about parts compatibility",
    "note about quality considerations",
    "note about alternatives"
  ]
}}
"""

ANALYSIS_PROMPT = """
You are an experienced electronics and robotics expert. Analyze this project and provide detailed, specific insights.
Focus on practical challenges, safety considerations, and specific recommendations.

Project Details:
Name: {project_name}
Description: {description}
Timeline: {timeline}
Budget: {budget}
Experience Level: {experience}

Consider these aspects in your analysis:
1. Technical feasibility given the timeline and experience level
2. Specific technical challenges that might arise
3. Required tools and workspace considerations
4. Safety precautions for working with electronics
5. Essential skills needed for successful completion
6. Common mistakes to avoid
7. Detailed cost breakdown considerations

Return JSON in this format (provide detailed, specific responses for each field):
{{
  "feasibility": "HIGH|MEDIUM|LOW",
  "estimatedTime": "duration",
  "complexity": "BEGINNER|INTERMEDIATE|ADVANCED",
  "challenges": [
    {{"type": "TECHNICAL", "description": "Detailed technical challenge description"}},
    {{"type": "SAFETY", "description": "Specific safety concern"}},
    {{"type": "IMPLEMENTATION", "description": "Specific implementation challenge"}}
  ],
  "recommendations": [
    {{"category": "SAFETY", "description": "Specific safety recommendation"}},
    {{"category": "IMPLEMENTATION", "description": "Specific implementation advice"}},
    {{"category": "LEARNING", "description": "Specific learning resource or tip"}}
  ],
  "safetyConsiderations": [
    "Specific safety consideration about power management",
    "Specific safety consideration about component handling",
    "Specific safety consideration about workspace setup"
  ],
  "prerequisiteKnowledge": [
    "Specific required electronics concept",
    "Specific required programming concept",
    "Specific required tool proficiency"
  ],
  "estimatedCost": {{
    "min": number,
    "max": number,
    "currency": "USD"
  }}
}}

Important: Provide at least 3 specific items for challenges, recommendations, safetyConsiderations, and prerequisiteKnowledge.
Make all descriptions detailed and specific to this exact project.
Respond with ONLY the JSON data, no markdown formatting or additional text.
"""

NOT_SPECIFIED = "Not specified"


def clean_json_response(text: str) -> str:
    """Remove markdown code fences and surrounding whitespace from model output."""
    return CODE_FENCE_PATTERN.sub("", text).strip()


class ProjectAIService:
    """Generates parts lists and project analyses with an injected completion client."""

    def __init__(self, completion_client: TextCompletionClient):
        self.completion_client = completion_client

    @property
    def provider(self) -> str:
        return self.completion_client.provider

    async def generate_parts_list(self, description: str) -> PartsList:
        """
        Generate a parts list for a free-text project description.

        Raises:
            GenerationError: the model call failed
            ParseError: the response is not JSON or has no "parts" list
            FormatError: a part does not fit the PartsList shape
        """
        logger.info("Starting parts list generation")
        text = await self._complete(PARTS_LIST_PROMPT.format(description=description), "parts list")

        data = self._parse_json(text, "Invalid response format from AI")
        if not isinstance(data.get("parts"), list):
            logger.error("Parts list response has no parts", keys=list(data.keys()))
            raise ParseError("Invalid response format from AI: missing parts list")

        parts_list = self._validate(PartsList, data, "Invalid parts list format")
        logger.info("Parts list generated", part_count=len(parts_list.parts))
        return parts_list

    async def analyze_project(self, submission: ProjectSubmission) -> ProjectAnalysis:
        """
        Produce a feasibility analysis for the submitted project.

        Raises the same errors as generate_parts_list; FormatError also covers
        list fields that came back as something other than a list.
        """
        logger.info("Starting project analysis", project_name=submission.project_name)
        prompt = ANALYSIS_PROMPT.format(
            project_name=submission.project_name,
            description=submission.description,
            timeline=submission.timeline or NOT_SPECIFIED,
            budget=submission.budget or NOT_SPECIFIED,
            experience=submission.experience or NOT_SPECIFIED,
        )
        text = await self._complete(prompt, "project analysis")

        data = self._parse_json(text, "Invalid analysis response format")
        for field in ANALYSIS_LIST_FIELDS:
            if field in data and not isinstance(data[field], list):
                raise FormatError(f"Invalid analysis response format: {field} must be a list")

        analysis = self._validate(ProjectAnalysis, data, "Invalid analysis response format")
        logger.info(
            "Project analysis completed",
            feasibility=analysis.feasibility.value if analysis.feasibility else None,
            complexity=analysis.complexity.value if analysis.complexity else None,
        )
        return analysis

    async def test_connection(self) -> str:
        """Send a trivial prompt and return the raw reply."""
        return await self._complete(CONNECTION_TEST_PROMPT, "connection test")

    async def _complete(self, prompt: str, purpose: str) -> str:
        try:
            return await self.completion_client.complete(prompt)
        except Exception as e:
            logger.error("Completion request failed", purpose=purpose, error=str(e))
            raise GenerationError(f"Failed to generate {purpose}: {e}") from e

    @staticmethod
    def _parse_json(text: str, message: str) -> Dict[str, Any]:
        cleaned = clean_json_response(text)
        try:
            data = json.loads(cleaned)
        except json.JSONDecodeError as e:
            logger.error("Failed to parse cleaned response as JSON", error=str(e), response=cleaned[:500])
            raise ParseError(message) from e

        if not isinstance(data, dict):
            raise ParseError(f"{message}: expected a JSON object")
        return data

    @staticmethod
    def _validate(model: Type, data: Dict[str, Any], message: str):
        try:
            return model.model_validate(data)
        except ValidationError as e:
            logger.error("AI response failed validation", model=model.__name__, errors=e.error_count())
            raise FormatError(f"{message}: {e.errors()[0]['msg']}") from e


# Each registered class must provide from_settings(settings).
COMPLETION_CLIENTS: Dict[str, Type[TextCompletionClient]] = {
    "gemini": GeminiCompletionClient,
}


def create_ai_service(
    provider: str = "gemini",
    settings: Optional[Settings] = None,
    completion_client: Optional[TextCompletionClient] = None,
) -> ProjectAIService:
    """
    Build a ProjectAIService for the named provider.

    An explicit completion_client skips provider lookup entirely.
    """
    if completion_client is None:
        client_class = COMPLETION_CLIENTS.get(provider)
        if client_class is None:
            raise ValueError(f"Unsupported AI provider: {provider}")
        if settings is None:
            raise ValueError("settings are required to build a completion client")
        completion_client = client_class.from_settings(settings)

    logger.info("Creating AI service", provider=completion_client.provider or provider)
    return ProjectAIService(completion_client)
