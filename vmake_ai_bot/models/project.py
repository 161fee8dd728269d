"""
Project data models.
Defines the intake submission and the AI-generated parts list and analysis.

Wire names are camelCase (projectName, totalCost, ...); attributes are snake_case.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model that reads and writes camelCase JSON keys."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, coerce_numbers_to_str=True)

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class Feasibility(str, Enum):
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


class Complexity(str, Enum):
    BEGINNER = "BEGINNER"
    INTERMEDIATE = "INTERMEDIATE"
    ADVANCED = "ADVANCED"


class ProjectSubmission(CamelModel):
    """One user's intake, as collected by the chat."""
    name: str = ""
    email: str = ""
    phone: str = ""
    project_name: str = ""
    description: str = ""
    timeline: str = ""
    budget: str = ""
    location: str = ""
    experience: Optional[str] = None


class Part(CamelModel):
    name: str
    quantity: int = Field(1, gt=0)
    price: float = Field(0, ge=0)
    description: str = ""
    optional: bool = False


class PartsList(CamelModel):
    """Parts list generated for a project description."""
    parts: List[Part]
    total_cost: float = 0
    additional_notes: List[str] = Field(default_factory=list)


class Challenge(CamelModel):
    type: str = ""
    description: str = ""


class Recommendation(CamelModel):
    category: str = ""
    description: str = ""


class EstimatedCost(CamelModel):
    min: float = 0
    max: float = 0
    currency: str = "USD"


class ProjectAnalysis(CamelModel):
    """Feasibility analysis generated for a project."""
    feasibility: Optional[Feasibility] = None
    estimated_time: str = ""
    complexity: Optional[Complexity] = None
    challenges: List[Challenge] = Field(default_factory=list)
    recommendations: List[Recommendation] = Field(default_factory=list)
    safety_considerations: List[str] = Field(default_factory=list)
    prerequisite_knowledge: List[str] = Field(default_factory=list)
    estimated_cost: Optional[EstimatedCost] = None

    @field_validator("feasibility", "complexity", mode="before")
    @classmethod
    def _upper_case_levels(cls, value):
        if isinstance(value, str):
            return value.strip().upper() or None
        return value


class StatusUpdate(ProjectSubmission):
    """Payment/status fields appended to a stored submission."""
    service_type: str = ""
    transaction_id: str = ""
    status: str = ""
    submission_id: Optional[str] = None


class StoredProject(CamelModel):
    """A submission row read back from the project store."""
    timestamp: str = ""
    name: str = ""
    email: str = ""
    phone: str = ""
    project_name: str = ""
    description: str = ""
    timeline: str = ""
    budget: str = ""
    location: str = ""
    results: Optional[Dict[str, Any]] = None
    service_type: str = ""
    transaction_id: str = ""
    status: str = ""
    submission_id: str = ""
