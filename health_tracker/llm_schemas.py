from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

# --- Models for individual LLM call outputs ---
# Field aliases follow the camelCase keys shown to the model in the format instructions.


class ExtractedMarker(BaseModel):
    name: str = Field(description="Name of the health marker, e.g., 'Vitamin D'")
    value: Optional[float] = Field(None, description="The measured value")
    unit: Optional[str] = Field(None, description="The unit of measurement, e.g., 'ng/mL'")
    normal_min: Optional[float] = Field(None, alias="normalMin", description="Lower bound of the normal range")
    normal_max: Optional[float] = Field(None, alias="normalMax", description="Upper bound of the normal range")
    status: str = Field(description="One of: low, normal, high")
    category: str = Field(description="One of: vitamins, minerals, blood, hormones, lipids, metabolic")

    class Config:
        populate_by_name = True


class ExtractedRecommendation(BaseModel):
    type: str = Field(description="One of: supplement, dietary, physical")
    title: str = Field(description="Short recommendation title")
    description: str = Field(description="Detailed explanation")
    priority: str = Field(description="One of: high, medium, low")
    related_marker: Optional[str] = Field(None, alias="relatedMarker", description="Marker this relates to")
    action_items: List[str] = Field(default_factory=list, alias="actionItems", description="Concrete steps")

    class Config:
        populate_by_name = True


class InteractionFinding(BaseModel):
    medication_id: int = Field(alias="medicationId", description="ID of the medication as given in the list")
    supplement_id: int = Field(alias="supplementId", description="ID of the supplement as given in the list")
    severity: str = Field(description="One of: mild, moderate, severe")
    description: str = Field(description="What the interaction does")
    recommendation: str = Field(description="What to do about it")
    separation_minutes: Optional[int] = Field(
        None, alias="separationMinutes", description="Minutes to keep the two apart, or null"
    )

    class Config:
        populate_by_name = True


class LabExtraction(BaseModel):
    """The JSON object the model returns for a lab report."""
    markers: List[ExtractedMarker] = Field(default_factory=list, description="Every health marker found")
    recommendations: List[ExtractedRecommendation] = Field(
        default_factory=list, description="One recommendation per abnormal marker"
    )

    @field_validator("markers", "recommendations", mode="before")
    @classmethod
    def null_as_empty(cls, value):
        return [] if value is None else value


class InteractionReport(BaseModel):
    """The JSON object the model returns for an interaction check."""
    interactions: List[InteractionFinding] = Field(
        default_factory=list, description="Clinically significant interactions; empty if none"
    )

    @field_validator("interactions", mode="before")
    @classmethod
    def null_as_empty(cls, value):
        return [] if value is None else value


# --- Results handed back to callers; ``error`` is set instead of raising ---

class ExtractedData(LabExtraction):
    error: Optional[str] = None


class InteractionCheckResult(InteractionReport):
    error: Optional[str] = None


class PillRef(BaseModel):
    """An (id, name) pair sent to the interaction check."""
    id: int
    name: str
