# models.py
# typed request/response models and the canonical itinerary shape shared by all providers

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Literal, Optional

BUDGET_OPTIONS = ["budget", "moderate", "luxury", "ultra-luxury"]
INTEREST_OPTIONS = ["culture", "food", "adventure", "nature", "relaxation", "shopping", "nightlife", "family"]

# appended to `model` labels; the scorer and the reveal step look for these
FALLBACK_MARKER = "fallback"
COPY_MARKER = "copy due to other models failing"


class TravelPreference(BaseModel):
    model_config = ConfigDict(frozen=True)

    destination: str = Field(..., min_length=2)
    dates: str = Field(..., min_length=2)
    # one of BUDGET_OPTIONS or free text
    budget: str = Field(..., min_length=1)
    travelers: str = Field(..., min_length=1)
    interests: List[str] = Field(..., min_length=1)
    notes: Optional[str] = None

    # strip first so min_length counts the trimmed text
    @field_validator("destination", "dates", "budget", "travelers", mode="before")
    @classmethod
    def _strip(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("interests")
    @classmethod
    def _dedupe_interests(cls, v: List[str]) -> List[str]:
        out: List[str] = []
        for it in v:
            it = it.strip()
            if it and it not in out:
                out.append(it)
        if not out:
            raise ValueError("select at least one interest")
        return out


class Activity(BaseModel):
    title: str
    description: str = ""
    time: Optional[str] = None  # Morning / Afternoon / Evening, loosely
    type: Optional[str] = None  # display only
    location: Optional[str] = None
    isPlaceholder: bool = False


class Day(BaseModel):
    title: str
    activities: List[Activity] = Field(default_factory=list)


class Provenance(BaseModel):
    requested_provider: str
    actual_provider: str
    substituted: bool = False
    duplicated: bool = False


class ItineraryResult(BaseModel):
    destination: str
    summary: str
    highlights: List[str] = Field(default_factory=list)
    days: List[Day] = Field(..., min_length=1)
    tips: List[str] = Field(default_factory=list)
    model: str = Field(..., min_length=1)
    focus: str = ""
    rating: Optional[float] = Field(default=None, ge=1, le=5)
    provenance: Optional[Provenance] = None

    def blind(self) -> dict:
        """Dump without anything that gives away the producing model."""
        return self.model_dump(exclude={"model", "provenance"})


class ComparisonResult(BaseModel):
    first: ItineraryResult
    second: ItineraryResult
    # providers drawn by the pair selector, before any fallback
    requested: tuple[str, str]
    degraded: bool = False


class ComparisonRecord(BaseModel):
    id: str
    preference: TravelPreference
    first: ItineraryResult
    second: ItineraryResult
    chosen: Optional[Literal["first", "second"]] = None
    createdAt: str


class ComparisonResponse(BaseModel):
    id: str
    first: dict
    second: dict


class GuessRequest(BaseModel):
    guess: Literal["first", "second", "openai", "anthropic"]


class GuessResult(BaseModel):
    correct: bool
    actual_model_label: str
    chosen_side: Literal["first", "second"]
    actual_provider: Optional[str] = None


class PromptRequest(BaseModel):
    prompt: str = Field(..., min_length=1)


class ModelStats(BaseModel):
    modelName: str
    totalSelections: int = 0
    correctGuesses: int = 0
    percentageCorrect: float = 0.0
