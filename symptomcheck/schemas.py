from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import Literal, Optional, List
from datetime import date, datetime, timezone


UrgencyLevel = Literal["low", "medium", "high", "emergency"]
RecommendationType = Literal["self-care", "pharmacy", "doctor", "emergency"]
RecommendationUrgency = Literal["low", "medium", "high", "immediate"]
ConditionSeverity = Literal["mild", "moderate", "severe"]
ConsultationStatus = Literal["pending", "confirmed", "completed", "cancelled"]

SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"


class CamelModel(BaseModel):
    """Snake_case attributes, camelCase on the wire; accepts both on input."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# -------------------- Symptoms & AI analysis --------------------
class SymptomInput(CamelModel):
    name: str = Field(..., min_length=1, max_length=120)
    body_part: str = Field(..., min_length=1, max_length=60)
    severity: int = Field(..., ge=1, le=10)
    duration: str = Field(..., min_length=1, max_length=60)
    description: Optional[str] = None


class PotentialCondition(CamelModel):
    name: str
    probability: float = Field(..., ge=0, le=100)
    description: str
    severity: ConditionSeverity


class AIAnalysisResult(CamelModel):
    conditions: List[PotentialCondition]
    summary: str
    disclaimer: str


class Recommendation(CamelModel):
    type: RecommendationType
    title: str
    description: str
    urgency: RecommendationUrgency


class AnalysisOutcome(CamelModel):
    """Shape the language model is asked to reply with, validated as-is."""

    analysis: AIAnalysisResult
    recommendations: List[Recommendation]
    urgency_level: UrgencyLevel


# -------------------- Assessments --------------------
class AssessmentCreate(CamelModel):
    symptoms: List[SymptomInput] = Field(..., min_length=1)
    body_parts: List[str] = Field(default_factory=list)
    additional_info: Optional[str] = None


class AssessmentOut(CamelModel):
    id: int
    user_id: str
    symptoms: List[SymptomInput]
    body_parts: List[str]
    additional_info: Optional[str] = None
    ai_analysis: Optional[AIAnalysisResult] = None
    urgency_level: Optional[UrgencyLevel] = None
    recommendations: Optional[List[Recommendation]] = None
    created_at: datetime


# -------------------- Consultations --------------------
class ConsultationCreate(CamelModel):
    doctor_name: str = Field(..., min_length=1, max_length=120)
    doctor_specialty: str = Field(..., min_length=1, max_length=120)
    scheduled_at: datetime
    assessment_id: Optional[int] = None
    notes: Optional[str] = None

    @field_validator("scheduled_at")
    @classmethod
    def to_naive_utc(cls, value: datetime) -> datetime:
        # Stored in a naive DateTime column, always as UTC
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value


class ConsultationStatusUpdate(CamelModel):
    status: ConsultationStatus


class ConsultationOut(CamelModel):
    id: int
    user_id: str
    assessment_id: Optional[int] = None
    doctor_name: str
    doctor_specialty: str
    scheduled_at: datetime
    status: ConsultationStatus
    notes: Optional[str] = None
    created_at: datetime


class Doctor(CamelModel):
    id: int
    name: str
    specialty: str
    rating: float
    consultations: int
    available: bool


# -------------------- Articles --------------------
class ArticleCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=255)
    slug: str = Field(..., pattern=SLUG_PATTERN, max_length=255)
    category: str = Field(..., min_length=1, max_length=50)
    excerpt: Optional[str] = None
    content: str
    image_url: Optional[str] = None
    read_time: int = Field(5, ge=1)
    featured: bool = False


class ArticleOut(CamelModel):
    id: int
    title: str
    slug: str
    category: str
    excerpt: Optional[str] = None
    content: str
    image_url: Optional[str] = None
    read_time: int
    featured: bool
    created_at: datetime


# -------------------- Users & auth --------------------
class RegisterUser(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    first_name: Optional[str] = Field(None, max_length=120)
    last_name: Optional[str] = Field(None, max_length=120)


class LoginRequest(CamelModel):
    email: EmailStr
    password: str


class TokenResponse(CamelModel):
    access_token: str
    token_type: str = "bearer"


class UserOut(CamelModel):
    id: str
    email: EmailStr
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None
    date_of_birth: Optional[date] = None
    gender: Optional[str] = None
    phone: Optional[str] = None
    created_at: datetime


class ProfileUpdate(CamelModel):
    first_name: Optional[str] = Field(None, max_length=120)
    last_name: Optional[str] = Field(None, max_length=120)
    profile_image_url: Optional[str] = Field(None, max_length=500)
    date_of_birth: Optional[date] = None
    gender: Optional[str] = Field(None, max_length=50)
    phone: Optional[str] = Field(None, max_length=50)
