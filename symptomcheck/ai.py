"""
Symptom analysis through an OpenAI-compatible chat completion endpoint.

Provides:
- build_prompt: renders structured symptoms into the user message
- parse_analysis: strict validation of the model's JSON reply
- fallback_outcome: the fixed payload returned whenever analysis fails
- analyze_symptoms: prompt -> model -> parse, degrading to the fallback
"""
import logging
from typing import Optional, Sequence

from openai import OpenAI

from .config import Config
from .schemas import AnalysisOutcome, SymptomInput

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a helpful medical assessment assistant. Always remind users that your "
    "analysis is not a substitute for professional medical advice. Be thorough but "
    "cautious in your assessments."
)

PROMPT_TEMPLATE = """You are a medical assessment AI assistant. Based on the following symptoms, provide a preliminary analysis.

IMPORTANT DISCLAIMER: This is NOT a medical diagnosis. This is for informational purposes only. The user should always consult with a qualified healthcare professional.

Symptoms reported:
{symptoms}
{additional_info}
Please analyze these symptoms and provide:
1. A list of potential conditions (up to 3) with probability percentages, descriptions, and severity levels
2. A brief summary of the analysis
3. Recommendations categorized by type (self-care, pharmacy, doctor visit, or emergency)
4. An overall urgency level (low, medium, high, or emergency)

Respond in JSON format with this structure:
{{
  "analysis": {{
    "conditions": [
      {{
        "name": "condition name",
        "probability": 0-100,
        "description": "brief description",
        "severity": "mild" | "moderate" | "severe"
      }}
    ],
    "summary": "overall summary of assessment",
    "disclaimer": "standard medical disclaimer"
  }},
  "recommendations": [
    {{
      "type": "self-care" | "pharmacy" | "doctor" | "emergency",
      "title": "recommendation title",
      "description": "detailed recommendation",
      "urgency": "low" | "medium" | "high" | "immediate"
    }}
  ],
  "urgencyLevel": "low" | "medium" | "high" | "emergency"
}}"""


def describe_symptom(symptom: SymptomInput) -> str:
    line = (
        f"- {symptom.name} in {symptom.body_part}: severity {symptom.severity}/10, "
        f"duration: {symptom.duration}"
    )
    if symptom.description:
        line += f", description: {symptom.description}"
    return line


def build_prompt(symptoms: Sequence[SymptomInput], additional_info: Optional[str] = None) -> str:
    extra = f"\nAdditional information: {additional_info}\n" if additional_info else ""
    return PROMPT_TEMPLATE.format(
        symptoms="\n".join(describe_symptom(s) for s in symptoms),
        additional_info=extra,
    )


def parse_analysis(content: Optional[str]) -> AnalysisOutcome:
    """
    Validate the raw completion text. Raises ValueError for empty content and
    pydantic.ValidationError for malformed JSON or any schema mismatch.
    """
    if not content or not content.strip():
        raise ValueError("No response from AI")
    return AnalysisOutcome.model_validate_json(content, strict=True)


def fallback_outcome() -> AnalysisOutcome:
    return AnalysisOutcome(
        analysis={
            "conditions": [],
            "summary": "Unable to complete analysis at this time. Please consult with a healthcare professional.",
            "disclaimer": "This system encountered an error. Please seek professional medical advice for your symptoms.",
        },
        recommendations=[
            {
                "type": "doctor",
                "title": "Consult a Healthcare Professional",
                "description": "We recommend scheduling an appointment with a doctor to discuss your symptoms.",
                "urgency": "medium",
            }
        ],
        urgency_level="medium",
    )


def get_ai_client() -> Optional[OpenAI]:
    """FastAPI dependency. None lets analyze_symptoms build the client lazily."""
    return None


def analyze_symptoms(
    symptoms: Sequence[SymptomInput],
    additional_info: Optional[str] = None,
    client: Optional[OpenAI] = None,
) -> AnalysisOutcome:
    prompt = build_prompt(symptoms, additional_info)
    try:
        if client is None:
            client = OpenAI(api_key=Config.OPENAI_API_KEY, max_retries=0)
        response = client.chat.completions.create(
            model=Config.OPENAI_MODEL,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            response_format={"type": "json_object"},
            max_completion_tokens=2048,
        )
        outcome = parse_analysis(response.choices[0].message.content)
    except Exception:
        # Any upstream or parsing failure degrades to the fixed payload
        logger.exception("Symptom analysis failed, returning fallback outcome")
        return fallback_outcome()

    logger.info(
        "Symptom analysis complete: %d condition(s), urgency=%s",
        len(outcome.analysis.conditions), outcome.urgency_level,
    )
    return outcome
