"""
Client-side pieces of the symptom checker: the four-step wizard state and a
thin HTTP client for the API. Nothing here is persisted until submit.
"""
from dataclasses import dataclass, field
from typing import List, Optional

import requests

from .config import Config

TOTAL_STEPS = 4
STEP_TITLES = {
    1: "Where are you experiencing symptoms?",
    2: "Describe your symptoms",
    3: "Anything else we should know?",
    4: "Review your assessment",
}

BODY_PARTS = {
    "head": "Head",
    "face": "Face",
    "neck": "Neck",
    "chest": "Chest",
    "left-arm": "Left Arm",
    "right-arm": "Right Arm",
    "abdomen": "Abdomen",
    "lower-back": "Lower Back",
    "left-hand": "Left Hand",
    "right-hand": "Right Hand",
    "left-leg": "Left Leg",
    "right-leg": "Right Leg",
    "left-foot": "Left Foot",
    "right-foot": "Right Foot",
}

COMMON_SYMPTOMS = [
    "Pain", "Swelling", "Numbness", "Tingling", "Stiffness",
    "Weakness", "Burning", "Itching", "Redness", "Fever",
    "Fatigue", "Nausea", "Dizziness", "Headache", "Cough",
]

DURATION_OPTIONS = [
    "Less than 24 hours",
    "1-3 days",
    "4-7 days",
    "1-2 weeks",
    "2-4 weeks",
    "More than a month",
]

DEFAULT_SEVERITY = 5

PAGES = ["Symptom Checker", "History", "Consultations", "Articles", "Profile"]
RESULT_PAGE = "Symptom Checker"


def open_assessment(state, assessment_id: int):
    """Select an assessment and switch navigation to the page that shows results."""
    state["assessment_id"] = assessment_id
    state["page"] = RESULT_PAGE


def booking_assessment_id(state, link_assessment: bool) -> Optional[int]:
    """A booking references the selected assessment only when the user opts in."""
    if not link_assessment:
        return None
    return state.get("assessment_id")


@dataclass
class WizardState:
    step: int = 1
    body_parts: List[str] = field(default_factory=list)
    symptoms: List[dict] = field(default_factory=list)
    additional_info: str = ""

    @property
    def progress(self) -> float:
        return self.step / TOTAL_STEPS

    def toggle_body_part(self, part_id: str):
        if part_id in self.body_parts:
            self.body_parts.remove(part_id)
        else:
            self.body_parts.append(part_id)

    def add_symptom(
        self,
        name: str,
        body_part: str,
        duration: str,
        severity: int = DEFAULT_SEVERITY,
        description: Optional[str] = None,
    ) -> bool:
        """Returns False (and adds nothing) when a required field is blank."""
        if not (name and name.strip()) or not body_part or not duration:
            return False
        symptom = {
            "name": name.strip(),
            "bodyPart": body_part,
            "severity": min(max(int(severity), 1), 10),
            "duration": duration,
        }
        if description and description.strip():
            symptom["description"] = description.strip()
        self.symptoms.append(symptom)
        return True

    def remove_symptom(self, index: int):
        if 0 <= index < len(self.symptoms):
            del self.symptoms[index]

    def can_proceed(self) -> bool:
        if self.step == 1:
            return len(self.body_parts) > 0
        if self.step == 2:
            return len(self.symptoms) > 0
        if self.step == 3:
            return True
        return False

    def next_step(self) -> bool:
        if not self.can_proceed():
            return False
        self.step += 1
        return True

    def previous_step(self):
        if self.step > 1:
            self.step -= 1

    def to_payload(self) -> dict:
        return {
            "symptoms": list(self.symptoms),
            "bodyParts": list(self.body_parts),
            "additionalInfo": self.additional_info,
        }


class ApiError(Exception):
    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class SymptomCheckClient:
    def __init__(self, base_url: str = None, token: Optional[str] = None, session=None, timeout: float = 60):
        self.base_url = (base_url or Config.API_BASE_URL).rstrip("/")
        self.token = token
        self.session = session or requests.Session()
        self.timeout = timeout

    def _request(self, method: str, path: str, **kwargs):
        headers = kwargs.pop("headers", {})
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        resp = self.session.request(
            method, f"{self.base_url}{path}", headers=headers, timeout=self.timeout, **kwargs
        )
        if not resp.ok:
            try:
                body = resp.json()
            except ValueError:
                body = None
            detail = body.get("detail") if isinstance(body, dict) else None
            if not isinstance(detail, str):
                detail = f"Request failed with status {resp.status_code}"
            raise ApiError(resp.status_code, detail)
        return resp.json()

    # auth
    def register(self, email: str, password: str, first_name: str = None, last_name: str = None) -> dict:
        return self._request("POST", "/api/auth/register", json={
            "email": email, "password": password, "firstName": first_name, "lastName": last_name,
        })

    def login(self, email: str, password: str) -> str:
        data = self._request("POST", "/api/auth/login", json={"email": email, "password": password})
        self.token = data["accessToken"]
        return self.token

    def current_user(self) -> dict:
        return self._request("GET", "/api/auth/user")

    def update_profile(self, **changes) -> dict:
        return self._request("PATCH", "/api/auth/user", json=changes)

    # assessments
    def submit_assessment(self, state: WizardState) -> dict:
        data = self._request("POST", "/api/assessments", json=state.to_payload())
        if not data or "id" not in data:
            raise ApiError(500, "Invalid response from server")
        return data

    def list_assessments(self) -> list:
        return self._request("GET", "/api/assessments")

    def get_assessment(self, assessment_id: int) -> dict:
        return self._request("GET", f"/api/assessments/{assessment_id}")

    # consultations
    def list_doctors(self) -> list:
        return self._request("GET", "/api/doctors")

    def book_consultation(self, doctor_name: str, doctor_specialty: str, scheduled_at: str,
                          assessment_id: int = None, notes: str = None) -> dict:
        return self._request("POST", "/api/consultations", json={
            "doctorName": doctor_name,
            "doctorSpecialty": doctor_specialty,
            "scheduledAt": scheduled_at,
            "assessmentId": assessment_id,
            "notes": notes,
        })

    def list_consultations(self) -> list:
        return self._request("GET", "/api/consultations")

    def update_consultation_status(self, consultation_id: int, status: str) -> dict:
        return self._request("PATCH", f"/api/consultations/{consultation_id}/status", json={"status": status})

    # articles
    def list_articles(self, category: str = None, query: str = None) -> list:
        params = {k: v for k, v in {"category": category, "q": query}.items() if v}
        return self._request("GET", "/api/articles", params=params)

    def get_article(self, slug: str) -> dict:
        return self._request("GET", f"/api/articles/{slug}")
