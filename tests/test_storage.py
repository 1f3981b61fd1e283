import pytest
from sqlalchemy.exc import IntegrityError

from symptomcheck import storage
from symptomcheck.ai import fallback_outcome
from symptomcheck.schemas import AssessmentCreate, ConsultationCreate, ProfileUpdate
from symptomcheck.utils import slugify

from conftest import HEADACHE


@pytest.fixture
def user(db):
    return storage.create_user(db, "Erin@HealthMail.com", "not-a-real-hash", first_name="Erin")


def _assessment_payload():
    return AssessmentCreate(symptoms=[HEADACHE], body_parts=["head"])


def test_create_user_normalises_email(db, user):
    assert user.email == "erin@healthmail.com"
    assert storage.get_user_by_email(db, " ERIN@healthmail.com") is user
    assert storage.get_user(db, user.id) is user


def test_upsert_user_updates_existing_row(db, user):
    updated = storage.upsert_user(db, user.id, user.email, user.password_hash, first_name="Erin", phone="555-0100")

    assert updated.id == user.id
    assert updated.phone == "555-0100"


def test_update_user_only_touches_set_fields(db, user):
    storage.update_user(db, user, ProfileUpdate(gender="female"))

    assert user.gender == "female"
    assert user.first_name == "Erin"


def test_create_assessment_stores_outcome(db, user):
    assessment = storage.create_assessment(db, user.id, _assessment_payload(), fallback_outcome())

    assert assessment.symptoms == [HEADACHE]
    assert assessment.urgency_level == "medium"
    assert assessment.ai_analysis["conditions"] == []
    assert assessment.recommendations[0]["type"] == "doctor"


def test_assessment_requires_existing_user(db):
    with pytest.raises(IntegrityError):
        storage.create_assessment(db, "missing-user", _assessment_payload(), fallback_outcome())
    db.rollback()


def test_get_assessments_newest_first(db, user):
    first = storage.create_assessment(db, user.id, _assessment_payload(), fallback_outcome())
    second = storage.create_assessment(db, user.id, _assessment_payload(), fallback_outcome())

    assert [a.id for a in storage.get_assessments(db, user.id)] == [second.id, first.id]
    assert storage.get_assessments(db, "somebody-else") == []


def test_update_consultation_status(db, user):
    consultation = storage.create_consultation(
        db,
        user.id,
        ConsultationCreate(doctor_name="Dr. Michael Chen", doctor_specialty="Internal Medicine",
                           scheduled_at="2030-01-02T10:00:00"),
    )
    assert consultation.status == "pending"

    updated = storage.update_consultation_status(db, consultation.id, "confirmed")

    assert updated.status == "confirmed"
    assert storage.update_consultation_status(db, 999, "confirmed") is None


@pytest.mark.parametrize("title, slug", [
    ("Hydration Basics", "hydration-basics"),
    ("Ten Minutes a Day: Building a Walking Habit", "ten-minutes-a-day-building-a-walking-habit"),
    ("  Cold vs. Flu?! ", "cold-vs-flu"),
])
def test_slugify(title, slug):
    assert slugify(title) == slug
