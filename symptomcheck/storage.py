"""
Data access layer.

One function per entity operation. Writes commit before returning; ownership
checks are left to the route layer.
"""
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from .models import User, Assessment, Consultation, Article
from .schemas import (
    AnalysisOutcome, AssessmentCreate, ArticleCreate, ConsultationCreate,
    ProfileUpdate,
)


# -------------------- Users --------------------
def get_user(db: Session, user_id: str) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()

def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email.lower().strip()).first()

def create_user(db: Session, email: str, password_hash: str, **profile) -> User:
    user = User(email=email.lower().strip(), password_hash=password_hash, **profile)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user

def upsert_user(db: Session, user_id: str, email: str, password_hash: str, **profile) -> User:
    user = db.merge(
        User(id=user_id, email=email.lower().strip(), password_hash=password_hash, **profile)
    )
    db.commit()
    db.refresh(user)
    return user

def update_user(db: Session, user: User, changes: ProfileUpdate) -> User:
    for field, value in changes.model_dump(exclude_unset=True).items():
        setattr(user, field, value)
    db.commit()
    db.refresh(user)
    return user


# -------------------- Assessments --------------------
def create_assessment(
    db: Session, user_id: str, payload: AssessmentCreate, outcome: AnalysisOutcome
) -> Assessment:
    assessment = Assessment(
        user_id=user_id,
        symptoms=[s.model_dump(by_alias=True, exclude_none=True) for s in payload.symptoms],
        body_parts=list(payload.body_parts),
        additional_info=payload.additional_info,
        ai_analysis=outcome.analysis.model_dump(by_alias=True),
        recommendations=[r.model_dump(by_alias=True) for r in outcome.recommendations],
        urgency_level=outcome.urgency_level,
    )
    db.add(assessment)
    db.commit()
    db.refresh(assessment)
    return assessment

def get_assessments(db: Session, user_id: str) -> list[Assessment]:
    return (
        db.query(Assessment)
        .filter(Assessment.user_id == user_id)
        .order_by(Assessment.created_at.desc(), Assessment.id.desc())
        .all()
    )

def get_assessment_by_id(db: Session, assessment_id: int) -> Optional[Assessment]:
    return db.query(Assessment).filter(Assessment.id == assessment_id).first()


# -------------------- Consultations --------------------
def create_consultation(db: Session, user_id: str, payload: ConsultationCreate) -> Consultation:
    consultation = Consultation(
        user_id=user_id,
        assessment_id=payload.assessment_id,
        doctor_name=payload.doctor_name,
        doctor_specialty=payload.doctor_specialty,
        scheduled_at=payload.scheduled_at,
        notes=payload.notes,
    )
    db.add(consultation)
    db.commit()
    db.refresh(consultation)
    return consultation

def get_consultations(db: Session, user_id: str) -> list[Consultation]:
    return (
        db.query(Consultation)
        .filter(Consultation.user_id == user_id)
        .order_by(Consultation.created_at.desc(), Consultation.id.desc())
        .all()
    )

def get_consultation_by_id(db: Session, consultation_id: int) -> Optional[Consultation]:
    return db.query(Consultation).filter(Consultation.id == consultation_id).first()

def update_consultation_status(db: Session, consultation_id: int, status: str) -> Optional[Consultation]:
    consultation = get_consultation_by_id(db, consultation_id)
    if not consultation:
        return None
    consultation.status = status
    db.commit()
    db.refresh(consultation)
    return consultation


# -------------------- Articles --------------------
def get_articles(
    db: Session, category: Optional[str] = None, search: Optional[str] = None
) -> list[Article]:
    q = db.query(Article)
    if category:
        q = q.filter(Article.category == category)
    if search:
        term = search.strip().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        pattern = f"%{term}%"
        q = q.filter(or_(
            Article.title.ilike(pattern, escape="\\"),
            Article.excerpt.ilike(pattern, escape="\\"),
        ))
    return q.order_by(Article.created_at.desc(), Article.id.desc()).all()

def get_article_by_slug(db: Session, slug: str) -> Optional[Article]:
    return db.query(Article).filter(Article.slug == slug).first()

def create_article(db: Session, payload: ArticleCreate) -> Article:
    article = Article(**payload.model_dump())
    db.add(article)
    db.commit()
    db.refresh(article)
    return article
