import logging
from dataclasses import dataclass
from typing import List, Optional

from fastapi import FastAPI, Depends, HTTPException, Query, Request, Security, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.openapi.utils import get_openapi
from fastapi.responses import JSONResponse
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from jose import JWTError
from openai import OpenAI

from . import storage
from .ai import analyze_symptoms, get_ai_client
from .config import Config
from .database import Base, SessionLocal, engine, get_db
from .schemas import (
    RegisterUser, LoginRequest, TokenResponse, UserOut, ProfileUpdate,
    AssessmentCreate, AssessmentOut,
    ConsultationCreate, ConsultationOut, ConsultationStatusUpdate, Doctor,
    ArticleOut,
)
from .seed import seed_articles
from .utils import hash_password, verify_password, create_access_token, decode_access_token

logging.basicConfig(
    level=Config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# -------------------- App & CORS --------------------
app = FastAPI(
    title="SymptomCheck API",
    version="0.1.0",
    swagger_ui_parameters={"persistAuthorization": True},
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=Config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# -------------------- Security --------------------
bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class RequestContext:
    """Verified identity of the caller, built once per request."""

    user_id: str
    email: str


def get_request_context(
    creds: HTTPAuthorizationCredentials = Security(bearer_scheme),
    db: Session = Depends(get_db),
) -> RequestContext:
    if not creds or not creds.credentials:
        raise HTTPException(status_code=401, detail="Missing or invalid token")

    try:
        payload = decode_access_token(creds.credentials.strip())
    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid or expired token")

    user_id: Optional[str] = payload.get("sub")
    if not user_id:
        raise HTTPException(status_code=401, detail="Invalid token payload")

    user = storage.get_user(db, user_id)
    if not user:
        raise HTTPException(status_code=401, detail="User not found")
    return RequestContext(user_id=user.id, email=user.email)


def ensure_owner(resource, ctx: RequestContext, not_found: str):
    """404 when the row is missing, 403 when it belongs to someone else."""
    if resource is None:
        raise HTTPException(status_code=404, detail=not_found)
    if resource.user_id != ctx.user_id:
        raise HTTPException(status_code=403, detail="Forbidden")
    return resource


def custom_openapi():
    if app.openapi_schema:
        return app.openapi_schema
    schema = get_openapi(
        title=app.title,
        version=app.version,
        description="SymptomCheck API with JWT Auth",
        routes=app.routes,
    )
    schema.setdefault("components", {})
    schema["components"]["securitySchemes"] = {
        "HTTPBearer": {"type": "http", "scheme": "bearer", "bearerFormat": "JWT"}
    }
    schema["security"] = [{"HTTPBearer": []}]
    app.openapi_schema = schema
    return app.openapi_schema

app.openapi = custom_openapi

# -------------------- Lifecycle --------------------
@app.on_event("startup")
def on_startup():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        seed_articles(db)
    finally:
        db.close()
    logger.info("SymptomCheck API started")


@app.exception_handler(SQLAlchemyError)
def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("Database error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})

# -------------------- Health --------------------
@app.get("/health")
def health():
    return {"status": "ok"}

# -------------------- Auth --------------------
@app.post("/api/auth/register", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def register(payload: RegisterUser, db: Session = Depends(get_db)):
    try:
        user = storage.create_user(
            db,
            email=payload.email,
            password_hash=hash_password(payload.password),
            first_name=payload.first_name,
            last_name=payload.last_name,
        )
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=400, detail="Email already registered")
    logger.info("Registered user %s", user.id)
    return user


@app.post("/api/auth/login", response_model=TokenResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    user = storage.get_user_by_email(db, payload.email)
    if not user or not verify_password(payload.password, user.password_hash):
        raise HTTPException(status_code=400, detail="Invalid email or password")

    access_token = create_access_token(data={"sub": user.id, "email": user.email})
    return TokenResponse(access_token=access_token)


@app.get("/api/auth/user", response_model=UserOut)
def current_user(ctx: RequestContext = Depends(get_request_context), db: Session = Depends(get_db)):
    return storage.get_user(db, ctx.user_id)


@app.patch("/api/auth/user", response_model=UserOut)
def update_profile(
    payload: ProfileUpdate,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    user = storage.get_user(db, ctx.user_id)
    try:
        return storage.update_user(db, user, payload)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error updating profile for %s", ctx.user_id)
        raise HTTPException(status_code=500, detail="Failed to update profile")

# -------------------- Assessments --------------------
@app.post("/api/assessments", response_model=AssessmentOut)
def create_assessment(
    payload: AssessmentCreate,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
    ai_client: Optional[OpenAI] = Depends(get_ai_client),
):
    outcome = analyze_symptoms(payload.symptoms, payload.additional_info, client=ai_client)
    try:
        assessment = storage.create_assessment(db, ctx.user_id, payload, outcome)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error creating assessment for %s", ctx.user_id)
        raise HTTPException(status_code=500, detail="Failed to create assessment")
    logger.info("Created assessment %s (urgency=%s)", assessment.id, assessment.urgency_level)
    return assessment


@app.get("/api/assessments", response_model=List[AssessmentOut])
def list_assessments(ctx: RequestContext = Depends(get_request_context), db: Session = Depends(get_db)):
    return storage.get_assessments(db, ctx.user_id)


@app.get("/api/assessments/{assessment_id}", response_model=AssessmentOut)
def get_assessment(
    assessment_id: int,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    assessment = storage.get_assessment_by_id(db, assessment_id)
    return ensure_owner(assessment, ctx, "Assessment not found")

# -------------------- Consultations --------------------
DOCTORS = [
    Doctor(id=1, name="Dr. Sarah Johnson", specialty="General Practitioner", rating=4.9, consultations=1200, available=True),
    Doctor(id=2, name="Dr. Michael Chen", specialty="Internal Medicine", rating=4.8, consultations=890, available=True),
    Doctor(id=3, name="Dr. Amara Okonkwo", specialty="Family Medicine", rating=4.9, consultations=1500, available=True),
    Doctor(id=4, name="Dr. James Ndlovu", specialty="General Practitioner", rating=4.7, consultations=650, available=False),
]


@app.get("/api/doctors", response_model=List[Doctor])
def list_doctors():
    return DOCTORS


@app.post("/api/consultations", response_model=ConsultationOut)
def create_consultation(
    payload: ConsultationCreate,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    doctor = next((d for d in DOCTORS if d.name == payload.doctor_name), None)
    if doctor and not doctor.available:
        raise HTTPException(status_code=400, detail="Doctor is not available")

    if payload.assessment_id is not None:
        assessment = storage.get_assessment_by_id(db, payload.assessment_id)
        ensure_owner(assessment, ctx, "Assessment not found")

    try:
        consultation = storage.create_consultation(db, ctx.user_id, payload)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error creating consultation for %s", ctx.user_id)
        raise HTTPException(status_code=500, detail="Failed to create consultation")
    logger.info("Booked consultation %s with %s", consultation.id, consultation.doctor_name)
    return consultation


@app.get("/api/consultations", response_model=List[ConsultationOut])
def list_consultations(ctx: RequestContext = Depends(get_request_context), db: Session = Depends(get_db)):
    return storage.get_consultations(db, ctx.user_id)


@app.patch("/api/consultations/{consultation_id}/status", response_model=ConsultationOut)
def update_consultation_status(
    consultation_id: int,
    payload: ConsultationStatusUpdate,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    consultation = storage.get_consultation_by_id(db, consultation_id)
    ensure_owner(consultation, ctx, "Consultation not found")
    try:
        return storage.update_consultation_status(db, consultation_id, payload.status)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error updating consultation %s", consultation_id)
        raise HTTPException(status_code=500, detail="Failed to update consultation")

# -------------------- Articles --------------------
@app.get("/api/articles", response_model=List[ArticleOut])
def list_articles(
    category: Optional[str] = Query(None, description="Filter by category, e.g. 'nutrition'"),
    q: Optional[str] = Query(None, description="Search in title and excerpt"),
    db: Session = Depends(get_db),
):
    return storage.get_articles(db, category=category, search=q)


@app.get("/api/articles/{slug}", response_model=ArticleOut)
def get_article(slug: str, db: Session = Depends(get_db)):
    article = storage.get_article_by_slug(db, slug)
    if not article:
        raise HTTPException(status_code=404, detail="Article not found")
    return article


# -------------------- Dev runner --------------------
if __name__ == "__main__":
    import uvicorn
    uvicorn.run("symptomcheck.main:app", host="0.0.0.0", port=8000, reload=True)
