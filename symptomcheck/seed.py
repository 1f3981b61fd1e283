import logging

from sqlalchemy.orm import Session

from . import storage
from .schemas import ArticleCreate
from .utils import slugify

logger = logging.getLogger(__name__)

ARTICLES = [
    {
        "title": "Understanding Common Cold vs. Flu",
        "category": "conditions",
        "excerpt": "Learn how to tell a cold from the flu and when each one needs a doctor.",
        "content": (
            "Colds and influenza are both respiratory infections caused by viruses, but the flu "
            "usually starts suddenly and brings fever, body aches and exhaustion, while a cold "
            "builds up gradually with a runny nose and sore throat.\n\n"
            "Most colds clear up within a week with rest and fluids. See a doctor if a fever lasts "
            "more than three days, breathing becomes difficult, or symptoms improve and then return."
        ),
        "read_time": 4,
        "featured": True,
    },
    {
        "title": "Ten Minutes a Day: Building a Walking Habit",
        "category": "wellness",
        "excerpt": "Short daily walks improve heart health, mood and sleep.",
        "content": (
            "Regular walking lowers blood pressure, helps manage weight and improves sleep quality. "
            "Start with ten minutes after a meal and add a few minutes each week.\n\n"
            "Comfortable shoes and a fixed time of day make the habit easier to keep."
        ),
        "read_time": 3,
    },
    {
        "title": "Managing Everyday Stress",
        "category": "mental-health",
        "excerpt": "Practical breathing and planning techniques for stressful weeks.",
        "content": (
            "Stress is a normal response to pressure, but long periods of it affect sleep, "
            "digestion and concentration. Slow breathing (inhale for four seconds, exhale for six) "
            "calms the nervous system within minutes.\n\n"
            "If low mood or anxiety lasts longer than two weeks, talk to a healthcare professional."
        ),
        "read_time": 5,
    },
    {
        "title": "Hydration Basics",
        "category": "nutrition",
        "excerpt": "How much water you need and the signs of dehydration.",
        "content": (
            "Most adults need around two litres of fluid a day, more in hot weather or during "
            "exercise. Dark urine, headache and dizziness are early signs of dehydration.\n\n"
            "Water, milk and herbal teas all count towards daily intake."
        ),
        "read_time": 3,
    },
    {
        "title": "Using Over-the-Counter Pain Relievers Safely",
        "category": "medications",
        "excerpt": "Dosing, interactions and when to ask a pharmacist.",
        "content": (
            "Paracetamol and ibuprofen are effective for mild pain and fever when taken at the "
            "recommended dose. Do not combine products containing the same active ingredient.\n\n"
            "Ask a pharmacist before use if you are pregnant, take blood thinners or have kidney "
            "or stomach problems."
        ),
        "read_time": 4,
    },
    {
        "title": "Recognising a Medical Emergency",
        "category": "conditions",
        "excerpt": "Warning signs that need immediate care.",
        "content": (
            "Call emergency services for chest pain, sudden weakness on one side of the body, "
            "difficulty breathing, severe bleeding or loss of consciousness.\n\n"
            "Do not wait for an online assessment when these signs are present."
        ),
        "read_time": 2,
        "featured": True,
    },
]


def seed_articles(db: Session) -> int:
    """Insert bundled articles whose slug is not stored yet. Returns the number added."""
    added = 0
    for item in ARTICLES:
        payload = ArticleCreate(slug=slugify(item["title"]), **item)
        if storage.get_article_by_slug(db, payload.slug):
            continue
        storage.create_article(db, payload)
        added += 1
    logger.info("Seeded %d article(s)", added)
    return added
