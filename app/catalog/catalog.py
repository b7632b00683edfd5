"""
Habit catalog: read access to habit categories plus the default seed set.
"""
import logging

from sqlalchemy import or_, func
from sqlalchemy.orm import Session

from app.catalog.models import HabitCategory, HABIT_KINDS
from app.core.errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES = [
    {"name": "Drink Water", "kind": "build",
     "description": "Stay hydrated throughout the day",
     "methods": "Set reminders, carry a water bottle, track intake"},
    {"name": "Wake Up Early", "kind": "build",
     "description": "Start your day with more energy and productivity",
     "methods": "Set a consistent sleep schedule, avoid screens before bed, use natural light alarm"},
    {"name": "Exercise Daily", "kind": "build",
     "description": "Maintain physical fitness and health",
     "methods": "Start with 15 minutes, choose activities you enjoy, schedule it like an appointment"},
    {"name": "Read Books", "kind": "build",
     "description": "Expand knowledge and improve focus",
     "methods": "Read for 20 minutes daily, choose interesting topics, keep books visible"},
    {"name": "Meditate", "kind": "build",
     "description": "Reduce stress and improve mental clarity",
     "methods": "Start with 5 minutes, use guided apps, find a quiet space"},
    {"name": "Stop Procrastinating", "kind": "break",
     "description": "Overcome delays and increase productivity",
     "methods": "Break tasks into smaller steps, use the 2-minute rule, eliminate distractions",
     "quote": "The way to get started is to quit talking and begin doing. - Walt Disney"},
    {"name": "Reduce Phone Use", "kind": "break",
     "description": "Minimize digital distractions and improve focus",
     "methods": "Use app timers, create phone-free zones, find alternative activities",
     "quote": "Almost everything will work again if you unplug it for a few minutes, including you. - Anne Lamott"},
    {"name": "Stop Negative Self-Talk", "kind": "break",
     "description": "Improve mental health and self-confidence",
     "methods": "Practice mindfulness, challenge negative thoughts, use positive affirmations",
     "quote": "You are your own worst enemy. But you can also be your own greatest ally."},
    {"name": "Quit Junk Food", "kind": "break",
     "description": "Improve health and energy levels",
     "methods": "Plan healthy meals, remove temptations, find healthy alternatives",
     "quote": "Take care of your body. It's the only place you have to live. - Jim Rohn"},
    {"name": "Stop Staying Up Late", "kind": "break",
     "description": "Improve sleep quality and daily energy",
     "methods": "Set a bedtime routine, avoid caffeine late, create a relaxing environment",
     "quote": "Sleep is the best meditation. - Dalai Lama"},
]


def list_categories(db: Session, kind: str | None = None, search: str | None = None) -> list[HabitCategory]:
    """Categories ordered by name, optionally narrowed by kind and a search string."""
    query = db.query(HabitCategory)

    if kind is not None:
        kind = kind.strip().lower()
        if kind not in HABIT_KINDS:
            raise ValidationError(f"kind must be one of {', '.join(HABIT_KINDS)}")
        query = query.filter(HabitCategory.kind == kind)

    if search and search.strip():
        pattern = f"%{search.strip().lower()}%"
        query = query.filter(or_(
            func.lower(HabitCategory.name).like(pattern),
            func.lower(HabitCategory.description).like(pattern),
        ))

    return query.order_by(HabitCategory.name.asc()).all()


def get_category(db: Session, category_id: int) -> HabitCategory:
    category = db.get(HabitCategory, category_id)
    if category is None:
        raise NotFoundError(f"Habit category {category_id} not found")
    return category


def seed_default_categories(db: Session) -> int:
    """Insert any missing default category (matched by name). Returns rows created."""
    created = 0
    for entry in DEFAULT_CATEGORIES:
        existing = db.query(HabitCategory).filter(HabitCategory.name == entry["name"]).first()
        if existing:
            logger.debug("[CATALOG] '%s' already present, skipping", entry["name"])
            continue
        db.add(HabitCategory(**entry))
        created += 1
    db.commit()
    logger.info("[CATALOG] Seeded %d of %d default categories", created, len(DEFAULT_CATEGORIES))
    return created
