"""Enums for model fields."""

from enum import Enum


class Priority(str, Enum):
    """Todo priority levels."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Category(str, Enum):
    """Todo categories."""

    PERSONAL = "personal"
    WORK = "work"
    HEALTH = "health"
    EDUCATION = "education"
    SOCIAL = "social"
