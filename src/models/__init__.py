from src.models.base import Base, BaseModel, TimeStamp
from .event import Ceremony, Event

__all__ = [
    "Base",
    "BaseModel",
    "TimeStamp",
    "Event",
    "Ceremony",
]
