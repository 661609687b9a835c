from models.student import Student
from models.discipline import DisciplineItem, DisciplineRecord, Polarity
from models.branch import Branch, BpsData

__all__ = [
    "Student",
    "DisciplineItem",
    "DisciplineRecord",
    "Polarity",
    "Branch",
    "BpsData",
]
