from models.teacher import Teacher
from models.school_class import SchoolClass
from models.subject import Subject
from models.assignment import Assignment
from models.school_data import SchoolData

__all__ = [
    "Teacher",
    "SchoolClass",
    "Subject",
    "Assignment",
    "SchoolData",
]
