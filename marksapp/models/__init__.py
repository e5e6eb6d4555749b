from ..extensions import db
from .user import User
from .people import Student
from .subject import Subject
from .mark import Mark

__all__ = ["User", "Student", "Subject", "Mark"]
