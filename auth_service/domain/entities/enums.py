"""
Auth Service Domain Enums

All enumeration types used across domain entities.
"""

from enum import Enum


class UserRole(str, Enum):
    """Role of a user on the platform"""

    student = "student"
    teacher = "teacher"


class Branch(str, Enum):
    """Academic branch a user belongs to"""

    CSE = "CSE"
    AIML = "AIML"
    AIDS = "AIDS"
    ECE = "ECE"
    EEE = "EEE"
    MECH = "MECH"
    CIVIL = "CIVIL"
    IT = "IT"
