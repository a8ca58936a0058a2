"""
Enum definitions for the Sunday School Records API
"""

from enum import Enum

class TeacherRole(str, Enum):
    """Role a teacher holds in the program. Matches the teachers.role CHECK constraint."""
    TEACHER = "Teacher"
    HELPER = "Helper"
    ASSISTANT = "Assistant"
    COORDINATOR = "Coordinator"
    OTHER = "Other"

class EventType(str, Enum):
    """Kind of event. Matches the events.event_type CHECK constraint."""
    OUTING = "Outing"
    CAMP = "Camp"
    CONCERT = "Concert"
    CONFERENCE = "Conference"
    WORKSHOP = "Workshop"
    SPECIAL_SERVICE = "Special Service"
    OTHER = "Other"
