from abc import ABC, abstractmethod
from enum import Enum
from typing import List, Dict, Optional, Set

# --- Errors ---

class CoursePlannerError(Exception):
    """Base class for errors raised by the course planner."""


class CourseDataError(CoursePlannerError):
    """Course data could not be read or contained no usable courses."""


class ConfigurationError(CoursePlannerError):
    """Required configuration (such as an API credential) is missing."""


# --- Domain Models ---

class CourseStatus(Enum):
    OPEN = "OPEN"
    CLOSED = "CLOSED"


class CourseRecord:
    """Represents one offered section of a course."""
    def __init__(self, course_id: str, title: str, unique_key: str = "", description: str = "",
                 credits: int = 4, meets: str = "", days: List[str] = None,
                 start_time: str = "", end_time: str = "", capacity: int = 30, enrolled: int = 0,
                 section: str = "", schedule_type: str = "", raw_status: str = "",
                 instructor: str = "", location: str = ""):
        self.course_id = course_id
        self.title = title
        self.unique_key = unique_key or course_id
        self.description = description
        self.credits = credits
        self.meets = meets           # Raw schedule text, e.g. "MW 10:00AM-11:15AM"
        self.days = list(days or [])
        self.start_time = start_time
        self.end_time = end_time
        self.capacity = capacity
        self.enrolled = enrolled
        self.section = section
        self.schedule_type = schedule_type
        self.raw_status = raw_status  # Status text from the source, informational only
        self.instructor = instructor
        self.location = location

    @property
    def department(self) -> str:
        """Prefix of the course id before its first separator ("ECON-UB 1" -> "ECON")."""
        return self.course_id.split('-')[0]

    @property
    def status(self) -> CourseStatus:
        return CourseStatus.CLOSED if self.enrolled >= self.capacity else CourseStatus.OPEN

    def to_dict(self) -> Dict:
        return {
            'course_id': self.course_id,
            'unique_key': self.unique_key,
            'title': self.title,
            'description': self.description,
            'department': self.department,
            'credits': self.credits,
            'section': self.section,
            'schedule_type': self.schedule_type,
            'meets': self.meets,
            'days': list(self.days),
            'start_time': self.start_time,
            'end_time': self.end_time,
            'capacity': self.capacity,
            'enrolled': self.enrolled,
            'status': self.status.value,
            'raw_status': self.raw_status,
            'instructor': self.instructor,
            'location': self.location,
        }

    def __repr__(self):
        return f"{self.title} ({self.course_id})"


class Recommendation:
    """A course suggested for the student, with the reason it was picked."""
    def __init__(self, course: CourseRecord, reason: str, score: int):
        self.course = course
        self.reason = reason
        self.score = score

    @property
    def course_id(self) -> str:
        return self.course.course_id

    def to_dict(self) -> Dict:
        return {
            'course_id': self.course.course_id,
            'unique_key': self.course.unique_key,
            'title': self.course.title,
            'description': self.course.description,
            'reason': self.reason,
            'score': self.score,
            'course': self.course.to_dict(),
        }

    def __repr__(self):
        return f"Recommendation({self.course.course_id}, score={self.score})"


class RequirementCategory:
    """A named group of required courses inside a degree."""
    def __init__(self, name: str, required_courses: List[str], credits_required: int = 0,
                 notes: Optional[str] = None, electives_required: int = 0):
        self.name = name
        self.required_courses = list(required_courses)
        self.credits_required = credits_required
        self.notes = notes
        self.electives_required = electives_required


class RequirementCatalog:
    """Static curriculum: a flat required list plus categorized sub-requirements."""
    def __init__(self, required_courses: List[str], categories: List[RequirementCategory] = None,
                 credits_required: int = 0, electives_required: int = 0, notes: str = ""):
        self.required_courses = list(required_courses)
        self.categories = list(categories or [])
        self.credits_required = credits_required
        self.electives_required = electives_required
        self.notes = notes

    def category(self, name: str) -> Optional[RequirementCategory]:
        return next((c for c in self.categories if c.name == name), None)


class CategoryGap:
    """Courses still missing from one requirement category."""
    def __init__(self, missing: List[str], credits_required: int, notes: Optional[str] = None,
                 electives_required: int = 0):
        self.missing = missing
        self.credits_required = credits_required
        self.notes = notes
        self.electives_required = electives_required

    def to_dict(self) -> Dict:
        return {
            'missing': list(self.missing),
            'credits_required': self.credits_required,
            'notes': self.notes,
            'electives_required': self.electives_required,
        }


class GapReport:
    """Missing requirements for one completion set. Categories with nothing missing are absent."""
    def __init__(self, missing_required: List[str], missing_by_category: Dict[str, CategoryGap]):
        self.missing_required = missing_required
        self.missing_by_category = missing_by_category

    def to_dict(self) -> Dict:
        return {
            'missing_required': list(self.missing_required),
            'missing_by_category': {name: gap.to_dict() for name, gap in self.missing_by_category.items()},
        }


# --- Interfaces (Strategy Pattern) ---

class IRecommendationStrategy(ABC):
    @abstractmethod
    def recommend(self, courses: List[CourseRecord], interests: str, completed: Set[str]) -> List[Recommendation]:
        pass

# --- Interfaces (Adapter Pattern) ---

class ICourseRepository(ABC):
    @abstractmethod
    def get_course_by_key(self, unique_key: str) -> Optional[CourseRecord]:
        pass

    @abstractmethod
    def search_courses(self, query: str) -> List[CourseRecord]:
        pass
