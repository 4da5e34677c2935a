import os
import logging
from typing import List, Optional

from course_core import ICourseRepository, CourseRecord, CourseDataError
from course_parser import CourseDataParser, EnrollmentSimulator

logger = logging.getLogger(__name__)


class CourseRepository(ICourseRepository):
    """In-memory store of the currently loaded course sections."""

    def __init__(self, courses: List[CourseRecord] = None,
                 default_credits: int = CourseDataParser.DEFAULT_CREDITS,
                 default_capacity: int = CourseDataParser.DEFAULT_CAPACITY):
        self.courses: List[CourseRecord] = list(courses or [])
        self.default_credits = default_credits
        self.default_capacity = default_capacity

    def load_text(self, text: str, enrollment: EnrollmentSimulator = None) -> List[CourseRecord]:
        courses = CourseDataParser.parse_csv(text, enrollment=enrollment,
                                             default_credits=self.default_credits,
                                             default_capacity=self.default_capacity)
        if not courses:
            raise CourseDataError("No courses found in the CSV")
        self.courses = courses
        return courses

    def load_file(self, path: str, enrollment: EnrollmentSimulator = None) -> List[CourseRecord]:
        if not path.lower().endswith('.csv'):
            raise CourseDataError("Please upload a CSV file")
        try:
            with open(path, 'r', encoding='utf-8-sig') as f:
                text = f.read()
        except OSError as e:
            raise CourseDataError(f"Error reading file: {e}") from e
        courses = self.load_text(text, enrollment=enrollment)
        logger.info(f"Loaded {len(courses)} courses from {path}")
        return courses

    def get_departments(self) -> List[str]:
        return sorted({c.department for c in self.courses})

    def get_department_courses(self, department: str) -> List[CourseRecord]:
        return [c for c in self.courses if c.department == department]

    def get_course_by_id(self, course_id: str) -> Optional[CourseRecord]:
        return next((c for c in self.courses if c.course_id == course_id), None)

    def get_course_by_key(self, unique_key: str) -> Optional[CourseRecord]:
        return next((c for c in self.courses if c.unique_key == unique_key), None)

    def search_courses(self, query: str) -> List[CourseRecord]:
        query = query.lower()
        return [c for c in self.courses if query in c.title.lower() or query in c.course_id.lower()]


def create_repository(data_file: str = None,
                      default_credits: int = CourseDataParser.DEFAULT_CREDITS,
                      default_capacity: int = CourseDataParser.DEFAULT_CAPACITY) -> CourseRepository:
    """Repository preloaded from `data_file` when it exists; empty otherwise."""
    repo = CourseRepository(default_credits=default_credits, default_capacity=default_capacity)
    if data_file and os.path.exists(data_file):
        try:
            repo.load_file(data_file)
        except CourseDataError as e:
            logger.error(f"Error loading course data from {data_file}: {e}")
    else:
        logger.info("No course data file found. Upload a CSV to get started.")
    return repo
