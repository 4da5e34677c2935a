"""
Session state for one student: loaded courses, completed courses, planned courses.

The planner owns that state and hands copies to the parser, gap analyzer and
recommenders. Every operation returns a short user-facing message next to its
result, so callers never need to interpret exceptions for the normal
"nothing to show" cases.
"""

import logging
from typing import Dict, Iterable, List, Optional, Tuple, Union

from course_core import CourseRecord, GapReport, Recommendation, RequirementCatalog
from course_parser import EnrollmentSimulator
from data_adapter import CourseRepository
from gap_analyzer import compute_gaps, course_status_lookup, parse_completed_courses, progress_summary
from recommendation_strategies import KeywordRecommender, SemanticRecommender

logger = logging.getLogger(__name__)


class CoursePlanner:
    def __init__(self, repository: CourseRepository, catalog: RequirementCatalog,
                 semantic_recommender: SemanticRecommender = None, max_recommendations: int = 5):
        self.repository = repository
        self.catalog = catalog
        self.semantic_recommender = semantic_recommender
        self.max_recommendations = max_recommendations
        self.completed = set()
        self.gap_report: Optional[GapReport] = None
        self.planned: List[CourseRecord] = []

    # --- Course data ---

    def load_courses(self, text: str, enrollment: EnrollmentSimulator = None) -> Tuple[List[CourseRecord], str]:
        """Raises CourseDataError when the text holds no usable courses."""
        courses = self.repository.load_text(text, enrollment=enrollment)
        self.planned = []
        return courses, f"Successfully loaded {len(courses)} courses"

    # --- Requirements ---

    def set_completed(self, completed: Union[str, Iterable[str]]) -> Optional[GapReport]:
        if isinstance(completed, str):
            completed = parse_completed_courses(completed)
        self.completed = {c.strip() for c in completed if c and c.strip()}
        self.gap_report = compute_gaps(self.catalog, self.completed) if self.completed else None
        return self.gap_report

    def requirements_view(self) -> Optional[Dict]:
        if self.gap_report is None:
            return None

        courses = self.repository.courses
        categories = {}
        for name, gap in self.gap_report.missing_by_category.items():
            entry = gap.to_dict()
            entry['missing'] = [
                {'course_id': course_id, 'status': course_status_lookup(course_id, courses)}
                for course_id in gap.missing
            ]
            categories[name] = entry

        return {
            'progress': progress_summary(self.catalog, self.gap_report),
            'missing_required': list(self.gap_report.missing_required),
            'missing_by_category': categories,
        }

    # --- Plan ---

    def add_to_plan(self, unique_key: str) -> Tuple[bool, str]:
        """
        Adds one section to the plan. Sections are identified by unique_key so
        that two sections of the same course stay distinct; a bare course id
        falls back to the first section with that id.
        """
        course = self.repository.get_course_by_key(unique_key)
        if course is None:
            course = self.repository.get_course_by_id(unique_key)
        if course is None:
            return False, f"Course {unique_key} not found"
        if any(c.unique_key == course.unique_key for c in self.planned):
            return False, "This course is already in your plan"
        self.planned.append(course)
        return True, "Course added to your plan"

    def remove_from_plan(self, unique_key: str) -> Tuple[bool, str]:
        remaining = [c for c in self.planned if c.unique_key != unique_key]
        if len(remaining) == len(self.planned):
            # bare course id removes the first planned section of that course
            for course in self.planned:
                if course.course_id == unique_key:
                    remaining = [c for c in self.planned if c is not course]
                    break
        if len(remaining) == len(self.planned):
            return False, f"Course {unique_key} is not in your plan"
        self.planned = remaining
        return True, "Course removed from your plan"

    # --- Recommendations ---

    def recommend(self, interests: str, mode: str = 'keyword',
                  match_fields: str = 'title_department') -> Tuple[List[Recommendation], str]:
        if interests is not None and not isinstance(interests, str):
            raise ValueError("interests must be a string")
        if not interests or not interests.strip():
            return [], "Please enter your interests first"
        if not self.repository.courses:
            return [], "Please upload course data first"

        if mode == 'semantic':
            if self.semantic_recommender is None:
                return [], "Semantic search is not available"
            strategy = self.semantic_recommender
        elif mode == 'keyword':
            strategy = KeywordRecommender(match_fields=match_fields, max_results=self.max_recommendations)
        else:
            raise ValueError(f"Unknown recommendation mode: {mode}")

        recommendations = strategy.recommend(self.repository.courses, interests, set(self.completed))
        logger.info(f"{mode} recommendations for '{interests}': {len(recommendations)}")

        if not recommendations:
            return [], "No matching courses found. Try different interest keywords."
        return recommendations, f"Found {len(recommendations)} recommended courses"
