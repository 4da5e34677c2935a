from typing import Dict, Iterable, List, Set

from course_core import CourseRecord, GapReport, CategoryGap, RequirementCatalog


def compute_gaps(catalog: RequirementCatalog, completed: Set[str]) -> GapReport:
    """
    Works out which required courses are still missing, overall and per category.

    Identifiers in `completed` that the catalog does not know are ignored.
    Categories are independent: a course missing from two categories is listed
    in both. Categories with nothing missing are left out of the report.
    """
    completed = set(completed)

    missing_required = _missing(catalog.required_courses, completed)

    missing_by_category: Dict[str, CategoryGap] = {}
    for category in catalog.categories:
        missing = _missing(category.required_courses, completed)
        if missing:
            missing_by_category[category.name] = CategoryGap(
                missing=missing,
                credits_required=category.credits_required,
                notes=category.notes,
                electives_required=category.electives_required or 0,
            )

    return GapReport(missing_required, missing_by_category)


def _missing(course_ids: Iterable[str], completed: Set[str]) -> List[str]:
    # Catalog order is kept; repeated ids are listed once
    seen = set()
    missing = []
    for course_id in course_ids:
        if course_id in completed or course_id in seen:
            continue
        seen.add(course_id)
        missing.append(course_id)
    return missing


def parse_completed_courses(text: str) -> Set[str]:
    """Turns "ECON-UB 1, MATH-UB 121" into {'ECON-UB 1', 'MATH-UB 121'}."""
    if not text:
        return set()
    return {part.strip() for part in text.split(',') if part.strip()}


def progress_summary(catalog: RequirementCatalog, report: GapReport) -> Dict:
    total = len(set(catalog.required_courses))
    completed = total - len(report.missing_required)
    # Half-up rounding (5/8 -> 63), not round()'s banker's rounding
    percentage = int(completed * 100 / total + 0.5) if total else 0
    return {
        'completed': completed,
        'total': total,
        'percentage': percentage,
    }


def course_status_lookup(course_id: str, courses: List[CourseRecord]) -> str:
    """OPEN/CLOSED for the first offered section of `course_id`, 'Unknown' if it is not offered."""
    course = next((c for c in courses if c.course_id == course_id), None)
    if course is None:
        return 'Unknown'
    return course.status.value
