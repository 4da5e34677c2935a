from typing import List, Dict, Optional, Tuple
import csv
import io
import random
import re
import logging

from course_core import CourseRecord

logger = logging.getLogger(__name__)

# Header synonyms seen in registrar exports -> canonical field names
HEADER_ALIASES = {
    'course': 'code',
    'course code': 'code',
    'course id': 'code',
    'catalog number': 'catalog',
    'name': 'title',
    'course name': 'title',
    'course title': 'title',
    'section': 'no',
    'class number': 'no',
    'schedule type': 'schd',
    'status': 'stat',
    'meeting time': 'meets',
    'meeting times': 'meets',
    'room': 'location',
    'units': 'credits',
    'credit hours': 'credits',
}

DAY_PATTERN = re.compile(r'\b(?:MON|TUE|WED|THU|FRI|SAT|SUN|TU|TH|SA|SU|M|T|W|R|F)+\b')
DAY_TOKEN_PATTERN = re.compile(r'MON|TUE|WED|THU|FRI|SAT|SUN|TU|TH|SA|SU|M|T|W|R|F')
TIME_PATTERN = re.compile(r'(\d{1,2}:\d{2}\s*(?:AM|PM)?)\s*-\s*(\d{1,2}:\d{2}\s*(?:AM|PM)?)', re.IGNORECASE)

DAY_CODES = {
    'MON': 'M', 'M': 'M',
    'TUE': 'T', 'TU': 'T', 'T': 'T',
    'WED': 'W', 'W': 'W',
    'THU': 'R', 'TH': 'R', 'R': 'R',
    'FRI': 'F', 'F': 'F',
    'SAT': 'S', 'SA': 'S',
    'SUN': 'U', 'SU': 'U',
}


class EnrollmentSimulator:
    """
    Generates capacity/enrollment figures for demo course data.

    Seed it to get the same figures on every run. Enrollment can reach
    capacity, so some simulated sections come out CLOSED.
    """
    def __init__(self, seed: Optional[int] = None, min_capacity: int = 10, max_capacity: int = 40):
        if min_capacity < 1 or max_capacity < min_capacity:
            raise ValueError("capacity range must satisfy 1 <= min_capacity <= max_capacity")
        self.min_capacity = min_capacity
        self.max_capacity = max_capacity
        self._rng = random.Random(seed)

    def generate(self) -> Tuple[int, int]:
        capacity = self._rng.randint(self.min_capacity, self.max_capacity)
        enrolled = self._rng.randint(0, capacity)
        return capacity, enrolled


class CourseDataParser:
    """
    Parses comma-delimited course listings into CourseRecord objects.
    The first non-blank line is the header row.
    """
    DEFAULT_CREDITS = 4
    DEFAULT_CAPACITY = 30

    @staticmethod
    def normalize_header(header: str) -> str:
        key = header.strip().lower()
        return HEADER_ALIASES.get(key, key)

    @staticmethod
    def parse_csv(text: str, enrollment: EnrollmentSimulator = None,
                  default_credits: int = DEFAULT_CREDITS,
                  default_capacity: int = DEFAULT_CAPACITY) -> List[CourseRecord]:
        """
        Parses raw CSV text into course records.

        Blank lines are skipped. Rows without a course id are dropped.
        Quoted fields may contain commas; unquoted fields are split on every comma.
        When `enrollment` is given, capacity and enrolled come from it instead of
        the capacity/enrolled columns.
        """
        if not text or not text.strip():
            return []

        rows = (row for row in csv.reader(io.StringIO(text)) if any(v.strip() for v in row))
        header_row = next(rows, None)
        if header_row is None:
            return []
        headers = [CourseDataParser.normalize_header(h) for h in header_row]

        courses = []
        for position, values in enumerate(rows):
            fields = CourseDataParser._map_row(headers, values)
            course_id = CourseDataParser._derive_course_id(fields)
            if not course_id:
                logger.debug(f"Dropping row {position}: no course id ({values})")
                continue

            if enrollment is not None:
                capacity, enrolled = enrollment.generate()
            else:
                capacity = CourseDataParser._parse_int(fields.get('capacity'))
                if capacity is None or capacity < 0:
                    capacity = default_capacity
                enrolled = CourseDataParser._parse_int(fields.get('enrolled'))
                if enrolled is None or enrolled < 0:
                    enrolled = 0

            credits = CourseDataParser._parse_int(fields.get('credits'))
            if credits is None or credits < 0:
                credits = default_credits

            meets = fields.get('meets', '')
            start_time, end_time = CourseDataParser.parse_meeting_time(meets)

            courses.append(CourseRecord(
                course_id=course_id,
                title=fields.get('title', ''),
                unique_key=f"{course_id}_{position}",
                description=fields.get('description', ''),
                credits=credits,
                meets=meets,
                days=CourseDataParser.parse_meeting_days(meets),
                start_time=start_time,
                end_time=end_time,
                capacity=capacity,
                enrolled=enrolled,
                section=fields.get('no', ''),
                schedule_type=fields.get('schd', ''),
                raw_status=fields.get('stat', ''),
                instructor=fields.get('instructor', ''),
                location=fields.get('location', ''),
            ))

        logger.info(f"Parsed {len(courses)} course sections")
        return courses

    @staticmethod
    def parse_meeting_days(meets: str) -> List[str]:
        """Extracts the first run of weekday tokens as single-letter codes ("MW 10:00-11:15" -> ['M', 'W'])."""
        if not meets:
            return []
        match = DAY_PATTERN.search(meets.upper())
        if not match:
            return []

        days = []
        for token in DAY_TOKEN_PATTERN.findall(match.group(0)):
            code = DAY_CODES[token]
            if code not in days:
                days.append(code)
        return days

    @staticmethod
    def parse_meeting_time(meets: str) -> Tuple[str, str]:
        """Extracts a start/end pair like ('10:00AM', '11:15AM'); ('', '') when absent."""
        if not meets:
            return '', ''
        match = TIME_PATTERN.search(meets)
        if not match:
            return '', ''
        start, end = (re.sub(r'\s+', '', t).upper() for t in match.groups())
        return start, end

    @staticmethod
    def _map_row(headers: List[str], values: List[str]) -> Dict[str, str]:
        fields = {}
        for index, header in enumerate(headers):
            value = values[index].strip() if index < len(values) else ''
            # Duplicate headers: keep the first non-empty value
            if not fields.get(header):
                fields[header] = value
        return fields

    @staticmethod
    def _derive_course_id(fields: Dict[str, str]) -> str:
        code = fields.get('code', '')
        if code:
            return code
        subject = fields.get('subject', '')
        catalog = fields.get('catalog', '')
        if subject and catalog:
            return f"{subject}-{catalog}"
        # A lone subject or catalog column stands in for the code
        return subject or catalog

    @staticmethod
    def _parse_int(value: Optional[str]) -> Optional[int]:
        if value is None:
            return None
        value = value.replace(',', '').strip()
        if not value:
            return None
        try:
            return int(value)
        except ValueError:
            pass
        try:
            number = float(value)
        except ValueError:
            return None
        return int(number) if number.is_integer() else None
