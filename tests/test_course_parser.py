"""
Tests for the course CSV parser.
Run with: pytest tests/test_course_parser.py -v
"""

import pytest
import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from course_core import CourseStatus
from course_parser import CourseDataParser, EnrollmentSimulator


SAMPLE_CSV = """Course,Course Name,Section,Meeting Time,Room,Instructor,Capacity,Enrolled,Description
ECON-UB 1,Microeconomics,001,MW 9:30AM-10:45AM,KMC 2-60,Smith,40,12,Supply and demand
ECON-UB 1,Microeconomics,002,TR 11:00AM - 12:15PM,KMC 3-70,Jones,40,40,Supply and demand
STAT-UB 103,Statistics for Business Control,001,F 2:00PM-4:45PM,TISCH LC19,Lee,"1,200",5,Regression and data analysis

,,,,,,,,
MATH-UB 121,Calculus,001,TBA,,,abc,-3,
"""


class TestParseCsv:
    """Test parsing of whole CSV documents."""

    def test_subject_and_catalog_are_joined(self):
        """Test the subject/catalog example from the course export format."""
        text = "subject,catalog,name,capacity,enrolled\nECON,UB 1,Intro to Econ,30,30\n"
        result = CourseDataParser.parse_csv(text)

        assert len(result) == 1
        course = result[0]
        assert course.course_id == "ECON-UB 1"
        assert course.department == "ECON"
        assert course.title == "Intro to Econ"
        assert course.status == CourseStatus.CLOSED

    def test_header_aliases(self):
        """Test that header synonyms map onto canonical fields."""
        result = CourseDataParser.parse_csv(SAMPLE_CSV)
        first = result[0]

        assert first.course_id == "ECON-UB 1"
        assert first.title == "Microeconomics"
        assert first.section == "001"
        assert first.meets == "MW 9:30AM-10:45AM"
        assert first.location == "KMC 2-60"
        assert first.instructor == "Smith"
        assert first.description == "Supply and demand"

    def test_blank_and_empty_rows_skipped(self):
        """Test that blank lines and all-empty rows do not become records."""
        result = CourseDataParser.parse_csv(SAMPLE_CSV)

        assert [c.course_id for c in result] == ["ECON-UB 1", "ECON-UB 1", "STAT-UB 103", "MATH-UB 121"]

    def test_row_without_course_id_dropped(self):
        """Test that rows missing an identifier are discarded."""
        text = "course,name\n,Orphan Title\nART-UA 10,Art History\n"
        result = CourseDataParser.parse_csv(text)

        assert len(result) == 1
        assert result[0].course_id == "ART-UA 10"

    def test_empty_input(self):
        """Test that empty or header-only input yields no records."""
        assert CourseDataParser.parse_csv("") == []
        assert CourseDataParser.parse_csv("\n\n") == []
        assert CourseDataParser.parse_csv("course,name\n") == []

    def test_unique_keys_for_shared_course_id(self):
        """Test that two sections of one course stay distinguishable."""
        result = CourseDataParser.parse_csv(SAMPLE_CSV)
        keys = [c.unique_key for c in result]

        assert result[0].course_id == result[1].course_id
        assert len(set(keys)) == len(keys)
        assert keys[0].startswith("ECON-UB 1")

    def test_numeric_defaults(self):
        """Test credit, capacity and enrollment fallbacks."""
        result = CourseDataParser.parse_csv(SAMPLE_CSV)
        calculus = result[3]

        assert calculus.credits == 4
        assert calculus.capacity == 30
        assert calculus.enrolled == 0

    def test_thousands_separator_stripped(self):
        """Test that quoted '1,200' parses as 1200."""
        result = CourseDataParser.parse_csv(SAMPLE_CSV)

        assert result[2].capacity == 1200
        assert result[2].enrolled == 5

    def test_credits_column(self):
        """Test that a valid credits column overrides the default."""
        text = "course,name,units\nMATH-UB 121,Calculus,3\nART-UA 10,Art,lots\n"
        result = CourseDataParser.parse_csv(text)

        assert result[0].credits == 3
        assert result[1].credits == 4

    def test_status_follows_enrollment(self):
        """Test CLOSED iff enrolled >= capacity, whatever the status column says."""
        text = "course,name,status,capacity,enrolled\nA-1,One,Closed,10,3\nB-1,Two,Open,10,10\n"
        result = CourseDataParser.parse_csv(text)

        assert result[0].status == CourseStatus.OPEN
        assert result[0].raw_status == "Closed"
        assert result[1].status == CourseStatus.CLOSED

    def test_parse_is_repeatable(self):
        """Test that parsing the same text twice gives the same records."""
        first = [c.to_dict() for c in CourseDataParser.parse_csv(SAMPLE_CSV)]
        second = [c.to_dict() for c in CourseDataParser.parse_csv(SAMPLE_CSV)]

        assert first == second


class TestMeetingParsing:
    """Test meeting day/time extraction."""

    def test_short_day_codes(self):
        assert CourseDataParser.parse_meeting_days("MW 9:30AM-10:45AM") == ['M', 'W']

    def test_tuesday_thursday(self):
        assert CourseDataParser.parse_meeting_days("TTh 2:00 PM - 3:15 PM") == ['T', 'R']
        assert CourseDataParser.parse_meeting_days("TR 11:00AM-12:15PM") == ['T', 'R']

    def test_long_day_codes(self):
        assert CourseDataParser.parse_meeting_days("MONWED 9:00-10:15") == ['M', 'W']

    def test_two_letter_day_codes(self):
        """Test Tu/Sa/Su abbreviations as they appear in registrar exports."""
        assert CourseDataParser.parse_meeting_days("TuTh 10:00AM-11:15AM") == ['T', 'R']
        assert CourseDataParser.parse_meeting_days("Sa 9:00AM-12:00PM") == ['S']
        assert CourseDataParser.parse_meeting_days("SaSu 1:00PM-3:00PM") == ['S', 'U']

    def test_no_days(self):
        """Test that words which merely contain day letters are ignored."""
        assert CourseDataParser.parse_meeting_days("TBA") == []
        assert CourseDataParser.parse_meeting_days("Room 101") == []
        assert CourseDataParser.parse_meeting_days("") == []

    def test_time_range(self):
        assert CourseDataParser.parse_meeting_time("MW 9:30AM-10:45AM") == ('9:30AM', '10:45AM')
        assert CourseDataParser.parse_meeting_time("TTh 2:00 pm - 3:15 pm") == ('2:00PM', '3:15PM')
        assert CourseDataParser.parse_meeting_time("F 14:00-16:45") == ('14:00', '16:45')

    def test_no_time(self):
        assert CourseDataParser.parse_meeting_time("TBA") == ('', '')
        assert CourseDataParser.parse_meeting_time("") == ('', '')

    def test_parsed_record_has_schedule(self):
        result = CourseDataParser.parse_csv(SAMPLE_CSV)

        assert result[1].days == ['T', 'R']
        assert result[1].start_time == '11:00AM'
        assert result[1].end_time == '12:15PM'
        assert result[3].days == []
        assert result[3].start_time == ''


class TestEnrollmentSimulator:
    """Test simulated capacity/enrollment."""

    def test_seeded_generation_is_deterministic(self):
        first = CourseDataParser.parse_csv(SAMPLE_CSV, enrollment=EnrollmentSimulator(seed=7))
        second = CourseDataParser.parse_csv(SAMPLE_CSV, enrollment=EnrollmentSimulator(seed=7))

        assert [(c.capacity, c.enrolled) for c in first] == [(c.capacity, c.enrolled) for c in second]

    def test_simulated_status_derivation(self):
        simulator = EnrollmentSimulator(seed=42)
        text = "course,name\n" + "\n".join(f"X-{i},Course {i}" for i in range(50))
        result = CourseDataParser.parse_csv(text, enrollment=simulator)

        assert len(result) == 50
        for course in result:
            assert 10 <= course.capacity <= 40
            assert 0 <= course.enrolled <= course.capacity
            assert (course.status == CourseStatus.CLOSED) == (course.enrolled >= course.capacity)

    def test_invalid_range(self):
        with pytest.raises(ValueError):
            EnrollmentSimulator(min_capacity=20, max_capacity=10)


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
