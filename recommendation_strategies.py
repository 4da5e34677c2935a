import asyncio
import json
import logging
import re
from typing import List, Set

from course_core import IRecommendationStrategy, CourseRecord, Recommendation
from deepseek_client import DeepSeekClient

logger = logging.getLogger(__name__)

FENCED_JSON = re.compile(r'```(?:json)?\s*([\s\S]*?)\s*```')


class KeywordRecommender(IRecommendationStrategy):
    """Ranks courses by how many distinct interest words appear in their text."""

    MATCH_FIELDS = ('title_department', 'title_description')

    def __init__(self, match_fields: str = 'title_department', max_results: int = 5):
        if match_fields not in self.MATCH_FIELDS:
            raise ValueError(f"match_fields must be one of {self.MATCH_FIELDS}, got {match_fields!r}")
        self.match_fields = match_fields
        self.max_results = max_results

    def _course_text(self, course: CourseRecord) -> str:
        if self.match_fields == 'title_description':
            return f"{course.title} {course.description}".lower()
        return f"{course.title} {course.department}".lower()

    def recommend(self, courses: List[CourseRecord], interests: str, completed: Set[str]) -> List[Recommendation]:
        if not interests or not interests.strip():
            return []

        keywords = set(interests.lower().split())
        scored = []
        for course in courses:
            if course.course_id in completed:
                continue
            text = self._course_text(course)
            score = sum(1 for keyword in keywords if keyword in text)
            if score > 0:
                scored.append(Recommendation(course, f"Matches {score} of your interest keywords", score))

        # sorted() is stable, so equal scores keep input order
        ranked = sorted(scored, key=lambda r: r.score, reverse=True)
        return ranked[:self.max_results]


class SemanticRecommender(IRecommendationStrategy):
    """
    Delegates ranking to the DeepSeek chat model.

    Candidates are first narrowed locally by keyword so the prompt stays small.
    The model answers with a JSON list of {course_id, reason}; ids it invents
    are dropped. Any failure along the way yields an empty list.
    """

    PLACEHOLDER_SCORE = 1

    def __init__(self, client: DeepSeekClient, max_candidates: int = 200, top_n: int = 5):
        self.client = client
        self.max_candidates = max_candidates
        self.top_n = top_n

    def prefilter(self, courses: List[CourseRecord], interests: str, completed: Set[str]) -> List[CourseRecord]:
        keywords = [w for w in (interests or '').lower().split() if len(w) > 2]
        if not keywords:
            return []

        candidates = []
        for course in courses:
            if course.course_id in completed:
                continue
            text = f"{course.title} {course.description}".lower()
            if any(keyword in text for keyword in keywords):
                candidates.append(course)
                if len(candidates) >= self.max_candidates:
                    break
        return candidates

    def build_prompt(self, interests: str, candidates: List[CourseRecord]) -> str:
        course_lines = "\n".join(f"{c.course_id}: {c.title}" for c in candidates)
        return f"""You are an NYU course recommender bot. A student said they are interested in: "{interests}".
Below is a list of available NYU courses. Recommend the top {self.top_n} most relevant ones and explain why for each:

Courses:
{course_lines}

Return your response as a JSON array with this format:
[
  {{
    "course_id": "...",
    "reason": "..."
  }},
  ...
]"""

    @staticmethod
    def extract_json_payload(content: str) -> str:
        """Strips a ```json fence from the model reply, if there is one."""
        match = FENCED_JSON.search(content)
        return match.group(1) if match else content.strip()

    def recommend(self, courses: List[CourseRecord], interests: str, completed: Set[str]) -> List[Recommendation]:
        candidates = self.prefilter(courses, interests, completed)
        logger.info(f"Semantic search for '{interests}': {len(candidates)} candidate(s)")
        if not candidates:
            return []

        content = self.client.chat(self.build_prompt(interests, candidates))
        if not isinstance(content, str):
            return []

        try:
            items = json.loads(self.extract_json_payload(content))
        except ValueError as e:
            logger.warning(f"Failed to parse JSON from DeepSeek reply: {e}. Raw content: {content[:200]}")
            return []

        if not isinstance(items, list):
            logger.warning(f"DeepSeek reply is not a JSON array: {type(items).__name__}")
            return []

        return self._reconcile(items, candidates)

    def _reconcile(self, items: List, candidates: List[CourseRecord]) -> List[Recommendation]:
        by_id = {}
        for course in candidates:
            by_id.setdefault(course.course_id, course)

        recommendations = []
        seen = set()
        for item in items:
            if not isinstance(item, dict) or not isinstance(item.get('course_id'), str):
                continue
            # The model sometimes echoes "ID: Title"
            course_id = item['course_id'].split(':')[0].strip()
            course = by_id.get(course_id)
            if course is None:
                logger.debug(f"Dropping unknown course id from DeepSeek reply: {item['course_id']}")
                continue
            if course_id in seen:
                continue
            seen.add(course_id)
            reason = item.get('reason')
            recommendations.append(Recommendation(course, reason if isinstance(reason, str) else '', self.PLACEHOLDER_SCORE))
            if len(recommendations) >= self.top_n:
                break

        return recommendations

    async def recommend_async(self, courses: List[CourseRecord], interests: str, completed: Set[str]) -> List[Recommendation]:
        """Awaitable variant; the blocking HTTP call runs on a worker thread."""
        return await asyncio.to_thread(self.recommend, courses, interests, completed)
