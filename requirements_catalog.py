"""
Degree requirement catalog.

DEFAULT_CATALOG is the built-in Stern BS in Business curriculum. A JSON file
with the same shape can replace it:

    {
        "required_courses": ["MATH-UB 121", ...],
        "credits_required": 128,
        "electives_required": 64,
        "notes": "...",
        "by_category": {
            "Business Tools": {
                "required_courses": [...],
                "credits_required": 18,
                "notes": "...",
                "electives_required": 0
            }
        }
    }
"""

import json
import os
import logging
from typing import Dict

from course_core import RequirementCatalog, RequirementCategory

logger = logging.getLogger(__name__)


DEFAULT_REQUIREMENTS = {
    "required_courses": [
        "MATH-UB 121",
        "MULT-UB 100",
        "CORE-UA 400",
        "CORE-UA 500",
        "ECON-UB 1",
        "ECON-UB 2",
        "STAT-UB 103",
        "STAT-UB 18"
    ],
    "credits_required": 128,
    "notes": "Consult the NYU Bulletin for detailed requirements.",
    "electives_required": 64,
    "by_category": {
        "Liberal Arts Core": {
            "required_courses": [
                "MATH-UB 121",
                "MULT-UB 100",
                "CORE-UA 400",
                "CORE-UA 500"
            ],
            "credits_required": 16,
            "electives_required": 0
        },
        "Business Tools": {
            "required_courses": [
                "ECON-UB 1",
                "ECON-UB 2",
                "STAT-UB 103",
                "STAT-UB 18",
                "STAT-UB 3",
                "ACCT-UB 1"
            ],
            "credits_required": 18,
            "notes": "Choose either ECON-UB 1 or ECON-UB 2; STAT-UB 103 or (STAT-UB 18 & STAT-UB 3)",
            "electives_required": 0
        },
        "Social Impact Core": {
            "required_courses": [
                "SOMI-UB 65",
                "SOMI-UB 6",
                "SOMI-UB 12S"
            ],
            "credits_required": 14,
            "electives_required": 0
        }
    }
}


def catalog_from_dict(data: Dict) -> RequirementCatalog:
    """Builds a RequirementCatalog from the JSON shape described in the module docstring."""
    if not isinstance(data, dict):
        raise ValueError("requirement catalog must be a JSON object")

    categories = []
    for name, category in (data.get("by_category") or {}).items():
        categories.append(RequirementCategory(
            name=name,
            required_courses=category.get("required_courses", []),
            credits_required=int(category.get("credits_required", 0)),
            notes=category.get("notes"),
            electives_required=int(category.get("electives_required") or 0),
        ))

    return RequirementCatalog(
        required_courses=data.get("required_courses", []),
        categories=categories,
        credits_required=int(data.get("credits_required", 0)),
        electives_required=int(data.get("electives_required") or 0),
        notes=data.get("notes", ""),
    )


DEFAULT_CATALOG = catalog_from_dict(DEFAULT_REQUIREMENTS)


def load_catalog(path: str = None) -> RequirementCatalog:
    """
    Loads a requirement catalog from a JSON file.
    Falls back to DEFAULT_CATALOG when the file is missing or malformed.
    """
    if not path or not os.path.exists(path):
        return DEFAULT_CATALOG

    try:
        with open(path, 'r', encoding='utf-8') as f:
            catalog = catalog_from_dict(json.load(f))
        logger.info(f"Loaded requirement catalog with {len(catalog.categories)} categories from {path}")
        return catalog
    except (OSError, ValueError, TypeError, AttributeError) as e:
        logger.warning(f"Failed to load requirement catalog from {path}: {e}. Using default catalog.")
        return DEFAULT_CATALOG
