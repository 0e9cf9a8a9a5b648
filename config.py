"""
Configuration for the blog admin SEO audit engine and publish tools
"""

import logging
import sys

AUDIT = {
    "title": {
        "min_length": 10,
        "max_length": 70,
        "short_score": 20,
        "long_score": 60,
    },
    "short_description": {
        "min_length": 50,
        "max_length": 160,
        "short_score": 40,
        "long_score": 80,
    },
    "word_count": {
        "min_words": 300,
        "thin_score": 50,
    },
    "keywords": {
        "missing_penalty": 20,
        "none_defined_score": 50,
    },
}

# Inclusive lower bounds, checked top to bottom. Anything below the last is an F.
GRADES = [
    (90, "A"),
    (80, "B"),
    (70, "C"),
    (60, "D"),
]
FAILING_GRADE = "F"

# Reported for interface compatibility only, never part of the grade.
PLACEHOLDER_SCORES = {
    "heading_structure_quality": 100,
    "slug_readability_score": 100,
    "social_tags_score": 100,
    "external_link_count": 0,
    "internal_link_count": 0,
}

API = {
    "base_url": "https://devian.amwaus.com/",
    "store_path": "api/blog/store_blog_content",
    "update_path": "api/blog/update_blog_content/{id}",
    "author_id": 1,
}

PUBLISH = {
    "blog_path": "/blog/",
    "default_actor": "admin",
    "default_category": "childcare",
    "slug_max_length": 60,
}

ITERATIONS = {
    "default_count": 3,
    "max_count": 10,
    "plateau_patience": 2,
}

OUTPUT = {
    "dir": "output",
    "save_all_versions": True,
}

DEFAULT_MODEL = "claude-sonnet-4-5-20250929"

LOG_FORMAT = "%(asctime)s - %(levelname)s - [%(name)s:%(lineno)d] - %(message)s"

LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def configure_logging(level: str = "WARNING") -> None:
    name = str(level).upper()
    if name not in LOG_LEVELS:
        raise ValueError(f"Unknown log level: {level}")

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(LOG_LEVELS[name])
