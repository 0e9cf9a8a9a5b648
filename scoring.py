"""
SEO Audit Engine for blog post evaluation.

score() turns a ContentDocument into an AuditResult: five sub-scores,
a letter grade and the list of issues found. The scan is textual
(regular expressions over the raw markup), not a DOM parse, so malformed
markup is counted as it literally reads.
"""

import logging
import math
import re
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Union

from config import AUDIT, FAILING_GRADE, GRADES, PLACEHOLDER_SCORES

logger = logging.getLogger(__name__)

IMG_TAG_RE = re.compile(r'<img[^>]+>')
TAG_RE = re.compile(r'<[^>]*>')
# Same character set as the ECMAScript \s class, which differs from str.split().
WHITESPACE_RE = re.compile(
    "[\t\n\v\f\r \u00a0\u1680\u2000-\u200a\u2028\u2029\u202f\u205f\u3000\ufeff]+"
)


def split_list(value) -> list[str]:
    """Normalize a list field: a sequence, a comma-separated string, or one scalar."""
    if value is None or value == "":
        return []
    if isinstance(value, str):
        return [s.strip() for s in value.split(',')]
    if isinstance(value, (list, tuple, set, frozenset)):
        return [str(v) for v in value]
    return [str(value)]


@dataclass(frozen=True)
class SEOFields:
    meta_title: str = ""
    meta_description: str = ""
    canonical_url: str = ""
    keywords: tuple = ()
    og_title: str = ""
    og_description: str = ""
    og_image: str = ""

    def __post_init__(self):
        for name in ("meta_title", "meta_description", "canonical_url",
                     "og_title", "og_description", "og_image"):
            object.__setattr__(self, name, getattr(self, name) or "")
        object.__setattr__(self, "keywords", tuple(split_list(self.keywords)))


@dataclass(frozen=True)
class ContentDocument:
    title: str = ""
    short_description: str = ""
    body: str = ""
    seo: SEOFields = field(default_factory=SEOFields)

    def __post_init__(self):
        object.__setattr__(self, "title", self.title or "")
        object.__setattr__(self, "short_description", self.short_description or "")
        object.__setattr__(self, "body", self.body or "")
        if self.seo is None:
            object.__setattr__(self, "seo", SEOFields())


@dataclass(frozen=True)
class AuditIssue:
    id: str
    severity: str
    message: str

    def to_dict(self) -> dict:
        return {"severity": self.severity, "message": self.message, "id": self.id}


@dataclass(frozen=True)
class ScoreDetail:
    category: str
    score: int
    issues: tuple = ()


@dataclass(frozen=True)
class AuditResult:
    title_length_score: int
    meta_description_score: int
    image_alt_completeness: int
    readability_score: int
    keyword_presence_score: int
    estimated_word_count: int
    overall_seo_grade: str
    issues: tuple = ()
    canonical_url_check: bool = False
    heading_structure_quality: int = PLACEHOLDER_SCORES["heading_structure_quality"]
    slug_readability_score: int = PLACEHOLDER_SCORES["slug_readability_score"]
    social_tags_score: int = PLACEHOLDER_SCORES["social_tags_score"]
    external_link_count: int = PLACEHOLDER_SCORES["external_link_count"]
    internal_link_count: int = PLACEHOLDER_SCORES["internal_link_count"]

    @property
    def short_description_score(self) -> int:
        return self.meta_description_score

    @property
    def word_count_score(self) -> int:
        return self.readability_score

    @property
    def graded_scores(self) -> dict[str, int]:
        return {
            "Title Length": self.title_length_score,
            "Short Description": self.short_description_score,
            "Image Alt Text": self.image_alt_completeness,
            "Word Count": self.readability_score,
            "Keyword Presence": self.keyword_presence_score,
        }

    @property
    def average(self) -> float:
        scores = self.graded_scores.values()
        return sum(scores) / len(scores)

    def to_dict(self) -> dict:
        return {
            "titleLengthScore": self.title_length_score,
            "metaDescriptionScore": self.meta_description_score,
            "imageAltCompleteness": self.image_alt_completeness,
            "estimatedWordCount": self.estimated_word_count,
            "keywordPresenceScore": self.keyword_presence_score,
            "headingStructureQuality": self.heading_structure_quality,
            "slugReadabilityScore": self.slug_readability_score,
            "externalLinkCount": self.external_link_count,
            "internalLinkCount": self.internal_link_count,
            "readabilityScore": self.readability_score,
            "canonicalUrlCheck": self.canonical_url_check,
            "socialTagsScore": self.social_tags_score,
            "shortDescriptionScore": self.short_description_score,
            "overallSEOGrade": self.overall_seo_grade,
            "issues": [i.to_dict() for i in self.issues],
        }

    def summary(self) -> str:
        lines = [
            f"═══ SEO GRADE {self.overall_seo_grade} — AVERAGE: {self.average:.1f}/100 ═══",
            "",
        ]
        for category, value in self.graded_scores.items():
            bar_len = int(value / 5)
            bar = "█" * bar_len + "░" * (20 - bar_len)
            lines.append(f"  {category:<22} {bar} {value}")
        lines.append(f"  {'Estimated words':<22} {self.estimated_word_count}")
        lines.append("")
        if self.issues:
            lines.append(f"  ISSUES ({len(self.issues)}):")
            for issue in self.issues:
                lines.append(f"    [{issue.severity.upper():<6}] {issue.message}")
        else:
            lines.append("  No issues found.")
        return "\n".join(lines)


def document_from_dict(data: Optional[Mapping[str, Any]]) -> ContentDocument:
    """Build a ContentDocument from the editor's loosely-typed blog state.

    Missing or None fields fall back to empty values; unknown keys are ignored.
    """
    data = data or {}
    seo = data.get("seoFields") or {}
    return ContentDocument(
        title=data.get("title") or "",
        short_description=data.get("shortDescription") or "",
        body=data.get("body") or "",
        seo=SEOFields(
            meta_title=seo.get("metaTitle") or "",
            meta_description=seo.get("metaDescription") or "",
            canonical_url=seo.get("canonicalUrl") or "",
            keywords=seo.get("keywords"),
            og_title=seo.get("ogTitle") or "",
            og_description=seo.get("ogDescription") or "",
            og_image=seo.get("ogImage") or "",
        ),
    )


def strip_tags(markup: str) -> str:
    return TAG_RE.sub(' ', markup)


def count_words(text: str) -> int:
    return len([w for w in WHITESPACE_RE.split(text) if w])


def find_image_tags(markup: str) -> list[str]:
    return IMG_TAG_RE.findall(markup)


def has_alt_text(img_tag: str) -> bool:
    # Literal substring tests: alt='' passes, a spaced alt = "x" does not.
    return 'alt=' in img_tag and 'alt=""' not in img_tag


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def grade_for(average: float) -> str:
    for cutoff, grade in GRADES:
        if average >= cutoff:
            return grade
    return FAILING_GRADE


def score_title_length(title: str) -> ScoreDetail:
    cfg = AUDIT["title"]
    length = len(title)
    if length < cfg["min_length"]:
        return ScoreDetail("Title Length", cfg["short_score"],
                           (AuditIssue("title-short", "high", "Title is too short."),))
    if length > cfg["max_length"]:
        return ScoreDetail("Title Length", cfg["long_score"],
                           (AuditIssue("title-long", "medium", "Title is too long, might get truncated."),))
    return ScoreDetail("Title Length", 100)


def score_short_description(description: str) -> ScoreDetail:
    cfg = AUDIT["short_description"]
    length = len(description)
    if length < cfg["min_length"]:
        return ScoreDetail("Short Description", cfg["short_score"],
                           (AuditIssue("desc-short", "medium", "Short description is too thin."),))
    if length > cfg["max_length"]:
        return ScoreDetail("Short Description", cfg["long_score"],
                           (AuditIssue("desc-long", "low",
                                       f"Short description exceeds {cfg['max_length']} chars."),))
    return ScoreDetail("Short Description", 100)


def score_image_alt_text(body: str) -> ScoreDetail:
    img_tags = find_image_tags(body)
    if not img_tags:
        return ScoreDetail("Image Alt Text", 100)
    with_alt = [tag for tag in img_tags if has_alt_text(tag)]
    score = _round_half_up((len(with_alt) / len(img_tags)) * 100)
    if score < 100:
        missing = len(img_tags) - len(with_alt)
        return ScoreDetail("Image Alt Text", score,
                           (AuditIssue("img-alt", "high", f"{missing} images missing alt text."),))
    return ScoreDetail("Image Alt Text", score)


def score_word_count(word_count: int) -> ScoreDetail:
    cfg = AUDIT["word_count"]
    if word_count < cfg["min_words"]:
        return ScoreDetail("Word Count", cfg["thin_score"], (AuditIssue(
            "word-count", "high",
            f"Content is too short for SEO ranking (aim for {cfg['min_words']}+ words).",
        ),))
    return ScoreDetail("Word Count", 100)


def score_keyword_presence(plain_text: str, keywords: tuple) -> ScoreDetail:
    cfg = AUDIT["keywords"]
    if not keywords:
        return ScoreDetail("Keyword Presence", cfg["none_defined_score"],
                           (AuditIssue("no-keywords", "low", "No focus keywords defined."),))
    text_lower = plain_text.lower()
    missing = [kw for kw in keywords if kw.lower() not in text_lower]
    if not missing:
        return ScoreDetail("Keyword Presence", 100)
    score = max(0, 100 - cfg["missing_penalty"] * len(missing))
    return ScoreDetail("Keyword Presence", score, (AuditIssue(
        "keywords", "medium", f"Missing keywords in body: {', '.join(missing)}",
    ),))


def score(document: Union[ContentDocument, Mapping[str, Any], None]) -> AuditResult:
    if not isinstance(document, ContentDocument):
        document = document_from_dict(document)

    plain_text = strip_tags(document.body)
    word_count = count_words(plain_text)

    title = score_title_length(document.title)
    description = score_short_description(document.short_description)
    images = score_image_alt_text(document.body)
    words = score_word_count(word_count)
    keywords = score_keyword_presence(plain_text, document.seo.keywords)

    details = (title, description, images, words, keywords)
    average = sum(d.score for d in details) / len(details)
    issues = tuple(issue for d in details for issue in d.issues)

    result = AuditResult(
        title_length_score=title.score,
        meta_description_score=description.score,
        image_alt_completeness=images.score,
        readability_score=words.score,
        keyword_presence_score=keywords.score,
        estimated_word_count=word_count,
        overall_seo_grade=grade_for(average),
        issues=issues,
        canonical_url_check=bool(document.seo.canonical_url),
    )
    logger.debug("Audit grade %s (average %.1f, %d issues, %d words)",
                 result.overall_seo_grade, average, len(issues), word_count)
    return result
