#!/usr/bin/env python3
"""
Prepares blog posts for the content API: loads a post file (YAML frontmatter
plus HTML body), audits it, and builds the publish payload with its audit
log entry and the backend field mapping.

Usage:
    python publish.py --input drafts/summer-safety.html
    python publish.py --input drafts/summer-safety.html --min-grade B --output payload.json
"""

import argparse
import dataclasses
import json
import logging
import re
import sys
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import yaml

from config import API, PUBLISH, GRADES, FAILING_GRADE, LOG_LEVELS, configure_logging
from scoring import AuditResult, ContentDocument, SEOFields, score, split_list

logger = logging.getLogger(__name__)

DRAFT = "DRAFT"
PUBLISHED = "PUBLISHED"

AUDIT_ACTIONS = ("CREATE_DRAFT", "UPDATE_DRAFT", "PUBLISH", "PUBLISH_FAILED", "DELETE")


class PostFormatError(ValueError):
    """Raised when a post file cannot be read as frontmatter + body."""


@dataclass
class BlogPost:
    title: str = ""
    short_description: str = ""
    body: str = ""
    slug: str = ""
    category: str = PUBLISH["default_category"]
    category_id: str = ""
    tags: list[str] = field(default_factory=list)
    featured_image: Optional[str] = None
    status: str = DRAFT
    published_at: Optional[str] = None
    seo: SEOFields = field(default_factory=SEOFields)
    id: Optional[str] = None

    def to_document(self) -> ContentDocument:
        return ContentDocument(
            title=self.title,
            short_description=self.short_description,
            body=self.body,
            seo=self.seo,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "category": self.category,
            "categoryId": self.category_id,
            "shortDescription": self.short_description,
            "slug": self.slug,
            "body": self.body,
            "tags": list(self.tags),
            "featuredImage": self.featured_image,
            "status": self.status,
            "publishedAt": self.published_at,
            "seoFields": {
                "metaTitle": self.seo.meta_title,
                "metaDescription": self.seo.meta_description,
                "canonicalUrl": self.seo.canonical_url,
                "keywords": list(self.seo.keywords),
                "ogTitle": self.seo.og_title,
                "ogDescription": self.seo.og_description,
                "ogImage": self.seo.og_image,
            },
        }


@dataclass
class ImageMeta:
    name: str
    mime: str
    base64: str
    width: int
    height: int
    alt: str = ""
    caption: Optional[str] = None

    def to_dict(self) -> dict:
        data = {
            "name": self.name, "mime": self.mime, "base64": self.base64,
            "width": self.width, "height": self.height, "alt": self.alt,
        }
        if self.caption is not None:
            data["caption"] = self.caption
        return data


@dataclass
class AuditLogEntry:
    action: str
    actor: str
    timestamp: int
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    diff: Optional[dict] = None
    seo_audit: Optional[AuditResult] = None
    live_url: Optional[str] = None

    def __post_init__(self):
        if self.action not in AUDIT_ACTIONS:
            raise ValueError(f"Unknown audit action: {self.action}")

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "action": self.action,
            "actor": self.actor,
            "timestamp": self.timestamp,
        }
        if self.diff is not None:
            data["diff"] = self.diff
        if self.seo_audit is not None:
            data["seoAudit"] = self.seo_audit.to_dict()
        if self.live_url is not None:
            data["liveUrl"] = self.live_url
        return data


@dataclass
class PublishPayload:
    blog: BlogPost
    seo_audit: AuditResult
    images: list[ImageMeta]
    audit_log: AuditLogEntry

    def to_dict(self) -> dict:
        return {
            "blog": self.blog.to_dict(),
            "seoAudit": self.seo_audit.to_dict(),
            "images": [img.to_dict() for img in self.images],
            "auditLog": self.audit_log.to_dict(),
            "endpoint": store_endpoint(self.blog),
            "backend": to_backend_payload(self.blog),
        }


def parse_frontmatter(content: str) -> tuple[dict, str]:
    fm_match = re.match(r'^---\s*\n(.*?)\n---\s*\n(.*)$', content, re.DOTALL)
    if not fm_match:
        raise PostFormatError("No YAML frontmatter found")
    try:
        frontmatter = yaml.safe_load(fm_match.group(1)) or {}
    except yaml.YAMLError as e:
        raise PostFormatError(f"Invalid YAML frontmatter: {e}") from e
    if not isinstance(frontmatter, dict):
        raise PostFormatError("Frontmatter must be a mapping")
    return frontmatter, fm_match.group(2)


def slugify(text: str, max_length: int = PUBLISH["slug_max_length"]) -> str:
    slug = re.sub(r'[^a-z0-9]+', '-', text.lower()).strip('-')
    if len(slug) > max_length:
        slug = slug[:max_length].rsplit('-', 1)[0]
    return slug


def _text(value) -> str:
    return "" if value is None else str(value)


def post_from_frontmatter(frontmatter: dict, body: str) -> BlogPost:
    title = _text(frontmatter.get("title"))
    slug = _text(frontmatter.get("slug")) or slugify(title)
    status = _text(frontmatter.get("status")).upper() or DRAFT
    return BlogPost(
        id=_text(frontmatter.get("id")) or None,
        title=title,
        short_description=_text(frontmatter.get("short_description") or frontmatter.get("description")),
        body=body.strip(),
        slug=slug,
        category=_text(frontmatter.get("category")) or PUBLISH["default_category"],
        category_id=_text(frontmatter.get("category_id")),
        tags=split_list(frontmatter.get("tags")),
        featured_image=frontmatter.get("featured_image") or None,
        status=PUBLISHED if status == PUBLISHED else DRAFT,
        published_at=_text(frontmatter.get("published_at")) or None,
        seo=SEOFields(
            meta_title=_text(frontmatter.get("meta_title")),
            meta_description=_text(frontmatter.get("meta_description")),
            canonical_url=_text(frontmatter.get("canonical_url")),
            keywords=tuple(split_list(frontmatter.get("keywords"))),
            og_title=_text(frontmatter.get("og_title")),
            og_description=_text(frontmatter.get("og_description")),
            og_image=_text(frontmatter.get("og_image")),
        ),
    )


def load_post(path: Path) -> BlogPost:
    frontmatter, body = parse_frontmatter(Path(path).read_text())
    return post_from_frontmatter(frontmatter, body)


def blog_from_api(record: dict) -> BlogPost:
    """Map a content API record (snake_case, loosely typed) to a BlogPost."""
    image = record.get("blog_img")
    if image and not str(image).startswith("http"):
        image = f"{API['base_url']}{image}"
    status = record.get("status")
    published = status is True or status in ("true", PUBLISHED)
    return BlogPost(
        id=_text(record.get("id")) or None,
        title=_text(record.get("title")),
        category_id=_text(record.get("category_id")),
        category=_text(record.get("category_name") or record.get("category")) or "Uncategorized",
        short_description=_text(record.get("short_description")),
        slug=_text(record.get("slug")),
        body=_text(record.get("content")),
        tags=split_list(record.get("tags")),
        featured_image=image or None,
        status=PUBLISHED if published else DRAFT,
        published_at=record.get("created_at") or record.get("Timestamp") or None,
        seo=SEOFields(
            meta_title=_text(record.get("meta_title")),
            meta_description=_text(record.get("meta_description")),
            canonical_url=_text(record.get("canonical_url")),
            keywords=tuple(split_list(record.get("keywords"))),
            og_title=_text(record.get("og_title")),
            og_description=_text(record.get("og_description")),
            og_image=_text(record.get("og_image")),
        ),
    )


def store_endpoint(post: BlogPost) -> str:
    if post.id:
        return API["update_path"].format(id=post.id)
    return API["store_path"]


def to_backend_payload(post: BlogPost) -> dict:
    return {
        "title": post.title,
        "short_description": post.short_description,
        "meta_title": post.seo.meta_title,
        "meta_description": post.seo.meta_description,
        "content": post.body,
        "blog_img": post.featured_image,
        "slug": post.slug,
        "author_id": API["author_id"],
        "category_id": post.category_id,
        "keywords": ",".join(post.seo.keywords),
        "status": "true" if post.status == PUBLISHED else "false",
    }


def build_publish_payload(
    post: BlogPost,
    images: Optional[list[ImageMeta]] = None,
    actor: str = PUBLISH["default_actor"],
    now: Optional[datetime] = None,
) -> PublishPayload:
    now = now or datetime.now(timezone.utc)
    published = dataclasses.replace(
        post,
        status=PUBLISHED,
        published_at=now.isoformat(),
        tags=list(post.tags),
    )
    audit = score(published.to_document())
    entry = AuditLogEntry(
        action="PUBLISH",
        actor=actor,
        timestamp=int(now.timestamp() * 1000),
        live_url=f"{PUBLISH['blog_path']}{post.slug}",
        seo_audit=audit,
    )
    logger.info("Prepared publish payload for '%s' (grade %s)", post.slug, audit.overall_seo_grade)
    return PublishPayload(blog=published, seo_audit=audit, images=list(images or []), audit_log=entry)


def grade_rank(grade: str) -> int:
    """0 for A, increasing toward F."""
    order = [g for _, g in GRADES] + [FAILING_GRADE]
    return order.index(grade.upper())


def main():
    parser = argparse.ArgumentParser(description="Audit a blog post and build its publish payload")
    parser.add_argument("--input", required=True, help="Post file: YAML frontmatter followed by the HTML body")
    parser.add_argument("--slug", default=None, help="Custom URL slug (generated from the title if omitted)")
    parser.add_argument("--actor", default=PUBLISH["default_actor"], help="Actor recorded in the audit log")
    parser.add_argument("--output", default=None, help="Payload JSON path (default: <input>.payload.json)")
    parser.add_argument("--min-grade", default=None, choices=[g for _, g in GRADES] + [FAILING_GRADE],
                        help="Refuse to write the payload when the SEO grade is worse than this")
    parser.add_argument("--dry-run", action="store_true", help="Print the payload to stdout instead of writing it")
    parser.add_argument("--log-level", default="WARNING", type=str.upper, choices=list(LOG_LEVELS),
                        help="Logging level (default: WARNING)")

    args = parser.parse_args()
    configure_logging(args.log_level)

    input_path = Path(args.input)
    if not input_path.exists():
        print(f"Error: {input_path} not found")
        sys.exit(1)

    try:
        post = load_post(input_path)
    except PostFormatError as e:
        print(f"Error: {e}")
        sys.exit(1)

    if args.slug:
        post.slug = args.slug

    payload = build_publish_payload(post, actor=args.actor)
    print(payload.seo_audit.summary())

    if args.min_grade and grade_rank(payload.seo_audit.overall_seo_grade) > grade_rank(args.min_grade):
        print(f"\nError: grade {payload.seo_audit.overall_seo_grade} is below the required {args.min_grade}")
        sys.exit(1)

    payload_json = json.dumps(payload.to_dict(), indent=2)
    if args.dry_run:
        print(payload_json)
        return

    output_file = Path(args.output) if args.output else input_path.with_suffix(".payload.json")
    output_file.write_text(payload_json)
    print(f"\nCreated: {output_file}")
    print(f"Slug:     {post.slug}")
    print(f"Endpoint: {API['base_url']}{store_endpoint(payload.blog)}")


if __name__ == "__main__":
    main()
