#!/usr/bin/env python3
"""
Batch runner — audit every post file in a directory.

Usage:
    python batch.py drafts/
    python batch.py drafts/ --pattern "*.md" --report-dir output
"""

import argparse
import json
import logging
import sys
from datetime import datetime
from pathlib import Path

from config import LOG_LEVELS, OUTPUT, configure_logging
from publish import load_post
from scoring import score

logger = logging.getLogger(__name__)


def audit_directory(directory, pattern: str = "*.html") -> list[dict]:
    results = []
    for path in sorted(Path(directory).glob(pattern)):
        try:
            post = load_post(path)
            audit = score(post.to_document())
        except Exception as e:
            logger.warning("Could not audit %s: %s", path, e)
            results.append({"file": str(path), "status": "error", "error": str(e)})
            continue
        results.append({
            "file": str(path), "status": "success",
            "slug": post.slug, "title": post.title,
            "grade": audit.overall_seo_grade, "average": audit.average,
            "issues": len(audit.issues),
            "audit": audit.to_dict(),
        })
    return results


def main():
    parser = argparse.ArgumentParser(description="Batch SEO audit of blog post files")
    parser.add_argument("directory", help="Directory containing post files")
    parser.add_argument("--pattern", default="*.html", help="Glob pattern for post files (default: *.html)")
    parser.add_argument("--report-dir", default=OUTPUT["dir"], help=f"Report directory (default: {OUTPUT['dir']})")
    parser.add_argument("--log-level", default="WARNING", type=str.upper, choices=list(LOG_LEVELS),
                        help="Logging level (default: WARNING)")

    args = parser.parse_args()
    configure_logging(args.log_level)

    if not Path(args.directory).is_dir():
        print(f"Error: {args.directory} is not a directory")
        sys.exit(1)

    results = audit_directory(args.directory, args.pattern)
    if not results:
        print(f"No files matching {args.pattern} in {args.directory}")
        sys.exit(1)

    print(f"\n{'='*70}")
    print(f"  BATCH SEO AUDIT")
    print(f"{'='*70}\n")
    success = [r for r in results if r["status"] == "success"]
    print(f"  Audited: {len(success)}/{len(results)}")
    if success:
        avg_score = sum(r["average"] for r in success) / len(success)
        print(f"  Avg score: {avg_score:.1f}/100\n")
        for r in sorted(success, key=lambda x: x["average"], reverse=True):
            bar_len = int(r["average"] / 2.5)
            bar = "█" * bar_len + "░" * (40 - bar_len)
            name = r["slug"] or Path(r["file"]).stem
            print(f"  {name[:30]:<30} {bar} {r['grade']} {r['average']:.1f} ({r['issues']} issues)")
    for r in results:
        if r["status"] == "error":
            print(f"  ✗ {r['file']}: {r['error']}")

    report_path = Path(args.report_dir) / f"batch_report_{datetime.now().strftime('%Y%m%d_%H%M%S')}.json"
    report_path.parent.mkdir(parents=True, exist_ok=True)
    report_path.write_text(json.dumps(results, indent=2))
    print(f"\n  Report: {report_path}")
    print(f"{'='*70}\n")


if __name__ == "__main__":
    main()
