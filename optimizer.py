#!/usr/bin/env python3
"""
Draft Optimizer — asks Claude to revise a post until its SEO audit is clean.

Usage:
    python optimizer.py --input drafts/summer-safety.html
    python optimizer.py --input drafts/summer-safety.html --iterations 5 --output-dir output
"""

import argparse
import json
import logging
import sys
import time
from datetime import datetime
from pathlib import Path

import anthropic

from config import DEFAULT_MODEL, ITERATIONS, LOG_LEVELS, OUTPUT, configure_logging
from prompts import get_revision_prompt
from publish import PostFormatError, parse_frontmatter, post_from_frontmatter
from scoring import score

logger = logging.getLogger(__name__)


def call_claude(client: anthropic.Anthropic, prompt: str, model: str) -> str:
    message = client.messages.create(
        model=model,
        max_tokens=8192,
        messages=[{"role": "user", "content": prompt}],
    )
    return message.content[0].text


def extract_post(response: str) -> str:
    stripped = response.strip()
    if stripped.startswith("```"):
        _, newline, rest = stripped.partition("\n")
        if newline and "```" in rest:
            return rest[:rest.rindex("```")].strip()
    return stripped


def audit_content(content: str):
    frontmatter, body = parse_frontmatter(content)
    post = post_from_frontmatter(frontmatter, body)
    return post, score(post.to_document())


def run_optimization(
    input_path,
    iterations: int | None = None,
    model: str = DEFAULT_MODEL,
    output_dir: str | None = None,
    client: anthropic.Anthropic | None = None,
    verbose: bool = True,
) -> dict:
    input_path = Path(input_path)
    content = input_path.read_text()
    post, audit = audit_content(content)

    if iterations is None:
        iterations = ITERATIONS["default_count"]
    iterations = min(iterations, ITERATIONS["max_count"])

    run_dir = Path(output_dir or OUTPUT["dir"]) / (post.slug or input_path.stem)
    run_dir.mkdir(parents=True, exist_ok=True)

    if client is None:
        client = anthropic.Anthropic()

    if verbose:
        print(f"\n{'='*70}")
        print(f"  DRAFT OPTIMIZER")
        print(f"{'='*70}")
        print(f"  Post:       {post.title or input_path.name}")
        print(f"  Model:      {model}")
        print(f"  Iterations: {iterations}")
        print(f"  Output:     {run_dir}")
        print(f"{'='*70}\n")
        print(f"{audit.summary()}\n")

    if OUTPUT["save_all_versions"]:
        (run_dir / "v0.html").write_text(content)
        (run_dir / "v0_audit.json").write_text(json.dumps(audit.to_dict(), indent=2))

    history = [{
        "iteration": 0, "grade": audit.overall_seo_grade, "average": audit.average,
        "issues": [i.id for i in audit.issues],
    }]

    best_content = content
    best_audit = audit
    best_iteration = 0
    plateau_count = 0

    for i in range(1, iterations + 1):
        if not audit.issues:
            if verbose:
                print("  ✓ No issues left. Stopping.\n")
            break

        if verbose:
            print(f"▶ Revision {i}/{iterations}...")

        prompt = get_revision_prompt(content, audit.to_dict(), iteration=i)
        start_time = time.time()
        response = call_claude(client, prompt, model)
        iter_time = time.time() - start_time

        new_content = extract_post(response)
        try:
            _, new_audit = audit_content(new_content)
        except PostFormatError as e:
            logger.warning("Revision %d is not a valid post: %s", i, e)
            history.append({"iteration": i, "error": str(e), "generation_time": iter_time})
            plateau_count += 1
            if plateau_count >= ITERATIONS["plateau_patience"]:
                break
            continue

        improvement = new_audit.average - audit.average
        if verbose:
            print(f"  Completed in {iter_time:.1f}s")
            print(f"\n{new_audit.summary()}")
            delta = "↑" if improvement > 0 else "↓" if improvement < 0 else "→"
            print(f"\n  {delta} Change from last version: {improvement:+.1f} points\n")

        if OUTPUT["save_all_versions"]:
            (run_dir / f"v{i}.html").write_text(new_content)
            (run_dir / f"v{i}_audit.json").write_text(json.dumps(new_audit.to_dict(), indent=2))

        history.append({
            "iteration": i, "grade": new_audit.overall_seo_grade, "average": new_audit.average,
            "issues": [issue.id for issue in new_audit.issues],
            "generation_time": iter_time, "improvement": improvement,
        })

        if new_audit.average > best_audit.average:
            best_content = new_content
            best_audit = new_audit
            best_iteration = i
            plateau_count = 0
        else:
            plateau_count += 1

        content = new_content
        audit = new_audit

        if plateau_count >= ITERATIONS["plateau_patience"]:
            if verbose:
                print(f"  ⚠ Plateau detected — no improvement for {plateau_count} revisions. Stopping.\n")
            break

    final_path = run_dir / "FINAL.html"
    final_path.write_text(best_content)

    summary = {
        "input": str(input_path), "model": model,
        "best_grade": best_audit.overall_seo_grade, "best_average": best_audit.average,
        "best_iteration": best_iteration,
        "total_iterations": len(history) - 1, "history": history,
        "timestamp": datetime.now().isoformat(),
    }
    (run_dir / "run_summary.json").write_text(json.dumps(summary, indent=2))
    logger.info("Optimization of %s finished: grade %s at v%d",
                input_path, best_audit.overall_seo_grade, best_iteration)

    if verbose:
        print(f"\n{'='*70}")
        print(f"  OPTIMIZATION COMPLETE")
        print(f"{'='*70}")
        print(f"  Best grade:     {best_audit.overall_seo_grade} ({best_audit.average:.1f}/100)")
        print(f"  Best version:   v{best_iteration}")
        print(f"  Output:         {final_path}")
        print(f"{'='*70}\n")

    return {
        "best_content": best_content,
        "best_grade": best_audit.overall_seo_grade,
        "best_average": best_audit.average,
        "best_iteration": best_iteration,
        "iterations_run": len(history) - 1,
        "history": history,
        "output_dir": str(run_dir), "final_path": str(final_path),
    }


def main():
    parser = argparse.ArgumentParser(description="Revise a blog draft until its SEO audit is clean")
    parser.add_argument("--input", required=True, help="Post file: YAML frontmatter followed by the HTML body")
    parser.add_argument("--iterations", type=int, default=None,
                        help=f"Revision iterations (default: {ITERATIONS['default_count']})")
    parser.add_argument("--model", default=DEFAULT_MODEL, help="Anthropic model")
    parser.add_argument("--output-dir", default=None, help=f"Output directory (default: {OUTPUT['dir']})")
    parser.add_argument("--quiet", action="store_true", help="Suppress verbose output")
    parser.add_argument("--log-level", default="WARNING", type=str.upper, choices=list(LOG_LEVELS),
                        help="Logging level (default: WARNING)")

    args = parser.parse_args()
    configure_logging(args.log_level)

    if not Path(args.input).exists():
        print(f"Error: {args.input} not found")
        sys.exit(1)

    try:
        run_optimization(
            input_path=args.input, iterations=args.iterations,
            model=args.model, output_dir=args.output_dir, verbose=not args.quiet,
        )
    except PostFormatError as e:
        print(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
