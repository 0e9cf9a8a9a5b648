"""
Prompt templates for revising a blog draft against its SEO audit.
"""

from config import AUDIT

SEVERITY_ORDER = {"high": 0, "medium": 1, "low": 2}


def get_revision_prompt(content: str, audit_dict: dict, iteration: int) -> str:
    issues = sorted(audit_dict["issues"], key=lambda i: SEVERITY_ORDER.get(i["severity"], 3))
    issue_lines = [f"- [{i['severity'].upper()}] {i['message']}" for i in issues]

    breakdown = [
        ("Title length", audit_dict["titleLengthScore"]),
        ("Short description", audit_dict["shortDescriptionScore"]),
        ("Image alt text", audit_dict["imageAltCompleteness"]),
        ("Word count", audit_dict["readabilityScore"]),
        ("Keyword presence", audit_dict["keywordPresenceScore"]),
    ]
    title_cfg = AUDIT["title"]
    desc_cfg = AUDIT["short_description"]

    return f"""You are an editor improving a blog post in a content management system before it is published.

## CURRENT SEO GRADE: {audit_dict['overallSEOGrade']} ({audit_dict['estimatedWordCount']} words)

This is revision #{iteration}.

## ISSUES TO FIX (most severe first):

{chr(10).join(issue_lines)}

## SCORE BREAKDOWN:

{chr(10).join(f"- {name}: {value}/100" for name, value in breakdown)}

## CURRENT POST:

```html
{content}
```

## INSTRUCTIONS

Revise the post so that every issue above is resolved. Important rules:

- Keep the YAML frontmatter block and all of its keys; edit values only where an issue requires it
- The title must be {title_cfg['min_length']}-{title_cfg['max_length']} characters
- The short_description must be {desc_cfg['min_length']}-{desc_cfg['max_length']} characters
- Every <img> tag needs a descriptive, non-empty alt attribute
- The body must have at least {AUDIT['word_count']['min_words']} words of real content
- Use each focus keyword naturally in the body text
- The body stays HTML; don't convert it to markdown
- Don't regress on anything that already scores 100

Output ONLY the complete revised post starting with the --- frontmatter delimiter. No additional commentary."""
