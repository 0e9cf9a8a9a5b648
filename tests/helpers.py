"""
Builders for post files and body text used across the test modules.
"""

GOOD_TITLE = "Summer Safety Tips for Toddlers"
GOOD_DESCRIPTION = "A practical guide to keeping toddlers safe and cool during the hottest summer months."


def words(n: int, word: str = "word") -> str:
    return " ".join(f"{word}{i}" for i in range(n))


def post_text(title=GOOD_TITLE, description=GOOD_DESCRIPTION, body="<p>Hello</p>",
              keywords="toddlers, summer", extra: str = "") -> str:
    return (
        "---\n"
        f"title: {title}\n"
        f"short_description: {description}\n"
        f"keywords: {keywords}\n"
        "category: parenting\n"
        f"{extra}"
        "---\n"
        f"{body}\n"
    )
