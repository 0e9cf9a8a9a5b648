"""
Shared fixtures for the audit engine tests.
"""

import pytest

from helpers import post_text


@pytest.fixture
def clean_body() -> str:
    return "<p>" + " ".join(["toddlers need summer safety"] * 80) + "</p>"


@pytest.fixture
def clean_post(clean_body) -> str:
    return post_text(body=clean_body)


@pytest.fixture
def thin_post() -> str:
    return post_text(title="Tips", description="Too short.", body="<p>Just a few words.</p>",
                     keywords="toddlers")
