"""Pytest configuration and fixtures for pagelet tests."""

import pytest

from pagelet import Environment, get_default_environment


@pytest.fixture
def env():
    """Create a basic pagelet Environment."""
    return Environment()


@pytest.fixture
def env_no_autoescape():
    """Create an Environment that does not escape plain output."""
    return Environment(autoescape=False)


@pytest.fixture
def env_strict():
    """Create an Environment that re-raises host function failures."""
    return Environment(strict=True)


@pytest.fixture
def default_env():
    """The module-level default environment, restored after the test."""
    environment = get_default_environment()
    saved = environment.functions.copy()
    yield environment
    environment._functions = saved
    environment.clear_cache()


@pytest.fixture
def data():
    """A search-result record like the ones pagelet is used to render."""
    return {
        "url": "/docs/getting-started/",
        "title": "Getting Started",
        "excerpt": "Pagefind is a <mark>search</mark> library",
        "image": "/logo.png",
        "image_alt": "Logo",
        "author": "bglw",
        "tags": ["search", "static-site", "tutorial"],
        "nested": {"value": "deep", "level2": {"level3": "very deep"}},
        "sub_results": [
            {"url": "/docs/1/", "title": "Section 1", "excerpt": "First <mark>match</mark>"},
            {"url": "/docs/2/", "title": "Section 2", "excerpt": "Second <mark>match</mark>"},
            {"url": "/docs/3/", "title": "Section 3", "excerpt": "Third <mark>match</mark>"},
            {"url": "/docs/4/", "title": "Section 4", "excerpt": "Fourth <mark>match</mark>"},
        ],
        "word_count": 1250,
        "zero": 0,
        "empty_string": "",
        "empty_array": [],
        "empty_object": {},
    }


def assert_template_equal(template_result: str, expected: str) -> None:
    """Assert template result equals expected, normalizing whitespace.

    Args:
        template_result: The actual template rendering result.
        expected: The expected output.
    """
    actual_normalized = " ".join(template_result.split())
    expected_normalized = " ".join(expected.split())
    assert actual_normalized == expected_normalized, (
        f"Template output mismatch:\n"
        f"  Actual: {actual_normalized!r}\n"
        f"  Expected: {expected_normalized!r}"
    )
