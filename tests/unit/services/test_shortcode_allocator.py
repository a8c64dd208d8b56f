"""Unit tests for the ShortcodeAllocator

Test coverage includes:
    1. Custom shortcodes
       - Free candidates are returned unchanged, taken ones raise ShortURLAlreadyExistsError.
    2. Generated shortcodes
       - Default length, bounded retries on collision, ShortcodeAllocationError once exhausted.
"""

from datetime import timedelta
from unittest.mock import MagicMock

import pytest

from urlshortener.dao import LinkRegistry
from urlshortener.dao.exceptions import ShortURLAlreadyExistsError, ShortcodeAllocationError
from urlshortener.dao.memory import KeyValueMemoryStore
from urlshortener.services import ShortcodeAllocator
from urlshortener.services import shortcode_allocator


# -------------------------------
# Fixtures
# -------------------------------


@pytest.fixture
def links():
    return LinkRegistry(KeyValueMemoryStore())


@pytest.fixture
def allocator(links):
    return ShortcodeAllocator(links)


@pytest.fixture
def generated(monkeypatch):
    """Replace the random generator with a predictable sequence of shortcodes."""
    generator = MagicMock(side_effect=['taken1', 'taken2', 'free01'])
    monkeypatch.setattr(shortcode_allocator, 'generate_shortcode', generator)
    return generator


# -------------------------------
# 1. Custom shortcodes
# -------------------------------


def test_allocate_free_candidate(allocator):
    assert allocator.allocate('mylink') == 'mylink'


def test_allocate_taken_candidate(allocator, links):
    links.create('mylink', 'https://example.com', timedelta(hours=1))

    with pytest.raises(ShortURLAlreadyExistsError, match="Short URL with code 'mylink' already exists."):
        allocator.allocate('mylink')


def test_taken_candidate_is_never_retried(links, generated):
    links.create('mylink', 'https://example.com', timedelta(hours=1))

    with pytest.raises(ShortURLAlreadyExistsError):
        ShortcodeAllocator(links).allocate('mylink')
    generated.assert_not_called()


# -------------------------------
# 2. Generated shortcodes
# -------------------------------


@pytest.mark.parametrize('candidate', [None, ''])
def test_allocate_generated(allocator, candidate):
    shortcode = allocator.allocate(candidate)

    assert len(shortcode) == 6
    assert shortcode.isalnum()


def test_allocate_generated_with_custom_length(links):
    assert len(ShortcodeAllocator(links, length=9).allocate()) == 9


def test_allocate_retries_on_collision(links, generated):
    links.create('taken1', 'https://example.com/1', timedelta(hours=1))
    links.create('taken2', 'https://example.com/2', timedelta(hours=1))

    assert ShortcodeAllocator(links, max_attempts=3).allocate() == 'free01'
    assert generated.call_count == 3
    generated.assert_called_with(6)


def test_allocate_gives_up_after_max_attempts(links, generated):
    links.create('taken1', 'https://example.com/1', timedelta(hours=1))
    links.create('taken2', 'https://example.com/2', timedelta(hours=1))

    with pytest.raises(ShortcodeAllocationError, match='Could not allocate a free shortcode in 2 attempt'):
        ShortcodeAllocator(links, max_attempts=2).allocate()


def test_single_attempt_fails_on_first_collision(links, generated):
    links.create('taken1', 'https://example.com/1', timedelta(hours=1))

    with pytest.raises(ShortcodeAllocationError):
        ShortcodeAllocator(links, max_attempts=1).allocate()
    generated.assert_called_once()


def test_invalid_max_attempts(links):
    with pytest.raises(ValueError):
        ShortcodeAllocator(links, max_attempts=0)
