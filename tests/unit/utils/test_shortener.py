"""Unit tests for the shortcode generators in shortener.py.

This test suite verifies the correctness and robustness of the random base62
shortcode helpers used by the in-memory registry.

Test coverage includes:

1. Basic functionality
   - Ensures generate_shortcode() returns a string of the expected length.

2. Determinism
   - The same seeded rng must always produce identical output.

3. Output format
   - All characters must belong to the base62 alphabet.

4. Distribution sanity
   - Every alphabet symbol shows up over many draws.

5. Error handling
   - Invalid length values raise TypeError / ValueError.

6. generate_unique_shortcode()
   - 6.1. Skips reserved candidates.
   - 6.2. Raises GenerationExhaustedError after max_attempts draws.
   - 6.3. Rejects a non-positive attempt budget.

7. Performance sanity
   - Generation is cheap enough not to bottleneck request handling.
"""

import time
import random
import string
from unittest.mock import MagicMock

import pytest

from urlshortener.utils import generate_shortcode, generate_unique_shortcode
from urlshortener.dao.exceptions import GenerationExhaustedError


BASE62 = set(string.ascii_letters + string.digits)


# -------------------------------
# 1. Basic functionality and type
# -------------------------------

def test_generate_shortcode_returns_string():
    """Ensure generate_shortcode() returns a string of the default length."""
    result = generate_shortcode()
    assert isinstance(result, str)
    assert len(result) == 6


@pytest.mark.parametrize('length', [1, 6, 10, 20])
def test_generate_shortcode_respects_length(length):
    """Ensure the 'length' argument is respected exactly."""
    assert len(generate_shortcode(length=length)) == length


# -------------------------------
# 2. Determinism
# -------------------------------

def test_generate_shortcode_is_deterministic_with_seed():
    """Same seed should always produce the same shortcode sequence."""
    rng1, rng2 = random.Random(42), random.Random(42)
    assert [generate_shortcode(rng1) for _ in range(5)] == [generate_shortcode(rng2) for _ in range(5)]


def test_generate_shortcode_differs_across_seeds():
    """Different seeds produce different shortcodes."""
    assert generate_shortcode(random.Random(1), length=12) != generate_shortcode(random.Random(2), length=12)


# -------------------------------
# 3. Output format validation
# -------------------------------

def test_generate_shortcode_is_base62_safe():
    """Ensure output contains only base62-safe characters."""
    rng = random.Random(0)
    for _ in range(200):
        assert set(generate_shortcode(rng)) <= BASE62


# -------------------------------
# 4. Distribution sanity
# -------------------------------

def test_generate_shortcode_covers_alphabet():
    """Every base62 symbol is drawn at least once over many draws."""
    rng = random.Random(0)
    seen = set()
    for _ in range(2000):
        seen.update(generate_shortcode(rng))
    assert seen == BASE62


# -------------------------------
# 5. Error handling
# -------------------------------

@pytest.mark.parametrize('length', [None, '6', 6.0, True])
def test_invalid_length_type_raises_error(length):
    """Non-integer lengths raise TypeError."""
    with pytest.raises(TypeError):
        generate_shortcode(length=length)


@pytest.mark.parametrize('length', [0, -1])
def test_invalid_length_value_raises_error(length):
    """Non-positive lengths raise ValueError."""
    with pytest.raises(ValueError):
        generate_shortcode(length=length)


# -------------------------------
# 6.1. Unique generation skips reserved codes
# -------------------------------

def test_generate_unique_shortcode_skips_reserved():
    """Reserved candidates are rejected and a fresh one is drawn."""
    rng = MagicMock()
    rng.choice.side_effect = list('aaa' 'bbb' 'ccc')
    reserved = {'aaa', 'bbb'}

    result = generate_unique_shortcode(reserved.__contains__, rng=rng, length=3)

    assert result == 'ccc'
    assert rng.choice.call_count == 9


def test_generate_unique_shortcode_first_draw_free():
    """With nothing reserved, the first draw is returned."""
    expected = generate_shortcode(random.Random(5))
    assert generate_unique_shortcode(lambda code: False, rng=random.Random(5)) == expected


# -------------------------------
# 6.2. Exhaustion
# -------------------------------

def test_generate_unique_shortcode_exhausted():
    """GenerationExhaustedError is raised once the attempt budget is spent."""
    is_reserved = MagicMock(return_value=True)

    with pytest.raises(GenerationExhaustedError) as exc_info:
        generate_unique_shortcode(is_reserved, rng=random.Random(0), max_attempts=25)

    assert exc_info.value.attempts == 25
    assert exc_info.value.error_code == 'GENERATION_EXHAUSTED'
    assert is_reserved.call_count == 25


def test_generate_unique_shortcode_saturated_space():
    """A fully reserved code space of length 1 exhausts instead of looping forever."""
    reserved = BASE62
    with pytest.raises(GenerationExhaustedError):
        generate_unique_shortcode(reserved.__contains__, rng=random.Random(0), length=1, max_attempts=500)


# -------------------------------
# 6.3. Attempt budget validation
# -------------------------------

@pytest.mark.parametrize('max_attempts', [0, -3])
def test_generate_unique_shortcode_invalid_attempts(max_attempts):
    with pytest.raises(ValueError):
        generate_unique_shortcode(lambda code: False, max_attempts=max_attempts)


# -------------------------------
# 7. Performance sanity check
# -------------------------------

@pytest.mark.parametrize('iterations', [40, 400, 4000, 40000])
def test_generate_shortcode_performance(iterations):
    """Ensure the function runs efficiently for multiple iterations.

    NOTE: The system must be able to handle 40 link generations per second.
          The size of iterations parameter demonstrates that shortcode
          generation will not cause a bottleneck in performance.
    """
    rng = random.Random(0)
    start = time.perf_counter()
    for _ in range(iterations):
        generate_shortcode(rng)
    duration = time.perf_counter() - start
    assert duration < 1.0
