"""
Unit tests for team-name normalisation and its memo cache.
"""

import threading

import pytest

from club_nlq.api.team_names import (
    TeamNameMapper,
    ordinal,
    team_display_name,
    team_number,
    team_short_key,
)


@pytest.fixture
def mapper():
    return TeamNameMapper()


@pytest.mark.parametrize(
    "token,expected",
    [
        ("1s", "1st XI"),
        ("2nd", "2nd XI"),
        ("3rd XI", "3rd XI"),
        ("4th", "4th XI"),
        ("Fifths", "5th XI"),
        ("sixth team", "6th XI"),
        ("eighth xi", "8th XI"),
    ],
)
def test_normalize(mapper, token, expected):
    assert mapper.normalize(token) == expected


@pytest.mark.parametrize("token", ["9s", "0s", "ninth team", "the team", ""])
def test_unknown_tokens(mapper, token):
    assert mapper.normalize(token) is None


def test_memoises(mapper):
    mapper.normalize("3s")
    mapper.normalize("3S")
    assert mapper.misses == 1
    assert mapper.hits == 1
    assert len(mapper) == 1

    mapper.clear()
    assert len(mapper) == 0


def test_injected_cache_is_used():
    cache = {}
    TeamNameMapper(cache).normalize("2s")
    assert cache == {"2s": "2nd XI"}


def test_concurrent_use_is_consistent(mapper):
    results = []

    def worker():
        for _ in range(200):
            results.append(mapper.normalize("7s"))

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert set(results) == {"7th XI"}
    assert len(mapper) == 1


def test_helpers():
    assert ordinal(1) == "1st"
    assert ordinal(8) == "8th"
    assert team_display_name(2) == "2nd XI"
    assert team_number("3rd XI") == 3
    assert team_number("Fun XI") is None
    assert team_short_key("3rd XI") == "3s"
