"""Tests for shared utility functions."""

import pytest

from statcube.common import is_time_dimension, parse_hierarchy_label


@pytest.mark.parametrize(
    "code, expected",
    [
        ("Tid", True),
        ("tid", True),
        ("Tidsperiode", True),
        ("AarTid", True),
        ("Region", False),
        ("ContentsCode", False),
        ("Year", False),
    ],
)
def test_is_time_dimension(code, expected):
    assert is_time_dimension(code) is expected


@pytest.mark.parametrize(
    "label, expected",
    [
        ("Boliger", ("Boliger", 0)),
        ("¬ Boliger", ("Boliger", 1)),
        ("¬¬ Eneboliger", ("Eneboliger", 2)),
        ("¬¬¬Rekkehus", ("Rekkehus", 3)),
        ("", ("", 0)),
        (None, (None, 0)),
    ],
)
def test_parse_hierarchy_label(label, expected):
    """Leading '¬' markers are counted and stripped."""
    assert parse_hierarchy_label(label) == expected

