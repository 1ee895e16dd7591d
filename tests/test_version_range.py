"""Tests for version arguments and ranges."""

import pytest
from packaging.version import Version

from installed_resources.errors import ConstraintParseError
from installed_resources.version_range import (
    VersionRange,
    parse_version_argument,
    parse_version_range,
    try_parse_version,
)


def test_no_argument_means_no_constraint():
    """Test that no version argument gives no range."""
    assert parse_version_argument(None) is None


def test_single_version_is_exact_range():
    """Test that a bare version becomes an exact range."""
    version_range = parse_version_argument("1.2.3")

    assert version_range.is_exact
    assert version_range.satisfies(Version("1.2.3"))
    assert not version_range.satisfies(Version("1.2.4"))
    assert not version_range.satisfies(Version("1.2.2"))


def test_half_open_interval():
    """Test an inclusive-lower, exclusive-upper interval."""
    version_range = parse_version_argument("[1.0.0,2.0.0)")

    selected = [v for v in ["0.9.0", "1.0.0", "1.5.0", "2.0.0"] if version_range.satisfies(Version(v))]

    assert selected == ["1.0.0", "1.5.0"]


def test_exclusive_lower_inclusive_upper():
    """Test an exclusive-lower, inclusive-upper interval."""
    version_range = parse_version_range("(1.0,2.0]")

    assert not version_range.satisfies(Version("1.0"))
    assert version_range.satisfies(Version("1.0.1"))
    assert version_range.satisfies(Version("2.0"))
    assert not version_range.satisfies(Version("2.0.1"))


@pytest.mark.parametrize(
    "text,inside,outside",
    [
        ("[1.5,)", "99.0", "1.4"),
        ("(,1.5]", "0.1", "1.6"),
        ("(,1.5)", "1.4.9", "1.5"),
        ("[2.0]", "2.0.0", "2.0.1"),
    ],
)
def test_unbounded_and_bracketed_exact(text, inside, outside):
    """Test open-ended bounds and the bracketed exact form."""
    version_range = parse_version_range(text)

    assert version_range.satisfies(Version(inside))
    assert not version_range.satisfies(Version(outside))


def test_prerelease_orders_below_release():
    """Test that a prerelease sorts below its release."""
    version_range = parse_version_range("[2.0.0-beta,2.0.0)")

    assert version_range.satisfies(Version("2.0.0-beta"))
    assert not version_range.satisfies(Version("2.0.0"))


@pytest.mark.parametrize(
    "text",
    ["", "not-a-version", "[1.0", "1.0]", "(1.0)", "[1.0)", "(,)", "[a,b]", "[1.0,2.0,3.0]", "[2.0,1.0]", "(1.0,1.0]"],
)
def test_malformed_ranges_raise(text):
    """Test that malformed ranges raise ConstraintParseError."""
    with pytest.raises(ConstraintParseError) as excinfo:
        parse_version_argument(text)

    assert excinfo.value.error_id == "VersionRangeParseFailure"


def test_range_str_is_normalized():
    """Test the normalized string form of a range."""
    assert str(parse_version_range("[ 1.0 , 2.0 )")) == "[1.0, 2.0)"
    assert str(VersionRange.exact(Version("1.2"))) == "[1.2]"


def test_satisfies_rejects_missing_version():
    """Test that None never satisfies a range."""
    assert not VersionRange().satisfies(None)


def test_try_parse_version():
    """Test that try_parse_version returns None instead of raising."""
    assert try_parse_version("1.0.0") == Version("1.0.0")
    assert try_parse_version("latest") is None
    assert try_parse_version(None) is None
