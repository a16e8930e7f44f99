"""Tests for the dotted version comparator."""

import pytest

from packagesetup.version import (
    VersionCheckError,
    VersionCheckType,
    check_version,
    version_number,
)


def test_min_equal_versions():
    assert check_version("1.3.1", "1.3.1", "Min") is True


def test_min_lower_version_fails():
    assert check_version("1.3.1", "1.2.9", "Min") is False


def test_min_higher_version_passes():
    assert check_version("1.3.1", "6.0.30", VersionCheckType.MIN) is True


def test_max_is_exclusive():
    assert check_version("2.0.0", "1.9.9", "Max") is True
    assert check_version("2.0.0", "2.0.0", "Max") is False


def test_missing_segments_are_zero():
    assert version_number("1.3") == version_number("1.3.0.0.0")
    assert check_version("1.3", "1.3.0.0.0", "Min") is True
    assert check_version("1.3.0.0.1", "1.3", "Min") is False


def test_segments_beyond_five_ignored():
    assert version_number("1.2.3.4.5.6") == version_number("1.2.3.4.5")


def test_segments_compare_numerically_not_lexically():
    assert check_version("1.9.0", "1.10.0", "Min") is True


def test_non_numeric_segment_uses_leading_digits():
    assert version_number("2.0.3rc1") == version_number("2.0.3")
    assert version_number("2.beta") == version_number("2.0")


def test_only_ascii_digits_count():
    assert version_number("\u0661.\u0663") == version_number("0.0")
    assert check_version("1.3.1", "\u0661\u0660.0", "Min") is False


def test_wide_segment_overflows_field():
    # 10000 does not fit in four digits and shifts the remaining segments
    assert check_version("1.9999.0", "1.10000.0", "Min") is True
    assert version_number("1.10000.0") > version_number("2.0.0")


@pytest.mark.parametrize(
    "args",
    [
        (None, "1.0", "Min"),
        ("1.0", None, "Min"),
        ("1.0", "1.0", None),
    ],
)
def test_missing_argument_raises(args):
    with pytest.raises(VersionCheckError, match="not defined"):
        check_version(*args)


def test_invalid_type_raises(caplog):
    with pytest.raises(VersionCheckError):
        check_version("1.0", "1.0", "Between")
    assert "Invalid Type!" in caplog.text


def test_type_is_case_sensitive():
    with pytest.raises(VersionCheckError):
        check_version("1.0", "1.0", "min")
