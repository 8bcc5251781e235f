"""Tests for the text decoding helpers."""

import pytest

from procmon.textdecode import (
    is_number,
    last_segment,
    ltrim,
    read_joined,
    read_lines,
    read_text,
    rtrim,
    scan_numeric_subdirectories,
    split,
    split_in_two,
    to_float,
    to_integral,
)


class TestTrim:
    """Tests for rtrim/ltrim."""

    def test_rtrim(self):
        assert rtrim("abc  ") == "abc"
        assert rtrim("abc \n\r\t\f\v") == "abc"

    def test_ltrim(self):
        assert ltrim("  abc") == "abc"
        assert ltrim("\t\n abc ") == "abc "

    def test_noop_without_whitespace(self):
        assert rtrim("abc") == "abc"
        assert ltrim("abc") == "abc"

    @pytest.mark.parametrize("value", ["", "   ", " a b ", "x\t\n"])
    def test_idempotent(self, value):
        assert rtrim(rtrim(value)) == rtrim(value)
        assert ltrim(ltrim(value)) == ltrim(value)


class TestSplitInTwo:
    """Tests for split_in_two."""

    def test_splits_at_first_delimiter(self):
        assert split_in_two("a: b", ":") == ("a", "b")

    def test_only_first_delimiter_is_used(self):
        assert split_in_two("model name\t: foo: bar", ":") == ("model name", "foo: bar")

    def test_any_delimiter_in_set(self):
        assert split_in_two("key=value", ":=") == ("key", "value")

    def test_missing_delimiter(self):
        assert split_in_two("noseparator", ":") == ("noseparator", "")

    def test_empty_string(self):
        assert split_in_two("", ":") == ("", "")


class TestSplit:
    """Tests for split."""

    def test_split_words(self):
        assert split("the night is long", " ") == ["the", "night", "is", "long"]

    def test_tokens_are_left_trimmed(self):
        assert split("a:  b:\tc", ":") == ["a", "b", "c"]

    def test_leading_separator_dropped(self):
        assert split(":a:b", ":") == ["a", "b"]

    def test_no_separator(self):
        assert split("alone", ":") == ["alone"]

    def test_null_separator(self):
        assert split("python3\0-m\0", "\0") == ["python3", "-m", ""]


class TestNumbers:
    """Tests for numeric helpers."""

    def test_is_number(self):
        assert is_number("123")
        assert is_number("0")
        assert not is_number("")
        assert not is_number("12a")
        assert not is_number("-1")
        assert not is_number("1.5")
        assert not is_number("١٢")  # non-ASCII digits

    def test_to_integral(self):
        assert to_integral(" 12 ") == 12

    def test_to_float(self):
        assert to_float("12.3413\n") == pytest.approx(12.3413)

    def test_malformed_raises(self):
        with pytest.raises(ValueError):
            to_integral("abc")
        with pytest.raises(ValueError):
            to_float("")


class TestFileHelpers:
    """Tests for degrading file access."""

    def test_missing_file_is_empty(self, tmp_path):
        missing = tmp_path / "gone"
        assert read_text(missing) == ""
        assert read_lines(missing) == []
        assert read_joined(missing) == ""

    def test_read_lines(self, tmp_path):
        path = tmp_path / "f"
        path.write_text("a\nb\n")
        assert read_lines(path) == ["a", "b"]
        assert read_joined(path) == "ab"

    def test_last_segment(self):
        assert last_segment("/proc/42") == "42"
        assert last_segment("/proc/42/") == "42"
        assert last_segment("42") == "42"


class TestScanNumericSubdirectories:
    """Tests for scan_numeric_subdirectories."""

    def test_only_numeric_directories(self, fake_proc):
        names: list[str] = []
        scan_numeric_subdirectories(fake_proc.root, names.append)
        assert sorted(names, key=int) == ["1", "7", "42"]

    def test_missing_root(self, tmp_path):
        names: list[str] = []
        scan_numeric_subdirectories(tmp_path / "nope", names.append)
        assert names == []
