#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_options.py
"""Unit tests for FormatOptions and the policy enumerations."""

import pytest

from mdfmt.exceptions import ConfigError
from mdfmt.options import FormatOptions, OrderedListPolicy, WrapPolicy


@pytest.mark.unit
class TestPolicies:
    """Tests for policy parsing."""

    @pytest.mark.parametrize("value", ["always", "ALWAYS", " Always "])
    def test_wrap_parse_is_case_insensitive(self, value):
        assert WrapPolicy.parse(value) is WrapPolicy.ALWAYS

    def test_wrap_parse_accepts_member(self):
        assert WrapPolicy.parse(WrapPolicy.NEVER) is WrapPolicy.NEVER

    def test_wrap_parse_rejects_unknown(self):
        with pytest.raises(ConfigError, match="Expected: always, never, preserve") as exc_info:
            WrapPolicy.parse("sometimes")
        assert exc_info.value.parameter_name == "wrap"
        assert exc_info.value.parameter_value == "sometimes"

    def test_ordered_list_parse(self):
        assert OrderedListPolicy.parse("one") is OrderedListPolicy.ONE
        assert OrderedListPolicy.parse("Ascending") is OrderedListPolicy.ASCENDING

    def test_ordered_list_parse_rejects_unknown(self):
        with pytest.raises(ConfigError, match="Expected: ascending, one"):
            OrderedListPolicy.parse("roman")

    def test_non_string_rejected(self):
        with pytest.raises(ConfigError):
            WrapPolicy.parse(3)


@pytest.mark.unit
class TestFormatOptions:
    """Tests for option construction and validation."""

    def test_defaults(self):
        options = FormatOptions()
        assert options.width == 80
        assert options.wrap is WrapPolicy.PRESERVE
        assert options.ordered_list is OrderedListPolicy.ASCENDING

    def test_strings_are_coerced(self):
        options = FormatOptions(width="72", wrap="always", ordered_list="one")
        assert options.width == 72
        assert options.wrap is WrapPolicy.ALWAYS
        assert options.ordered_list is OrderedListPolicy.ONE

    @pytest.mark.parametrize("width", [0, -5, "abc", "", 1.5, True, None])
    def test_invalid_width(self, width):
        with pytest.raises(ConfigError, match="Invalid width"):
            FormatOptions(width=width)

    def test_invalid_wrap(self):
        with pytest.raises(ConfigError, match="Invalid wrap mode"):
            FormatOptions(wrap="sideways")

    def test_frozen(self):
        options = FormatOptions()
        with pytest.raises(AttributeError):
            options.width = 10

    def test_create_updated(self):
        options = FormatOptions(width=60)
        updated = options.create_updated(wrap="never")
        assert updated.width == 60
        assert updated.wrap is WrapPolicy.NEVER
        assert options.wrap is WrapPolicy.PRESERVE

    def test_create_updated_validates(self):
        with pytest.raises(ConfigError):
            FormatOptions().create_updated(width=0)

    def test_equality(self):
        assert FormatOptions(wrap="always") == FormatOptions(wrap=WrapPolicy.ALWAYS)
