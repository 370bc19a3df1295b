#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdfmt/options/format.py
"""Render options and policy enumerations.

The renderer recognizes three options: the target ``width`` used by the
``always`` wrap policy, the ``wrap`` policy itself, and the ``ordered_list``
numbering policy. Policy values may be given as enum members or as
case-insensitive strings; anything else raises ``ConfigError`` when the
options object is constructed, before any rendering begins.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

from mdfmt.constants import DEFAULT_ORDERED_LIST, DEFAULT_WIDTH, DEFAULT_WRAP
from mdfmt.exceptions import ConfigError
from mdfmt.options.base import CloneFrozenMixin


class WrapPolicy(str, Enum):
    """Prose line-wrapping strategy.

    ALWAYS
        Greedily refill every paragraph to the target width.
    NEVER
        Collapse every paragraph to one physical line per hard break.
    PRESERVE
        Keep the source line breaks, normalizing whitespace within each line.

    """

    ALWAYS = "always"
    NEVER = "never"
    PRESERVE = "preserve"

    @classmethod
    def parse(cls, value: Union[str, "WrapPolicy"]) -> "WrapPolicy":
        """Interpret ``value`` as a wrap policy.

        Parameters
        ----------
        value : str or WrapPolicy
            Policy member or its case-insensitive name

        Returns
        -------
        WrapPolicy
            The matching policy

        Raises
        ------
        ConfigError
            If ``value`` names no policy

        """
        return _parse_enum(cls, value, "wrap", "wrap mode")


class OrderedListPolicy(str, Enum):
    """Numbering strategy for ordered list markers.

    ASCENDING
        Number items upward from the list's declared start.
    ONE
        Number every item ``1``.

    """

    ASCENDING = "ascending"
    ONE = "one"

    @classmethod
    def parse(cls, value: Union[str, "OrderedListPolicy"]) -> "OrderedListPolicy":
        """Interpret ``value`` as an ordered list numbering policy.

        Raises
        ------
        ConfigError
            If ``value`` names no policy

        """
        return _parse_enum(cls, value, "ordered_list", "ordered list mode")


def _parse_enum(enum_cls: Any, value: Any, parameter_name: str, label: str) -> Any:
    if isinstance(value, enum_cls):
        return value
    expected = ", ".join(member.value for member in enum_cls)
    if isinstance(value, str):
        normalized = value.strip().lower()
        for member in enum_cls:
            if member.value == normalized:
                return member
    raise ConfigError(
        f"Invalid {label}: {value!r}. Expected: {expected}",
        parameter_name=parameter_name,
        parameter_value=value,
    )


@dataclass(frozen=True)
class FormatOptions(CloneFrozenMixin):
    """Configuration options for Markdown formatting.

    Parameters
    ----------
    width : int, default = 80
        Target wrap column for the ``always`` policy. Must be positive.
    wrap : WrapPolicy, default = WrapPolicy.PRESERVE
        Prose wrapping strategy. Strings are accepted and coerced.
    ordered_list : OrderedListPolicy, default = OrderedListPolicy.ASCENDING
        Ordered list numbering strategy. Strings are accepted and coerced.

    Examples
    --------
    Reflow to 72 columns:
        >>> options = FormatOptions(width=72, wrap="always")

    Derive a copy with a different numbering policy:
        >>> options.create_updated(ordered_list="one").ordered_list
        <OrderedListPolicy.ONE: 'one'>

    """

    width: int = field(
        default=DEFAULT_WIDTH,
        metadata={"help": "Target line width for the 'always' wrap mode", "type": int, "importance": "core"},
    )
    wrap: WrapPolicy = field(
        default=WrapPolicy(DEFAULT_WRAP),
        metadata={
            "help": "Prose wrapping: always (reflow to width), never (one line per paragraph), "
            "preserve (keep source line breaks)",
            "choices": [policy.value for policy in WrapPolicy],
            "importance": "core",
        },
    )
    ordered_list: OrderedListPolicy = field(
        default=OrderedListPolicy(DEFAULT_ORDERED_LIST),
        metadata={
            "help": "Ordered list numbering: ascending (1, 2, 3) or one (1, 1, 1)",
            "choices": [policy.value for policy in OrderedListPolicy],
            "importance": "core",
        },
    )

    def __post_init__(self) -> None:
        """Coerce policy strings and validate the width.

        Raises
        ------
        ConfigError
            If a policy value is unknown or the width is not a positive integer.

        """
        object.__setattr__(self, "wrap", WrapPolicy.parse(self.wrap))
        object.__setattr__(self, "ordered_list", OrderedListPolicy.parse(self.ordered_list))

        width = self.width
        if isinstance(width, str):
            try:
                width = int(width.strip())
            except ValueError as e:
                raise ConfigError(
                    f"Invalid width: {self.width!r}. Expected a positive integer",
                    parameter_name="width",
                    parameter_value=self.width,
                    original_error=e,
                ) from e
        if isinstance(width, bool) or not isinstance(width, int) or width < 1:
            raise ConfigError(
                f"Invalid width: {self.width!r}. Expected a positive integer",
                parameter_name="width",
                parameter_value=self.width,
            )
        object.__setattr__(self, "width", width)
