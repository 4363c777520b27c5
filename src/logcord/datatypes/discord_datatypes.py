"""
Type-safe wrapper classes for Discord identifiers.

Discord snowflakes are 64-bit integers, but the bot stores them as text (the
``log_channels`` table keeps channel ids in TEXT columns). These wrappers give
every identifier one canonical textual form so ids read back from the
database compare equal to ids coming from the gateway.
"""

from __future__ import annotations

from typing import Optional, Union


class Snowflake:
    """
    Base class for Discord snowflake identifiers.

    Subclasses only differ in their type, so a ``GuildID`` never compares
    equal to a ``ChannelID`` with the same number. Plain ``int`` values compare
    equal and hash alike, so raw ids still find wrapped ones in sets and dicts.
    Text does not compare equal; wrap it first.

    Attributes:
        _value (str): The snowflake ID stored as a canonical decimal string.

    Example:
        >>> cid = ChannelID(42)
        >>> str(cid)
        '42'
        >>> ChannelID(" 42 ") == 42
        True
    """

    __slots__ = ("_value",)

    def __init__(self, value: Union[str, int, "Snowflake"]) -> None:
        """
        Initialize from a string, int, or another snowflake of the same type.

        Args:
            value: The snowflake ID as a string, int, or wrapper.

        Raises:
            ValueError: If the value cannot be converted to a valid snowflake.
        """
        if isinstance(value, Snowflake):
            if not isinstance(value, type(self)):
                raise ValueError(f"Cannot create {type(self).__name__} from {type(value).__name__}")
            self._value = value._value
        elif isinstance(value, bool):
            raise ValueError(f"Cannot create {type(self).__name__} from bool: {value}")
        elif isinstance(value, int):
            if value < 0:
                raise ValueError(f"Snowflakes are non-negative, got {value}")
            self._value = str(value)
        elif isinstance(value, str):
            # Validate that it's a valid integer string
            parsed = int(value.strip())
            if parsed < 0:
                raise ValueError(f"Snowflakes are non-negative, got {value!r}")
            self._value = str(parsed)
        else:
            raise ValueError(f"Cannot create {type(self).__name__} from {type(value).__name__}: {value}")

    @classmethod
    def from_int(cls, value: int):
        """Create an identifier from an integer snowflake."""
        return cls(value)

    @classmethod
    def parse(cls, value: Optional[Union[str, int]]):
        """
        Lenient constructor for stored values.

        Returns None when ``value`` is None or not a valid snowflake instead
        of raising.
        """
        if value is None:
            return None
        try:
            return cls(value)
        except ValueError:
            return None

    def to_int(self) -> int:
        """Convert to an integer for Discord API calls."""
        return int(self._value)

    def __str__(self) -> str:
        return self._value

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._value!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Snowflake):
            return type(self) is type(other) and self._value == other._value
        if isinstance(other, bool):
            return NotImplemented
        if isinstance(other, int):
            return self.to_int() == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.to_int())


class GuildID(Snowflake):
    """Snowflake of a guild (server)."""

    __slots__ = ()


class ChannelID(Snowflake):
    """Snowflake of a channel or thread."""

    __slots__ = ()

    @property
    def mention(self) -> str:
        """Channel mention markup, e.g. ``<#42>``."""
        return f"<#{self._value}>"


class UserID(Snowflake):
    """Snowflake of a user account."""

    __slots__ = ()

    @property
    def mention(self) -> str:
        """User mention markup, e.g. ``<@42>``."""
        return f"<@{self._value}>"


class MessageID(Snowflake):
    """Snowflake of a message."""

    __slots__ = ()
