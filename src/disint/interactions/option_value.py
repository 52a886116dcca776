from typing import Any, Optional, Union


class OptionValue:
    """A command option value, either a string or an integer.

    Compares equal to a plain ``str`` or ``int`` only when the variant
    matches, so ``OptionValue("1") != 1``.
    """

    __slots__ = ("_value",)

    def __init__(self, value: Union[str, int]) -> None:
        if isinstance(value, bool) or not isinstance(value, (str, int)):
            raise TypeError(f"option value must be str or int, got {type(value).__name__}")
        self._value = value

    @property
    def value(self) -> Union[str, int]:
        return self._value

    @property
    def is_string(self) -> bool:
        return isinstance(self._value, str)

    @property
    def is_int(self) -> bool:
        return not isinstance(self._value, str)

    def try_as_str(self) -> Optional[str]:
        if isinstance(self._value, str):
            return self._value
        return None

    def try_as_int(self) -> Optional[int]:
        if isinstance(self._value, str):
            return None
        return self._value

    def as_str(self) -> str:
        value = self.try_as_str()
        if value is None:
            raise TypeError("given OptionValue is not a string")
        return value

    def as_int(self) -> int:
        value = self.try_as_int()
        if value is None:
            raise TypeError("given OptionValue is not an int")
        return value

    def to_json(self) -> Union[str, int]:
        return self._value

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, OptionValue):
            return type(self._value) is type(other._value) and self._value == other._value
        if isinstance(other, bool):
            return False
        if isinstance(other, str):
            return isinstance(self._value, str) and self._value == other
        if isinstance(other, int):
            return not isinstance(self._value, str) and self._value == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash((type(self._value), self._value))

    def __str__(self) -> str:
        return str(self._value)

    def __repr__(self) -> str:
        return f"OptionValue({self._value!r})"
