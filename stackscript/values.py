from __future__ import annotations

from dataclasses import dataclass

I32_MIN = -(2**31)
I32_MAX = 2**31 - 1


def wrap_i32(n: int) -> int:
    """Reduce n to the signed 32-bit range with two's-complement wraparound."""
    return (n + 2**31) % 2**32 - 2**31


def trunc_div(left: int, right: int) -> int:
    # Python's // floors; scripts truncate toward zero.
    q = abs(left) // abs(right)
    return q if (left < 0) == (right < 0) else -q


def trunc_mod(left: int, right: int) -> int:
    return left - right * trunc_div(left, right)


@dataclass(frozen=True, slots=True)
class Integer:
    value: int

    def __post_init__(self) -> None:
        if not I32_MIN <= self.value <= I32_MAX:
            raise ValueError(f"integer out of 32-bit range: {self.value}")

    @property
    def kind(self) -> str:
        return "integer"

    def render(self) -> str:
        return str(self.value)


@dataclass(frozen=True, slots=True)
class Text:
    value: str

    @property
    def kind(self) -> str:
        return "text"

    def render(self) -> str:
        return self.value


Value = Integer | Text
