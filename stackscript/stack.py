from __future__ import annotations

import json
from collections.abc import Iterator

from stackscript.errors import StackUnderflow, TypeMismatch
from stackscript.values import Integer, Text, Value


class OperandStack:
    """Operand stack of a single run. The top of the stack is the end of the list."""

    def __init__(self, values: list[Value] | None = None) -> None:
        self._items: list[Value] = list(values or [])

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Value]:
        return iter(self._items)

    def __repr__(self) -> str:
        return f"OperandStack({self._items!r})"

    def snapshot(self) -> tuple[Value, ...]:
        return tuple(self._items)

    def push(self, value: Value) -> None:
        self._items.append(value)

    def push_int(self, value: int) -> None:
        self._items.append(Integer(value))

    def push_text(self, value: str) -> None:
        self._items.append(Text(value))

    def pop(self) -> Value:
        if not self._items:
            raise StackUnderflow("pop from empty stack")
        return self._items.pop()

    def pop_int(self, *, role: str = "operand") -> int:
        value = self.pop()
        if not isinstance(value, Integer):
            raise TypeMismatch(f"expected integer {role}, got {value.kind} {value.render()!r}")
        return value.value

    def format(self) -> str:
        """Debug rendering, bottom to top: `[ "1" "abc" ]`, one line whatever the values hold."""
        parts = ["["]
        parts.extend(json.dumps(v.render(), ensure_ascii=False) for v in self._items)
        parts.append("]")
        return " ".join(parts)
