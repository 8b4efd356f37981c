from __future__ import annotations

import argparse
import json
from collections import Counter
from dataclasses import dataclass
from pathlib import Path
from typing import Any


@dataclass(frozen=True)
class JumpTotals:
    executed: int = 0
    taken: int = 0

    def __add__(self, other: "JumpTotals") -> "JumpTotals":
        return JumpTotals(executed=self.executed + other.executed, taken=self.taken + other.taken)


def _as_int(value: Any, *, default: int = 0) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return int(default)


def summarize_trace(*, trace: Path) -> dict[str, Any]:
    if not trace.exists():
        raise SystemExit(f"missing trace: {trace}")

    ops: Counter[str] = Counter()
    jumps = JumpTotals()
    steps = 0
    max_depth = 0
    final_stack: list[Any] = []
    final_pc: int | None = None
    started: set[int] = set()

    for line in trace.read_text(encoding="utf-8").splitlines():
        if not line.strip():
            continue
        e = json.loads(line)
        step = _as_int(e.get("step"))
        typ = str(e.get("event") or "")

        if typ == "before":
            started.add(step)
            continue
        if typ != "after":
            continue

        started.discard(step)
        steps += 1
        token = str(e.get("token") or "")
        ops[token if token.startswith(".") else "<literal>"] += 1

        stack = e.get("stack") or []
        max_depth = max(max_depth, len(stack))
        final_stack = list(stack)

        pc = _as_int(e.get("pc"))
        final_pc = _as_int(e.get("next_pc"), default=pc + 1)
        if token == ".cjump":
            jumps += JumpTotals(executed=1, taken=int(bool(e.get("jumped"))))

    return {
        "steps": steps,
        # A step that started but never finished is the one that raised.
        "failed_step": min(started) if started else None,
        "final_pc": final_pc,
        "max_stack_depth": max_depth,
        "final_stack": final_stack,
        "jumps": {"executed": jumps.executed, "taken": jumps.taken},
        "ops": dict(sorted(ops.items())),
    }


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Summarize a stackscript JSON-lines trace.")
    parser.add_argument("--trace", type=Path, required=True)
    args = parser.parse_args(argv)
    print(json.dumps(summarize_trace(trace=args.trace), indent=2, sort_keys=True))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
