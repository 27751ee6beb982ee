"""Address ranges per slave and function, with merging of overlapping spans."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import Hashable

_MAX_ADDRESS = 0xFFFF


@dataclass
class Range:
    """An inclusive span of 16-bit addresses."""

    start: int = 0
    end: int = 0

    def __post_init__(self) -> None:
        for value in (self.start, self.end):
            if not 0 <= value <= _MAX_ADDRESS:
                raise ValueError(f"address {value} outside 0..{_MAX_ADDRESS}")

    def overlaps(self, o_start: int, o_end: int) -> bool:
        """True when ``o_start..o_end`` overlaps or touches this range."""
        diff_start = 1 if self.start != 0 else 0
        return self.start - diff_start <= o_end and self.end + 1 >= o_start

    def merge(self, o_start: int, o_end: int) -> None:
        """Grow this range to cover ``o_start..o_end`` too."""
        self.start = min(self.start, o_start)
        self.end = max(self.end, o_end)


def _is_number(text: str) -> bool:
    return text.isdigit()


class RangeManager:
    """Collects address ranges keyed by slave id and function number."""

    def __init__(self) -> None:
        self._ranges: defaultdict[int, defaultdict[Hashable, list[Range]]] = (
            defaultdict(lambda: defaultdict(list))
        )

    @property
    def ranges(self) -> dict[int, dict[Hashable, list[Range]]]:
        """The collected ranges, by slave id then by function."""
        return self._ranges

    def _add(self, slave_id: int, func: Hashable, new: Range) -> None:
        ranges = self._ranges[slave_id][func]
        # Only the first stored range is tried; normalize_ranges does the rest.
        if ranges and ranges[0].overlaps(new.start, new.end):
            ranges[0].merge(new.start, new.end)
        else:
            ranges.append(new)

    def add_range(self, slave_id: int, func: Hashable, start: int, end: int) -> None:
        """Add the span between ``start`` and ``end`` in either order."""
        if start > end:
            start, end = end, start
        self._add(slave_id, func, Range(start, end))

    def add_range_str(self, slave_id: int, func: Hashable, range_str: str) -> None:
        """Add a range written as ``"start-end"`` or as a single address."""
        range_str = range_str.strip()
        tokens = range_str.split("-")
        start_str = end_str = ""
        if len(tokens) >= 2:
            start_str, end_str = tokens[0].strip(), tokens[1].strip()
        elif range_str and _is_number(range_str):
            start_str = end_str = range_str
        if not (_is_number(start_str) or _is_number(end_str)):
            raise ValueError(f"not a range: {range_str!r}")
        try:
            start, end = int(start_str), int(end_str)
        except ValueError as exc:
            raise ValueError(f"not a range: {range_str!r}") from exc
        self.add_range(slave_id, func, start, end)

    def _normalize(self, slave_id: int, func: Hashable) -> None:
        ranges = self._ranges[slave_id][func]
        if not ranges:
            return
        ordered = sorted(ranges, key=lambda r: (r.start, r.end))
        result = [ordered[0]]
        for current in ordered[1:]:
            last = result[-1]
            if last.overlaps(current.start, current.end):
                last.merge(current.start, current.end)
            else:
                result.append(current)
        self._ranges[slave_id][func] = result

    def normalize_ranges(self) -> None:
        """Sort every list of ranges and merge those that overlap or touch."""
        for slave_id, inner in self._ranges.items():
            for func in list(inner):
                self._normalize(slave_id, func)

    def info_lines(self) -> list[str]:
        """Describe the collected ranges as report lines."""
        lines = [
            "********************************* RANGES ********************************"
        ]
        for slave_id, inner in self._ranges.items():
            lines.append(f"SLAVE_ID {slave_id}")
            for func, ranges in inner.items():
                lines.append(f"FUNC {int(func)}")
                lines.extend(f"[{r.start}-{r.end}]" for r in ranges)
        lines.append("*" * 73)
        return lines

    def print_info(self) -> None:
        """Print the report made by :meth:`info_lines`."""
        for line in self.info_lines():
            print(line)