"""
Plain-Text Mapping
==================
Offset correspondence between plain text and the markup it was derived from.

A mapping is an ordered tuple of MappedRange values. Each range ties a span
of plain text to a span of the original. Ranges never overlap and increase
monotonically in both coordinate spaces. A plain span may map to a
zero-width original span when the filter synthesized that text.

Translation rule (plain -> original):
- inside a range: proportional interpolation, rounded down
  original_start + (offset - plain_start) * original_len // plain_len
- on a boundary shared by two ranges: side="start" resolves to the later
  range, side="end" to the earlier one
- in a gap between ranges: the end of the preceding range
- before the first range: the start of the first range

Breaks are plain offsets where the link pre-filter removed a token. A span
translated with span_to_original never reaches across a break, so edits
land beside removed links instead of swallowing them.
"""

from bisect import bisect_right
from dataclasses import dataclass, field
from typing import Tuple, List

from config_logging import UnmappableOffsetError

START = "start"
END = "end"


@dataclass(frozen=True)
class MappedRange:
    """A plain-text span and the original span it came from."""
    plain_start: int
    plain_end: int
    original_start: int
    original_end: int

    @property
    def plain_length(self) -> int:
        return self.plain_end - self.plain_start

    @property
    def original_length(self) -> int:
        return self.original_end - self.original_start

    def interpolate(self, offset: int) -> int:
        """Map a plain offset within this range to the original span."""
        if self.plain_length == 0:
            return self.original_start
        return self.original_start + (offset - self.plain_start) * self.original_length // self.plain_length

    def interpolate_back(self, original_offset: int) -> int:
        """Map an original offset within this range to the plain span."""
        if self.original_length == 0:
            return self.plain_end
        return self.plain_start + (original_offset - self.original_start) * self.plain_length // self.original_length


@dataclass(frozen=True)
class PlainTextMapping:
    """Immutable plain text plus its ordered offset ranges and breaks."""
    plain_text: str
    ranges: Tuple[MappedRange, ...] = ()
    breaks: Tuple[int, ...] = ()
    _plain_starts: Tuple[int, ...] = field(init=False, repr=False, compare=False)
    _original_starts: Tuple[int, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        ranges = tuple(self.ranges)
        _validate_ranges(ranges, len(self.plain_text))
        breaks = tuple(sorted(set(self.breaks)))
        if breaks and (breaks[0] < 0 or breaks[-1] > len(self.plain_text)):
            raise ValueError(f"Break outside plain text of length {len(self.plain_text)}: {breaks}")
        object.__setattr__(self, 'ranges', ranges)
        object.__setattr__(self, 'breaks', breaks)
        object.__setattr__(self, '_plain_starts', tuple(r.plain_start for r in ranges))
        object.__setattr__(self, '_original_starts', tuple(r.original_start for r in ranges))

    @classmethod
    def identity(cls, text: str) -> 'PlainTextMapping':
        """Mapping of a text onto itself."""
        if not text:
            return cls(text)
        return cls(text, (MappedRange(0, len(text), 0, len(text)),))

    def __len__(self) -> int:
        return len(self.ranges)

    def to_original(self, offset: int, side: str = START) -> int:
        """
        Translate a plain-text offset to an original offset.

        Raises:
            UnmappableOffsetError: offset outside [0, len(plain_text)] or
                the mapping has no ranges
        """
        if not self.ranges:
            raise UnmappableOffsetError("Mapping has no ranges", offset=offset)
        if offset < 0 or offset > len(self.plain_text):
            raise UnmappableOffsetError(
                f"Offset {offset} outside plain text of length {len(self.plain_text)}",
                offset=offset,
            )

        index = bisect_right(self._plain_starts, offset) - 1
        if index < 0:
            return self.ranges[0].original_start

        if side == END and index > 0 and offset == self.ranges[index].plain_start:
            previous = self.ranges[index - 1]
            if previous.plain_end == offset:
                return previous.original_end

        current = self.ranges[index]
        if offset >= current.plain_end:
            return current.original_end
        return current.interpolate(offset)

    def to_plain(self, original_offset: int) -> int:
        """Translate an original offset back to a plain-text offset."""
        if not self.ranges:
            raise UnmappableOffsetError("Mapping has no ranges", offset=original_offset)

        index = bisect_right(self._original_starts, original_offset) - 1
        if index < 0:
            return self.ranges[0].plain_start

        current = self.ranges[index]
        if original_offset >= current.original_end:
            return current.plain_end
        return current.interpolate_back(original_offset)

    def span_to_original(self, start: int, end: int) -> Tuple[int, int]:
        """
        Translate a plain-text span [start, end) to an original span.

        Zero-width spans stay zero-width. The result never has end < start.
        A span crossing a break is cut at the first break, so the removed
        token after it stays outside the original span.
        """
        if end < start:
            raise UnmappableOffsetError(f"Span end {end} before start {start}", offset=start)
        original_start = self.to_original(start, START)
        if end == start:
            return original_start, original_start
        index = bisect_right(self.breaks, start)
        if index < len(self.breaks) and self.breaks[index] < end:
            end = self.breaks[index]
        original_end = self.to_original(end, END)
        return original_start, max(original_start, original_end)

    def rebase(self, source: 'PlainTextMapping') -> 'PlainTextMapping':
        """
        Compose with a mapping whose plain text is this mapping's original.

        self maps plain -> intermediate, source maps intermediate -> original;
        the result maps plain -> original. Breaks of both mappings are kept,
        the source's translated into plain offsets.
        """
        if not source.ranges:
            return PlainTextMapping(self.plain_text, breaks=self.breaks)
        breaks = list(self.breaks)
        if self.ranges:
            breaks.extend(self.to_plain(b) for b in source.breaks)
        composed: List[MappedRange] = []
        for r in self.ranges:
            for piece in source._compose_range(r):
                start, end = piece.original_start, piece.original_end
                if composed and start < composed[-1].original_end:
                    start = composed[-1].original_end
                    end = max(start, end)
                composed.append(MappedRange(piece.plain_start, piece.plain_end, start, end))
        return PlainTextMapping(self.plain_text, tuple(composed), tuple(breaks))

    def _compose_range(self, outer: MappedRange) -> List[MappedRange]:
        """
        Map a range whose original span lies in this mapping's plain text.

        One-to-one ranges are split at this mapping's range boundaries so
        text removed in between is skipped exactly; other ranges are
        translated as a whole.
        """
        if outer.plain_length == 0 or outer.plain_length != outer.original_length:
            start = self.to_original(outer.original_start, START)
            end = start
            if outer.original_length:
                end = max(start, self.to_original(outer.original_end, END))
            return [MappedRange(outer.plain_start, outer.plain_end, start, end)]

        shift = outer.plain_start - outer.original_start
        pieces = []
        first = max(0, bisect_right(self._plain_starts, outer.original_start) - 1)
        for inner in self.ranges[first:]:
            if inner.plain_start >= outer.original_end:
                break
            a = max(outer.original_start, inner.plain_start)
            b = min(outer.original_end, inner.plain_end)
            if a >= b:
                continue
            original_end = inner.original_end if b == inner.plain_end else inner.interpolate(b)
            pieces.append(MappedRange(a + shift, b + shift, inner.interpolate(a), original_end))
        return pieces


class MappingBuilder:
    """Accumulates plain text and ranges while a filter walks the markup."""

    def __init__(self):
        self._parts: List[str] = []
        self._length = 0
        self._ranges: List[MappedRange] = []
        self._breaks: List[int] = []

    @property
    def plain_length(self) -> int:
        return self._length

    def emit(self, text: str, original_start: int, original_end: int = None):
        """Append plain text that came from original[original_start:original_end]."""
        if not text:
            return
        if original_end is None:
            original_end = original_start + len(text)
        plain_start = self._length
        self._parts.append(text)
        self._length += len(text)
        new = MappedRange(plain_start, self._length, original_start, original_end)

        if self._ranges:
            last = self._ranges[-1]
            same_ratio = last.plain_length == last.original_length and new.plain_length == new.original_length
            if same_ratio and last.plain_end == new.plain_start and last.original_end == new.original_start:
                self._ranges[-1] = MappedRange(last.plain_start, new.plain_end, last.original_start, new.original_end)
                return
        self._ranges.append(new)

    def synthesize(self, text: str, original_offset: int):
        """Append plain text with no markup counterpart, pinned to one position."""
        self.emit(text, original_offset, original_offset)

    def mark_break(self):
        """Record that a token was removed at the current plain offset."""
        self._breaks.append(self._length)

    def build(self) -> PlainTextMapping:
        return PlainTextMapping(''.join(self._parts), tuple(self._ranges), tuple(self._breaks))


def _validate_ranges(ranges: Tuple[MappedRange, ...], plain_length: int):
    previous = None
    for r in ranges:
        if r.plain_start < 0 or r.plain_end < r.plain_start or r.plain_end > plain_length:
            raise ValueError(f"Invalid plain span in {r}")
        if r.original_start < 0 or r.original_end < r.original_start:
            raise ValueError(f"Invalid original span in {r}")
        if previous is not None:
            if r.plain_start < previous.plain_end or r.plain_start <= previous.plain_start:
                raise ValueError(f"Ranges overlap or are out of order: {previous}, {r}")
            if r.original_start < previous.original_end:
                raise ValueError(f"Original spans overlap or are out of order: {previous}, {r}")
        previous = r
