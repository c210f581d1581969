"""Borrowed text slices that reference the caller's buffer without copying."""

from __future__ import annotations

from typing import overload


class Span:
    """Immutable view of ``source[start:end]``.

    A span keeps a reference to the original buffer and two offsets into it.
    No text is copied until the span is converted with ``str()``, so the
    parse tree costs a handful of integers per token regardless of how long
    the token is.

    Spans compare equal to other spans and to plain strings holding the same
    text, and hash like that text, so they can be used in sets and as dict
    keys alongside ``str`` values.
    """

    __slots__ = ("source", "start", "end")

    source: str
    start: int
    end: int

    def __init__(
        self, source: str, start: int = 0, end: int | None = None
    ) -> None:
        """Initialize a span over ``source``.

        Args:
            source: The buffer being referenced
            start: Offset of the first character in the span
            end: Offset one past the last character (default end of buffer)
        """
        if end is None:
            end = len(source)
        if not 0 <= start <= end <= len(source):
            raise ValueError(
                f"span bounds out of range: [{start}:{end}] of {len(source)}"
            )

        object.__setattr__(self, "source", source)
        object.__setattr__(self, "start", start)
        object.__setattr__(self, "end", end)

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError(f"Span is immutable, cannot set {name!r}")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"Span is immutable, cannot delete {name!r}")

    def __str__(self) -> str:
        return self.source[self.start : self.end]

    def __repr__(self) -> str:
        return f"Span({str(self)!r}, {self.start}, {self.end})"

    def __len__(self) -> int:
        return self.end - self.start

    def __bool__(self) -> bool:
        return self.end > self.start

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Span):
            if len(self) != len(other):
                return False
            if self.source is other.source and self.start == other.start:
                return True
            return str(self) == str(other)
        if isinstance(other, str):
            # startswith compares in place without slicing the buffer
            return len(other) == len(self) and self.source.startswith(
                other, self.start, self.end
            )
        return NotImplemented

    def __hash__(self) -> int:
        return hash(str(self))

    @overload
    def __getitem__(self, index: int) -> str: ...

    @overload
    def __getitem__(self, index: slice) -> Span: ...

    def __getitem__(self, index: int | slice) -> str | Span:
        """Indexes relative to the span start.

        An integer returns one character as ``str``. A slice returns a
        narrower ``Span`` over the same source, so no text is copied. Only
        contiguous slices (step 1) are supported.
        """
        length = len(self)
        if isinstance(index, slice):
            start, stop, step = index.indices(length)
            if step != 1:
                raise ValueError("span slices must have a step of 1")
            stop = max(stop, start)
            return Span(self.source, self.start + start, self.start + stop)
        if index < 0:
            index += length
        if not 0 <= index < length:
            raise IndexError("span index out of range")
        return self.source[self.start + index]

    def startswith(self, prefix: str) -> bool:
        """Checks whether the span begins with ``prefix``."""
        return len(prefix) <= len(self) and self.source.startswith(
            prefix, self.start, self.end
        )
