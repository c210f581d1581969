"""
Zero-copy JSON object parser producing trees of borrowed text slices.

Parses a JSON-like document into Value/Entry trees whose scalars reference
the caller's buffer instead of copying, unescaping or converting it.
"""

import logging
import os
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any, TypeAlias

from ._span import Span

__version__ = "0.1.0"

Position: TypeAlias = int

# Scanner inputs - a whole buffer or a span of one, scanned in place
TextInput = str | Span

# Insignificant characters between tokens, separators included
_SEPARATORS = frozenset(" \n,:")
_DIGITS = frozenset("0123456789")
_BOOLEAN_LITERALS = ("true", "false")

logger = logging.getLogger(__name__)

# Profiling infrastructure - zero-cost when disabled
PROFILE_HOT_PATHS = __debug__ and "JSLICE_PROFILE" in os.environ


@dataclass
class HotPathStats:
    """Statistics for profiling hot paths during parsing."""

    function_name: str
    call_count: int = 0
    total_time_ns: int = 0
    chars_processed: int = 0

    def record_call(self, duration_ns: int, chars: int = 0) -> None:
        """Records a function call with timing and character processing info."""
        self.call_count += 1
        self.total_time_ns += duration_ns
        self.chars_processed += chars


if PROFILE_HOT_PATHS:
    _hot_path_stats: dict[str, HotPathStats] = {}
    _hot_path_lock = threading.Lock()

    class ProfileContext:
        """Context manager for profiling hot paths.

        Stats are shared by every thread. Updates, snapshots and clears all
        hold ``_hot_path_lock``, so concurrent parses never lose a count.
        """

        def __init__(self, func_name: str, scanner: Any = None):
            self.func_name = func_name
            self.scanner = scanner
            self.start_time = 0
            self.start_pos = 0

        def __enter__(self) -> "ProfileContext":
            self.start_time = time.perf_counter_ns()
            if self.scanner is not None:
                self.start_pos = self.scanner.pos
            return self

        def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
            duration = time.perf_counter_ns() - self.start_time
            chars = 0
            if self.scanner is not None:
                chars = self.scanner.pos - self.start_pos
            with _hot_path_lock:
                stats = _hot_path_stats.get(self.func_name)
                if stats is None:
                    stats = HotPathStats(self.func_name)
                    _hot_path_stats[self.func_name] = stats
                stats.record_call(duration, chars)

    def get_hot_path_stats() -> dict[str, HotPathStats]:
        """Returns a snapshot of the current profiling statistics."""
        with _hot_path_lock:
            return {
                name: HotPathStats(
                    name, s.call_count, s.total_time_ns, s.chars_processed
                )
                for name, s in _hot_path_stats.items()
            }

    def clear_hot_path_stats() -> None:
        """Clears profiling statistics."""
        with _hot_path_lock:
            _hot_path_stats.clear()

else:
    # Zero-cost in production - ignore arguments to nullcontext
    class ProfileContext:  # type: ignore[no-redef]
        def __init__(self, func_name: str, scanner: Any = None) -> None:
            pass

        def __enter__(self) -> "ProfileContext":
            return self

        def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
            pass

    def get_hot_path_stats() -> dict[str, HotPathStats]:
        return {}

    def clear_hot_path_stats() -> None:
        pass


class ErrorKind(Enum):
    """The three ways a scan can fail."""

    BAD_CHAR = "bad_char"
    NO_END = "no_end"
    EARLY_END = "early_end"


class DeserializeError(ValueError):
    """
    Base class for parse failures, carrying the failure kind and location.

    ``pos`` is the absolute offset in ``doc``; ``lineno`` and ``colno`` are
    derived from it. Parsing stops at the first failure, so one error is all
    a caller ever receives.

    The base class is abstract: raise one of the subclasses, each of which
    fixes ``kind``.
    """

    kind: ErrorKind

    def __init__(self, msg: str, doc: str = "", pos: Position = 0) -> None:
        if type(self) is DeserializeError:
            raise TypeError(
                "DeserializeError is abstract; raise BadCharError, "
                "NoEndError or EarlyEndError"
            )
        if not isinstance(msg, str):
            raise TypeError("msg must be a string")
        if not isinstance(pos, int) or pos < 0:
            raise ValueError("pos must be a non-negative integer")

        self.msg = msg
        self.doc = doc
        self.pos = pos

        # Compute line and column numbers from position
        self.lineno = doc.count("\n", 0, pos) + 1 if doc else 1
        self.colno = pos - doc.rfind("\n", 0, pos) if doc else pos + 1

        super().__init__(f"{msg} at line {self.lineno}, column {self.colno}")


class BadCharError(DeserializeError):
    """
    An unexpected character where a literal or character class was required.

    ``offset`` is relative to the start of the scan that failed, not to the
    document; it is usually 0.
    """

    kind = ErrorKind.BAD_CHAR

    def __init__(
        self, char: str, offset: int = 0, doc: str = "", pos: Position = 0
    ) -> None:
        self.char = char
        self.offset = offset
        super().__init__(f"Unexpected character {char!r}", doc, pos)


class NoEndError(DeserializeError):
    """A token ran off the end of input before its terminator."""

    kind = ErrorKind.NO_END

    def __init__(
        self, msg: str = "Unterminated token", doc: str = "", pos: Position = 0
    ) -> None:
        super().__init__(msg, doc, pos)


class EarlyEndError(DeserializeError):
    """Input was exhausted where another character was needed."""

    kind = ErrorKind.EARLY_END

    def __init__(
        self,
        msg: str = "Unexpected end of input",
        doc: str = "",
        pos: Position = 0,
    ) -> None:
        super().__init__(msg, doc, pos)


class ValueKind(Enum):
    """Variants of a parsed value."""

    BOOLEAN = "boolean"
    STRING = "string"
    NUMBER = "number"
    OBJECT = "object"
    ARRAY = "array"


@dataclass(frozen=True)
class Value:
    """
    A parsed value tagged with its kind.

    Scalar kinds hold a Span of the input, verbatim: strings keep their
    escapes, numbers and booleans stay text. Composite kinds hold a tuple of
    entries or values.
    """

    kind: ValueKind
    content: "Span | Object | Array"

    @property
    def is_scalar(self) -> bool:
        return self.kind not in (ValueKind.OBJECT, ValueKind.ARRAY)


@dataclass(frozen=True)
class Entry:
    """A key/value pair of an object; the key is the raw text between quotes."""

    key: Span
    value: Value


# Fixed-size ordered sequences; duplicate keys are kept in source order
Object = tuple[Entry, ...]
Array = tuple[Value, ...]


@dataclass(frozen=True)
class ParseConfig:
    """
    Configures parsing behavior with immutable settings.

    ``strict_root`` rejects documents that do not open with ``{``; without it
    the first character is dropped unchecked. ``allow_trailing`` controls
    whether text after the closing brace is returned as the remainder or
    rejected.
    """

    strict_root: bool = True
    allow_trailing: bool = True

    def __post_init__(self) -> None:
        if not isinstance(self.strict_root, bool):
            raise TypeError("strict_root must be a boolean")
        if not isinstance(self.allow_trailing, bool):
            raise TypeError("allow_trailing must be a boolean")


class Scanner:
    """
    Cursor over one text buffer.

    Each ``scan_*`` method consumes a single token starting at ``pos`` and
    returns it as a Span; on success ``pos`` points just past the token.
    Scanning never looks beyond ``length``, which lets a Scanner work on a
    sub-range of a larger buffer.
    """

    def __init__(
        self, text: str, pos: Position = 0, end: Position | None = None
    ):
        self.text = text
        self.pos = pos
        self.length = len(text) if end is None else end

    def peek(self) -> str | None:
        """Returns current character without advancing, None at the end."""
        return self.text[self.pos] if self.pos < self.length else None

    def peek_or_fail(self) -> str:
        """
        Returns current character without advancing.

        Raises EarlyEndError when the input is exhausted, since every caller
        needs one more character to decide what to do next.
        """
        if self.pos >= self.length:
            raise EarlyEndError(doc=self.text, pos=self.pos)
        return self.text[self.pos]

    def remainder(self) -> Span:
        """Returns the unconsumed input."""
        return Span(self.text, self.pos, self.length)

    def skip_separators(self) -> None:
        """Skips spaces, newlines, commas and colons."""
        with ProfileContext("skip_separators", self):
            text = self.text
            while self.pos < self.length and text[self.pos] in _SEPARATORS:
                self.pos += 1

    def scan_string(self) -> Span:
        """Scans a quoted string, returning the raw text between the quotes."""
        with ProfileContext("scan_string", self):
            start = self.pos
            char = self.peek_or_fail()
            if char != '"':
                raise BadCharError(char, 0, self.text, start)

            text = self.text
            pos = start + 1
            while pos < self.length:
                char = text[pos]
                if char == "\\":
                    # Whatever follows a backslash cannot close the string
                    pos += 2
                elif char == '"':
                    self.pos = pos + 1
                    return Span(text, start + 1, pos)
                else:
                    pos += 1

            raise NoEndError("Unterminated string starting at", text, start)

    def scan_key(self) -> Span:
        """Scans an object key, which is lexically a string."""
        return self.scan_string()

    def scan_number(self) -> Span:
        """
        Scans an optionally negative run of ASCII digits.

        The number must be followed by some other character; a number that
        runs to the end of input is unterminated.
        """
        with ProfileContext("scan_number", self):
            start = self.pos
            char = self.peek_or_fail()
            if char not in _DIGITS and char != "-":
                raise BadCharError(char, 0, self.text, start)

            text = self.text
            pos = start + 1
            if char == "-" and pos < self.length and text[pos] not in _DIGITS:
                raise BadCharError(text[pos], 1, text, pos)

            while pos < self.length:
                if text[pos] not in _DIGITS:
                    self.pos = pos
                    return Span(text, start, pos)
                pos += 1

            raise NoEndError("Unterminated number starting at", text, start)

    def scan_boolean(self) -> Span:
        """Scans the exact literals ``true`` or ``false``."""
        with ProfileContext("scan_boolean", self):
            start = self.pos
            char = self.peek_or_fail()
            for literal in _BOOLEAN_LITERALS:
                if self.text.startswith(literal, start, self.length):
                    self.pos = start + len(literal)
                    return Span(self.text, start, self.pos)

            raise BadCharError(char, 0, self.text, start)


class Parser:
    """
    Recursive descent parser over a Scanner.

    Objects, arrays and entries recurse through ``parse_value``; nesting depth
    is bounded only by the interpreter's recursion limit.
    """

    def __init__(self, scanner: Scanner, config: ParseConfig):
        self.scanner = scanner
        self.config = config

    def parse_value(self) -> Value:
        """Parses any value, dispatching on its first character."""
        scanner = self.scanner
        char = scanner.peek_or_fail()

        if char == '"':
            return Value(ValueKind.STRING, scanner.scan_string())
        elif char in _DIGITS or char == "-":
            return Value(ValueKind.NUMBER, scanner.scan_number())
        elif char == "{":
            return Value(ValueKind.OBJECT, self.parse_object())
        elif char == "[":
            return Value(ValueKind.ARRAY, self.parse_array())
        elif char in "tTfF":
            # Uppercase gets here too and fails on the exact-case match
            return Value(ValueKind.BOOLEAN, scanner.scan_boolean())
        else:
            raise BadCharError(char, 0, scanner.text, scanner.pos)

    def parse_entry(self) -> Entry:
        """Parses a key, optional separators, then a value."""
        key = self.scanner.scan_key()
        self.scanner.skip_separators()
        return Entry(key, self.parse_value())

    def parse_object(self) -> Object:
        """Parses an object; the opening character is consumed unchecked."""
        with ProfileContext("parse_object", self.scanner):
            scanner = self.scanner
            scanner.peek_or_fail()
            scanner.pos += 1

            entries: list[Entry] = []
            while True:
                scanner.skip_separators()
                if scanner.peek_or_fail() == "}":
                    break
                entries.append(self.parse_entry())

            scanner.pos += 1
            return tuple(entries)

    def parse_array(self) -> Array:
        """Parses an array; the opening character is consumed unchecked."""
        with ProfileContext("parse_array", self.scanner):
            scanner = self.scanner
            scanner.peek_or_fail()
            scanner.pos += 1

            values: list[Value] = []
            while True:
                scanner.skip_separators()
                if scanner.peek_or_fail() == "]":
                    break
                values.append(self.parse_value())

            scanner.pos += 1
            return tuple(values)

    def parse_document(self) -> tuple[Object, Span]:
        """Parses a top-level object and returns it with the remainder."""
        scanner = self.scanner
        scanner.skip_separators()

        if self.config.strict_root:
            char = scanner.peek_or_fail()
            if char != "{":
                raise BadCharError(char, 0, scanner.text, scanner.pos)

        obj = self.parse_object()
        remainder = scanner.remainder()

        if not self.config.allow_trailing:
            scanner.skip_separators()
            char = scanner.peek()
            if char is not None:
                offset = scanner.pos - remainder.start
                raise BadCharError(char, offset, scanner.text, scanner.pos)

        return obj, remainder


def _scanner_for(text: TextInput) -> Scanner:
    """Builds a Scanner over a str or, without copying, over a Span."""
    if isinstance(text, Span):
        return Scanner(text.source, text.start, text.end)
    if isinstance(text, str):
        return Scanner(text)
    raise TypeError(f"text must be str or Span, not {type(text).__name__}")


def _scan(text: TextInput, scan: Callable[[Parser], Any]) -> tuple[Any, Span]:
    parser = Parser(_scanner_for(text), ParseConfig())
    fragment = scan(parser)
    return fragment, parser.scanner.remainder()


def skip_separators(text: TextInput) -> Span:
    """Returns the input from its first non-separator character onward."""
    scanner = _scanner_for(text)
    scanner.skip_separators()
    return scanner.remainder()


def scan_string(text: TextInput) -> tuple[Span, Span]:
    """Scans a leading quoted string; returns (content, remainder)."""
    return _scan(text, lambda parser: parser.scanner.scan_string())


def scan_key(text: TextInput) -> tuple[Span, Span]:
    """Scans a leading object key; returns (key, remainder)."""
    return _scan(text, lambda parser: parser.scanner.scan_key())


def scan_number(text: TextInput) -> tuple[Span, Span]:
    """Scans a leading integer; returns (digits, remainder)."""
    return _scan(text, lambda parser: parser.scanner.scan_number())


def scan_boolean(text: TextInput) -> tuple[Span, Span]:
    """Scans a leading ``true`` or ``false``; returns (literal, remainder)."""
    return _scan(text, lambda parser: parser.scanner.scan_boolean())


def scan_value(text: TextInput) -> tuple[Value, Span]:
    """Scans a leading value of any kind; returns (value, remainder)."""
    return _scan(text, Parser.parse_value)


def scan_entry(text: TextInput) -> tuple[Entry, Span]:
    """Scans a leading ``"key": value`` pair; returns (entry, remainder)."""
    return _scan(text, Parser.parse_entry)


def scan_object(text: TextInput) -> tuple[Object, Span]:
    """Scans a leading object; returns (entries, remainder)."""
    return _scan(text, Parser.parse_object)


def scan_array(text: TextInput) -> tuple[Array, Span]:
    """Scans a leading array; returns (values, remainder)."""
    return _scan(text, Parser.parse_array)


def deserialize(s: str, **kwargs: Any) -> tuple[Object, Span]:
    """
    Parses a JSON object document into a tree of borrowed slices.

    Returns the top-level entries and whatever text followed the closing
    brace. Raises a DeserializeError subclass on the first malformed token.
    """
    if not isinstance(s, str):
        raise TypeError(f"the document must be str, not {type(s).__name__}")

    config = ParseConfig(**kwargs)
    parser = Parser(Scanner(s), config)
    try:
        return parser.parse_document()
    except DeserializeError as exc:
        logger.debug("deserialize failed with %s: %s", exc.kind.name, exc)
        raise


__all__ = [
    "Array",
    "BadCharError",
    "DeserializeError",
    "EarlyEndError",
    "Entry",
    "ErrorKind",
    "HotPathStats",
    "NoEndError",
    "Object",
    "ParseConfig",
    "Parser",
    "ProfileContext",
    "Scanner",
    "Span",
    "Value",
    "ValueKind",
    "clear_hot_path_stats",
    "deserialize",
    "get_hot_path_stats",
    "scan_array",
    "scan_boolean",
    "scan_entry",
    "scan_key",
    "scan_number",
    "scan_object",
    "scan_string",
    "scan_value",
    "skip_separators",
]
