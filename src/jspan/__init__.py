"""
Scan-in-place JSON extraction, building and merging.

Locates keys, value spans and array items directly in raw JSON text without
building a parse tree, and formats typed key/value pairs back into JSON text.
"""

import logging
import os
import re
import time
from collections.abc import Iterable
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum
from typing import Any
from typing import TypeAlias

from ._codec import CodecError
from ._codec import TextEncoding
from ._codec import decode_bytes
from ._codec import encode_text
from ._codec import from_base64
from ._codec import to_base64

__version__ = "0.1.0"

logger = logging.getLogger(__name__)

# Type aliases for domain concepts
Offset: TypeAlias = int
Field: TypeAlias = tuple[str, str]
# Insertion-ordered key -> raw value text, one level deep
ObjectMap: TypeAlias = dict[str, str]

# Profiling infrastructure - zero-cost when disabled
PROFILE_HOT_PATHS = __debug__ and "JSPAN_PROFILE" in os.environ

NOT_FOUND = "NOT_FOUND"
ABSENT_TYPE = "none"

_DIGITS = "0123456789"
_LITERALS = ("null", "true", "false")
_NUMBER_RE = re.compile(r"-?\d+(?:\.\d+)?(?:[eE][+-]?\d+)?")
_INT_RE = re.compile(r"[+-]?\d+")
_FLOAT_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_PREVIEW_LIMIT = 50


@dataclass
class HotPathStats:
    """Statistics for profiling hot paths during scanning."""

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

    class ProfileContext:
        """Context manager for profiling hot paths."""

        def __init__(self, func_name: str, chars_to_process: int = 0):
            self.func_name = func_name
            self.chars = chars_to_process
            self.start_time = 0

        def __enter__(self) -> "ProfileContext":
            self.start_time = time.perf_counter_ns()
            return self

        def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
            duration = time.perf_counter_ns() - self.start_time
            if self.func_name not in _hot_path_stats:
                _hot_path_stats[self.func_name] = HotPathStats(self.func_name)
            _hot_path_stats[self.func_name].record_call(duration, self.chars)

    def get_hot_path_stats() -> dict[str, HotPathStats]:
        """Returns current profiling statistics."""
        return _hot_path_stats.copy()

    def clear_hot_path_stats() -> None:
        """Clears profiling statistics."""
        _hot_path_stats.clear()

else:
    # Zero-cost in production - ignore arguments
    class ProfileContext:  # type: ignore[no-redef]
        def __init__(self, func_name: str, chars: int = 0) -> None:
            pass

        def __enter__(self) -> "ProfileContext":
            return self

        def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
            pass

    def get_hot_path_stats() -> dict[str, HotPathStats]:
        return {}

    def clear_hot_path_stats() -> None:
        pass


class TypeTag(Enum):
    """
    Category of a scanned JSON value.

    Values are the category names reported to callers; an absent value is
    reported as ``"none"`` rather than through a member.
    """

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    NULL = "null"
    OBJECT = "object"
    ARRAY = "array"
    UNKNOWN = "unknown"


class MergePolicy(Enum):
    """Conflict rule applied when a key appears in more than one object."""

    OVERRIDE = "override"
    KEEP_FIRST = "keep_first"
    APPEND = "append"


class CursorState(Enum):
    """Lifecycle of an ArrayCursor."""

    UNINITIALIZED = "uninitialized"
    READY = "ready"
    EXHAUSTED = "exhausted"


@dataclass(frozen=True)
class ValueSpan:
    """
    Region of a source text holding one JSON value.

    Offsets index into ``source``; the substring is only materialized when
    ``text`` is read. String spans produced by ``scan_value`` exclude the
    surrounding quotes, array item spans keep them.
    """

    source: str
    start: Offset
    end: Offset
    type: TypeTag

    @property
    def text(self) -> str:
        return self.source[self.start : self.end]

    @property
    def found(self) -> bool:
        return self.type is not TypeTag.UNKNOWN


@dataclass(frozen=True)
class ArrayView:
    """Ordered top-level items of one array text."""

    source: str
    items: tuple[ValueSpan, ...] = ()

    @property
    def count(self) -> int:
        return len(self.items)

    @property
    def texts(self) -> tuple[str, ...]:
        return tuple(item.text for item in self.items)

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[str]:
        return (item.text for item in self.items)


@dataclass(frozen=True)
class LookupConfig:
    """
    Configures multi-key lookups with immutable settings.

    Controls the marker stored for missing keys and whether a lookup stops at
    the first missing key.
    """

    empty_for_missing: bool = True
    stop_on_missing: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.empty_for_missing, bool):
            raise TypeError("empty_for_missing must be a boolean")
        if not isinstance(self.stop_on_missing, bool):
            raise TypeError("stop_on_missing must be a boolean")

    @property
    def missing_marker(self) -> str:
        return "" if self.empty_for_missing else NOT_FOUND


@dataclass(frozen=True)
class BuildConfig:
    """
    Configures object building from raw key/value pairs.

    Centralized options for output layout, scalar type detection and which
    incomplete pairs are dropped before formatting.
    """

    pretty: bool = False
    auto_detect: bool = True
    skip_empty_keys: bool = True
    allow_empty_values: bool = True

    def __post_init__(self) -> None:
        for name in (
            "pretty",
            "auto_detect",
            "skip_empty_keys",
            "allow_empty_values",
        ):
            if not isinstance(getattr(self, name), bool):
                raise TypeError(f"{name} must be a boolean")


@dataclass(frozen=True)
class MergeConfig:
    """Configures object merging with immutable settings."""

    policy: MergePolicy = MergePolicy.OVERRIDE
    deep: bool = True
    pretty: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.policy, MergePolicy):
            raise TypeError("policy must be a MergePolicy")
        if not isinstance(self.deep, bool):
            raise TypeError("deep must be a boolean")
        if not isinstance(self.pretty, bool):
            raise TypeError("pretty must be a boolean")


@dataclass(frozen=True)
class ValueResult:
    """
    Outcome of a single key lookup.

    ``raw`` keeps escape sequences exactly as they appear in the source; the
    typed accessors fall back to zero/false when the text does not convert.
    """

    found: bool
    raw: str = ""
    type: TypeTag | None = None

    @property
    def type_name(self) -> str:
        return self.type.value if self.type is not None else ABSENT_TYPE

    @property
    def as_int(self) -> int:
        return to_int(self.raw) if self.found else 0

    @property
    def as_float(self) -> float:
        return to_float(self.raw) if self.found else 0.0

    @property
    def as_bool(self) -> bool:
        return to_bool(self.raw) if self.found else False


@dataclass(frozen=True)
class ValuesResult:
    """Per-key values and found flags of a multi-key lookup, in key order."""

    values: tuple[str, ...]
    flags: tuple[bool, ...]

    @property
    def found_count(self) -> int:
        return sum(self.flags)

    @property
    def all_found(self) -> bool:
        return bool(self.flags) and all(self.flags)


@dataclass(frozen=True)
class ItemResult:
    """Array item lookup outcome; ``total_count`` is valid even when absent."""

    found: bool
    item: str = ""
    total_count: int = 0
    type: TypeTag | None = None


@dataclass(frozen=True)
class CreateResult:
    text: str
    fields_added: int


@dataclass(frozen=True)
class MergeResult:
    """Merged object text plus merge statistics."""

    text: str
    objects_merged: int
    total_keys: int
    ok: bool


@dataclass(frozen=True)
class CursorStep:
    """One item handed out by an ArrayCursor."""

    item: str
    index: int
    has_more: bool
    total_count: int


def _require_text(text: str | None, name: str = "JSON text") -> str:
    """Normalizes absent text to an empty string and rejects non-str input."""
    if text is None:
        return ""
    if not isinstance(text, str):
        raise TypeError(f"the {name} must be str, not {type(text).__name__}")
    return text


def _preview(text: str) -> str:
    if len(text) > _PREVIEW_LIMIT:
        return text[:_PREVIEW_LIMIT] + "..."
    return text


def escape(text: str | None) -> str:
    """
    Escapes text for embedding between double quotes.

    Backslash is replaced first so the escapes added afterwards are not
    escaped twice.
    """
    if not text:
        return ""
    return (
        text.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\r", "\\r")
        .replace("\t", "\\t")
    )


def _skip_whitespace(text: str, pos: Offset) -> Offset:
    length = len(text)
    while pos < length and text[pos].isspace():
        pos += 1
    return pos


def _trim_bounds(
    text: str, start: Offset, end: Offset
) -> tuple[Offset, Offset]:
    """Narrows [start, end) so it neither starts nor ends with whitespace."""
    start = _skip_whitespace(text, start)
    while end > start and text[end - 1].isspace():
        end -= 1
    return start, end


def _classify(text: str, pos: Offset) -> TypeTag:
    """Determines a value's type from its first character alone."""
    if pos >= len(text):
        return TypeTag.UNKNOWN

    char = text[pos]
    if char == '"':
        return TypeTag.STRING
    elif char == "{":
        return TypeTag.OBJECT
    elif char == "[":
        return TypeTag.ARRAY
    elif text.startswith("null", pos):
        return TypeTag.NULL
    elif text.startswith("true", pos) or text.startswith("false", pos):
        return TypeTag.BOOLEAN
    elif char in _DIGITS or char == "-":
        return TypeTag.NUMBER
    return TypeTag.UNKNOWN


def detect_type(text: str | None) -> TypeTag:
    """Classifies a raw value text by its first non-whitespace character."""
    text = _require_text(text)
    return _classify(text, _skip_whitespace(text, 0))


def _find_string_end(text: str, pos: Offset) -> Offset:
    """Returns the offset of the quote closing the string body at pos, or -1."""
    escaped = False
    for i in range(pos, len(text)):
        char = text[i]
        if escaped:
            escaped = False
        elif char == "\\":
            escaped = True
        elif char == '"':
            return i
    return -1


def _find_container_end(text: str, pos: Offset) -> Offset:
    """
    Returns the offset just past the bracket closing the container at pos.

    Only the container's own bracket pair is counted, and brackets inside
    string literals are ignored. Returns -1 when the text ends first.
    """
    opener = text[pos]
    closer = "}" if opener == "{" else "]"
    depth = 1
    in_string = False
    escaped = False

    for i in range(pos + 1, len(text)):
        char = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
        elif char == '"':
            in_string = True
        elif char == opener:
            depth += 1
        elif char == closer:
            depth -= 1
            if depth == 0:
                return i + 1
    return -1


def _scan_number_end(text: str, pos: Offset) -> Offset:
    length = len(text)
    while pos < length:
        char = text[pos]
        if char in ",}]" or char.isspace():
            break
        pos += 1
    return pos


def scan_value(text: str | None, start: Offset = 0) -> ValueSpan:
    """
    Scans the JSON value beginning at or after ``start``.

    Never raises for malformed input: an unrecognized first character or an
    unterminated string or container yields an empty span typed UNKNOWN.
    """
    text = _require_text(text)
    with ProfileContext("scan_value", len(text) - start):
        pos = _skip_whitespace(text, max(0, start))
        value_type = _classify(text, pos)
        invalid = ValueSpan(text, pos, pos, TypeTag.UNKNOWN)

        if value_type is TypeTag.STRING:
            end = _find_string_end(text, pos + 1)
            if end == -1:
                return invalid
            return ValueSpan(text, pos + 1, end, value_type)
        elif value_type in (TypeTag.OBJECT, TypeTag.ARRAY):
            end = _find_container_end(text, pos)
            if end == -1:
                return invalid
            return ValueSpan(text, pos, end, value_type)
        elif value_type in (TypeTag.NULL, TypeTag.BOOLEAN):
            for literal in _LITERALS:
                if text.startswith(literal, pos):
                    return ValueSpan(text, pos, pos + len(literal), value_type)
        elif value_type is TypeTag.NUMBER:
            end = _scan_number_end(text, pos)
            return ValueSpan(text, pos, end, value_type)
        return invalid


def locate(object_text: str | None, key: str | None) -> ValueSpan | None:
    """
    Finds the value following ``"key":`` in an object text.

    An occurrence of the quoted key counts only when nothing but whitespace
    separates it from the next colon; otherwise the search resumes just past
    that occurrence, so its closing quote never opens another match. This is
    a substring search, not a tokenizer: a quoted key inside a nested string
    that happens to be followed by a colon is still accepted.

    Returns None when no occurrence qualifies, and an UNKNOWN span when the
    key exists but its value cannot be scanned.
    """
    object_text = _require_text(object_text)
    key = _require_text(key, "key")
    if not object_text or not key:
        return None

    with ProfileContext("locate", len(object_text)):
        pattern = f'"{key}"'
        search_from = 0

        while True:
            match = object_text.find(pattern, search_from)
            if match == -1:
                return None

            after = match + len(pattern)
            colon = object_text.find(":", after)
            if colon == -1:
                return None

            if not object_text[after:colon].strip():
                return scan_value(object_text, colon + 1)

            logger.debug("Rejected false match for key %r at %d", key, match)
            search_from = after


def has_key(text: str | None, key: str | None) -> tuple[bool, str]:
    """Reports whether ``key`` exists and the category name of its value."""
    span = locate(text, key)
    if span is None:
        logger.debug("Key %r not found", key)
        return False, ABSENT_TYPE
    return True, span.type.value


def get_value(text: str | None, key: str | None) -> ValueResult:
    """Extracts the raw value text of ``key`` along with its type."""
    span = locate(text, key)
    if span is None or not span.found:
        logger.debug("Key %r not found", key)
        return ValueResult(found=False)

    logger.debug(
        "Key %r = %r (%s)", key, _preview(span.text), span.type.value
    )
    return ValueResult(found=True, raw=span.text, type=span.type)


def get_values(
    text: str | None, keys: Iterable[str | None], **kwargs: Any
) -> ValuesResult:
    """
    Extracts several keys at once, keeping the order of ``keys``.

    Missing keys are reported with ``False`` flags and the configured missing
    marker. With ``stop_on_missing`` every key after the first missing one is
    reported missing without being searched.
    """
    config = LookupConfig(**kwargs)
    text = _require_text(text)
    keys = list(keys)
    missing = config.missing_marker
    values: list[str] = []
    flags: list[bool] = []

    for position, key in enumerate(keys):
        result = get_value(text, key) if key else ValueResult(found=False)
        if result.found:
            values.append(result.raw)
            flags.append(True)
            continue

        values.append(missing)
        flags.append(False)
        if config.stop_on_missing:
            logger.debug("Stopped at missing key %r", key)
            remaining = len(keys) - position - 1
            values.extend([missing] * remaining)
            flags.extend([False] * remaining)
            break

    logger.debug("Found %d/%d keys", sum(flags), len(keys))
    return ValuesResult(tuple(values), tuple(flags))


def _container_interior(
    text: str, opener: str, closer: str
) -> tuple[Offset, Offset] | None:
    """Returns the offsets inside a trimmed ``opener ... closer`` text."""
    start, end = _trim_bounds(text, 0, len(text))
    if end - start < 2 or text[start] != opener or text[end - 1] != closer:
        return None
    return start + 1, end - 1


def _iter_segments(
    text: str, start: Offset, end: Offset
) -> Iterator[tuple[Offset, Offset]]:
    """
    Yields the untrimmed comma-separated segments of text[start:end].

    Only commas at depth 0 outside string literals separate segments. A
    backslash escapes the character after it, quotes toggle the string state,
    and both bracket kinds change the depth.
    """
    depth = 0
    in_string = False
    escaped = False
    segment_start = start

    for i in range(start, end):
        char = text[i]
        if escaped:
            escaped = False
        elif char == "\\":
            escaped = True
        elif char == '"':
            in_string = not in_string
        elif in_string:
            continue
        elif char in "[{":
            depth += 1
        elif char in "]}":
            depth -= 1
        elif char == "," and depth == 0:
            yield segment_start, i
            segment_start = i + 1

    yield segment_start, end


def _item_span(text: str, start: Offset, end: Offset) -> ValueSpan:
    start, end = _trim_bounds(text, start, end)
    value_type = _classify(text, start) if start < end else TypeTag.UNKNOWN
    return ValueSpan(text, start, end, value_type)


def _array_segments(
    array_text: str,
) -> Iterator[tuple[Offset, Offset]]:
    bounds = _container_interior(array_text, "[", "]")
    if bounds is None:
        return
    start, end = bounds
    if not array_text[start:end].strip():
        return
    yield from _iter_segments(array_text, start, end)


def split_array(array_text: str | None) -> ArrayView:
    """
    Splits an array text into its top-level item spans.

    Text that is not a trimmed ``[...]`` and arrays with a blank interior
    both give an empty view.
    """
    array_text = _require_text(array_text)
    with ProfileContext("split_array", len(array_text)):
        items = tuple(
            _item_span(array_text, start, end)
            for start, end in _array_segments(array_text)
        )
        return ArrayView(array_text, items)


def get_item(
    array_text: str | None, index: int
) -> tuple[ValueSpan | None, int]:
    """
    Returns the item at ``index`` and the array's total item count.

    Negative indices are rejected before scanning and report a count of 0.
    An index past the end gives None with the correct count.
    """
    array_text = _require_text(array_text)
    if index < 0:
        return None, 0

    item: ValueSpan | None = None
    count = 0
    for count, (start, end) in enumerate(
        _array_segments(array_text), start=1
    ):
        if count - 1 == index:
            item = _item_span(array_text, start, end)
    return item, count


def _resolve_array(text: str, array_key: str | None) -> str:
    """Returns the array text itself, or the array stored under array_key."""
    if not array_key:
        return text

    span = locate(text, array_key)
    if span is None or span.type is not TypeTag.ARRAY:
        logger.debug("Array key %r not found", array_key)
        return ""
    return span.text


def array_count(text: str | None, array_key: str | None = None) -> int:
    """Counts the items of an array text or of the array under ``array_key``."""
    array_text = _resolve_array(_require_text(text), array_key)
    _, count = get_item(array_text, 0)
    return count


def array_get_item(
    text: str | None, index: int, array_key: str | None = None
) -> ItemResult:
    """Fetches one array item, optionally locating the array by key first."""
    array_text = _resolve_array(_require_text(text), array_key)
    item, count = get_item(array_text, index)
    if item is None:
        logger.debug("No item at index %d (count %d)", index, count)
        return ItemResult(found=False, total_count=count)

    logger.debug("Item at index %d: %s", index, _preview(item.text))
    return ItemResult(
        found=True, item=item.text, total_count=count, type=item.type
    )


def _find_top_level_colon(segment: str) -> Offset:
    in_string = False
    escaped = False
    for i, char in enumerate(segment):
        if escaped:
            escaped = False
        elif char == "\\":
            escaped = True
        elif char == '"':
            in_string = not in_string
        elif char == ":" and not in_string:
            return i
    return -1


def _strip_quotes(key: str) -> str:
    if len(key) >= 2 and key.startswith('"') and key.endswith('"'):
        return key[1:-1]
    return key


def parse_flat(object_text: str | None) -> ObjectMap | None:
    """
    Parses one level of an object text into key -> raw value text.

    Returns None when the trimmed text is not ``{...}``. Nested values stay
    raw; segments without a colon are skipped.
    """
    object_text = _require_text(object_text)
    with ProfileContext("parse_flat", len(object_text)):
        bounds = _container_interior(object_text, "{", "}")
        if bounds is None:
            return None

        result: ObjectMap = {}
        for start, end in _iter_segments(object_text, *bounds):
            segment = object_text[start:end].strip()
            if not segment:
                continue

            colon = _find_top_level_colon(segment)
            if colon == -1:
                logger.debug("Skipping segment without colon: %s", segment)
                continue

            key = _strip_quotes(segment[:colon].strip())
            result[key] = segment[colon + 1 :].strip()
        return result


def _is_shaped(raw: str, opener: str) -> bool:
    return raw.strip().startswith(opener)


def _concat_arrays(existing: str, incoming: str) -> str:
    items = split_array(existing).texts + split_array(incoming).texts
    return "[" + ",".join(items) + "]"


def _merge_nested(
    existing: str, incoming: str, policy: MergePolicy, pretty: bool
) -> str | None:
    """Deep-merges two nested object texts, or None if either does not parse."""
    existing_map = parse_flat(existing)
    incoming_map = parse_flat(incoming)
    if existing_map is None or incoming_map is None:
        return None
    nested = merge([existing_map, incoming_map], policy, True, pretty)
    return dump_map(nested, pretty)


def _merge_into(
    target: ObjectMap,
    source: ObjectMap,
    policy: MergePolicy,
    deep: bool,
    pretty: bool,
) -> None:
    for key, value in source.items():
        if key in target:
            existing = target[key]

            if policy is MergePolicy.KEEP_FIRST:
                logger.debug("Keeping first value for key: %s", key)
                continue

            if deep and _is_shaped(existing, "{") and _is_shaped(value, "{"):
                nested = _merge_nested(existing, value, policy, pretty)
                if nested is not None:
                    logger.debug("Deep merged nested object: %s", key)
                    target[key] = nested
                    continue

            if (
                policy is MergePolicy.APPEND
                and _is_shaped(existing, "[")
                and _is_shaped(value, "[")
            ):
                logger.debug("Appending array items for key: %s", key)
                target[key] = _concat_arrays(existing, value)
                continue

            logger.debug("Overriding key: %s", key)
        target[key] = value


def merge(
    maps: Iterable[ObjectMap],
    policy: MergePolicy = MergePolicy.OVERRIDE,
    deep: bool = False,
    pretty: bool = False,
) -> ObjectMap:
    """
    Folds object maps left to right into a new map.

    Input maps are never modified. KEEP_FIRST keeps any existing value as is.
    Otherwise, with ``deep``, a key whose existing and incoming values are
    both objects is merged recursively under the same policy and stored
    re-serialized (indented when ``pretty``); any other conflict follows
    ``policy``.
    """
    with ProfileContext("merge"):
        merged: ObjectMap = {}
        for obj_map in maps:
            _merge_into(merged, obj_map, policy, deep, pretty)
        return merged


def _write_object(pairs: Iterable[tuple[str, str]], pretty: bool) -> str:
    """Writes quoted keys and verbatim values; keys must already be escaped."""
    indent = "  " if pretty else ""
    newline = "\n" if pretty else ""
    separator = ": " if pretty else ":"

    lines = [f'{indent}"{key}"{separator}{value}' for key, value in pairs]
    if not lines:
        return "{" + newline + "}"
    return "{" + newline + ("," + newline).join(lines) + newline + "}"


def dump_map(obj_map: ObjectMap, pretty: bool = False) -> str:
    """Serializes an ObjectMap; keys and values are written as stored."""
    return _write_object(obj_map.items(), pretty)


def merge_texts(texts: Iterable[str | None], **kwargs: Any) -> MergeResult:
    """
    Merges object texts, ignoring empty and unparseable ones.

    When no text parses as an object the result is ``{}`` with ``ok`` False.
    """
    config = MergeConfig(**kwargs)
    candidates = [text for text in map(_require_text, texts) if text]

    parsed: list[ObjectMap] = []
    for text in candidates:
        obj_map = parse_flat(text)
        if obj_map is None:
            logger.warning(
                "Invalid JSON object (must start with { and end with }): %s",
                _preview(text.strip()),
            )
            continue
        parsed.append(obj_map)

    if not parsed:
        logger.warning("No valid JSON objects to merge")
        return MergeResult("{}", objects_merged=0, total_keys=0, ok=False)

    logger.debug("Merging %d JSON objects", len(parsed))
    merged = merge(parsed, config.policy, config.deep, config.pretty)
    return MergeResult(
        dump_map(merged, config.pretty),
        objects_merged=len(parsed),
        total_keys=len(merged),
        ok=True,
    )


def _is_container_text(trimmed: str) -> bool:
    return (trimmed.startswith("{") and trimmed.endswith("}")) or (
        trimmed.startswith("[") and trimmed.endswith("]")
    )


def format_scalar(raw: str | None, auto_detect: bool = True) -> str:
    """
    Formats raw text as a JSON value.

    With ``auto_detect``, null/true/false (any case) become literals, numbers
    and object/array texts pass through trimmed (nested JSON is not
    validated), and everything else becomes an escaped quoted string.
    """
    if not raw:
        return '""'
    if not auto_detect:
        return f'"{escape(raw)}"'

    trimmed = raw.strip()
    lowered = trimmed.lower()
    if lowered in _LITERALS:
        return lowered
    if _NUMBER_RE.fullmatch(trimmed):
        return trimmed
    if _is_container_text(trimmed):
        return trimmed
    return f'"{escape(raw)}"'


def build(fields: Iterable[Field], pretty: bool = False) -> str:
    """
    Serializes (key, formatted value) pairs into an object text.

    Keys are escaped and quoted, values are written verbatim. Duplicate keys
    are kept.
    """
    with ProfileContext("build"):
        return _write_object(
            ((escape(key), value) for key, value in fields), pretty
        )


def _keep_field(key: str, value: str, config: BuildConfig) -> bool:
    if config.skip_empty_keys and not key:
        return False
    if not config.allow_empty_values and not value:
        logger.debug("Skipping %r - empty value", key)
        return False
    return True


def parse_key_value_text(
    text: str | None,
    skip_empty_keys: bool = True,
    allow_empty_values: bool = True,
) -> list[Field]:
    """
    Parses ``key:value`` lines into fields.

    Each line splits at its first colon. Blank lines, lines starting with
    ``//`` or ``#`` and lines without a colon are ignored.
    """
    config = BuildConfig(
        skip_empty_keys=skip_empty_keys, allow_empty_values=allow_empty_values
    )
    fields: list[Field] = []
    for line in _require_text(text).splitlines():
        trimmed = line.strip()
        if not trimmed or trimmed.startswith(("//", "#")):
            continue
        if ":" not in trimmed:
            continue

        key, _, value = trimmed.partition(":")
        key, value = key.strip(), value.strip()
        if _keep_field(key, value, config):
            fields.append((key, value))
    return fields


def create(
    fields: Iterable[tuple[str | None, str | None]] = (),
    text: str | None = None,
    **kwargs: Any,
) -> CreateResult:
    """
    Builds an object text from raw key/value pairs.

    Pairs parsed from ``text`` come first, followed by ``fields``; each value
    is formatted with ``format_scalar`` before building.
    """
    config = BuildConfig(**kwargs)
    collected: list[Field] = []

    if text:
        collected.extend(
            parse_key_value_text(
                text, config.skip_empty_keys, config.allow_empty_values
            )
        )

    for key, value in fields:
        key, value = key or "", value or ""
        if _keep_field(key, value, config):
            collected.append((key, value))

    formatted = [
        (key, format_scalar(value, config.auto_detect))
        for key, value in collected
    ]
    if not formatted:
        logger.debug("No valid fields to create JSON")
    return CreateResult(build(formatted, config.pretty), len(formatted))


def to_int(raw: str | None) -> int:
    """Converts raw text to int, substituting 0 when it is not an integer."""
    trimmed = (raw or "").strip()
    if _INT_RE.fullmatch(trimmed):
        return int(trimmed)
    logger.warning("Cannot convert %r to int", raw)
    return 0


def to_float(raw: str | None) -> float:
    """Converts raw text to float with a '.' decimal point, else 0.0."""
    trimmed = (raw or "").strip()
    if _FLOAT_RE.fullmatch(trimmed):
        return float(trimmed)
    logger.warning("Cannot convert %r to float", raw)
    return 0.0


def to_bool(raw: str | None) -> bool:
    """
    Converts raw text to bool.

    ``true``/``1`` are True and ``false``/``0``/``null`` are False regardless
    of case; any other non-empty text is True.
    """
    lowered = (raw or "").lower()
    if lowered in ("true", "1"):
        return True
    if lowered in ("false", "0", "null"):
        return False
    return bool(raw)


class ArrayCursor:
    """
    Resumable iterator over the top-level items of one array text.

    Each ``next()`` call hands out one item and advances, so the position
    survives between separate activations until ``reset()`` or a fresh
    ``initialize()``. With ``auto_reset`` the cursor clears itself once it
    reports the end of the sequence; otherwise it stays exhausted until reset.
    """

    def __init__(self, auto_reset: bool = True) -> None:
        if not isinstance(auto_reset, bool):
            raise TypeError("auto_reset must be a boolean")
        self.auto_reset = auto_reset
        self.reset()

    def reset(self) -> None:
        """Discards all iteration state."""
        self.state = CursorState.UNINITIALIZED
        self.items: tuple[str, ...] = ()
        self.index = 0
        self.total_count = 0
        self.fresh = False

    def initialize(
        self,
        text: str | None,
        start_index: int = 0,
        max_items: int = 0,
        array_key: str | None = None,
    ) -> CursorState:
        """
        Loads the items to iterate and positions the cursor.

        ``total_count`` is the array's full item count; ``max_items`` > 0
        truncates the items actually iterated.
        """
        array_text = _resolve_array(_require_text(text), array_key)
        items = split_array(array_text).texts

        self.total_count = len(items)
        if max_items > 0 and len(items) > max_items:
            items = items[:max_items]
        self.items = items
        self.index = max(0, start_index)
        self.fresh = True
        self.state = (
            CursorState.READY
            if self.index < len(self.items)
            else CursorState.EXHAUSTED
        )

        if not self.items:
            logger.debug("Array is empty")
        else:
            logger.debug("Starting loop with %d items", len(self.items))
        return self.state

    def next(self) -> CursorStep | None:
        """
        Returns the item under the cursor and advances by one.

        Returns None at the end of the sequence without advancing.
        """
        self.fresh = False
        if self.state is not CursorState.READY:
            self._finish()
            return None

        step = CursorStep(
            item=self.items[self.index],
            index=self.index,
            has_more=self.index + 1 < len(self.items),
            total_count=self.total_count,
        )
        logger.debug(
            "Item %d/%d: %s",
            self.index + 1,
            len(self.items),
            _preview(step.item),
        )

        self.index += 1
        if self.index >= len(self.items):
            self.state = CursorState.EXHAUSTED
        return step

    def activate(
        self, text: str | None, reinitialize: bool = False, **kwargs: Any
    ) -> CursorStep | None:
        """
        Runs one host activation: initialize if asked or needed, then step.

        Keyword arguments are passed to ``initialize``.
        """
        if reinitialize or self.state is CursorState.UNINITIALIZED:
            self.initialize(text, **kwargs)
        return self.next()

    def _finish(self) -> None:
        if self.state is CursorState.UNINITIALIZED:
            return
        logger.debug("Loop complete, processed %d items", len(self.items))
        if self.auto_reset:
            self.reset()
        else:
            self.state = CursorState.EXHAUSTED

    def __iter__(self) -> "ArrayCursor":
        return self

    def __next__(self) -> CursorStep:
        step = self.next()
        if step is None:
            raise StopIteration
        return step


__all__ = [
    "ABSENT_TYPE",
    "NOT_FOUND",
    "ArrayCursor",
    "ArrayView",
    "BuildConfig",
    "CodecError",
    "CreateResult",
    "CursorState",
    "CursorStep",
    "Field",
    "HotPathStats",
    "ItemResult",
    "LookupConfig",
    "MergeConfig",
    "MergePolicy",
    "MergeResult",
    "ObjectMap",
    "TextEncoding",
    "TypeTag",
    "ValueResult",
    "ValueSpan",
    "ValuesResult",
    "array_count",
    "array_get_item",
    "build",
    "clear_hot_path_stats",
    "create",
    "decode_bytes",
    "detect_type",
    "dump_map",
    "encode_text",
    "escape",
    "format_scalar",
    "from_base64",
    "get_hot_path_stats",
    "get_item",
    "get_value",
    "get_values",
    "has_key",
    "locate",
    "merge",
    "merge_texts",
    "parse_flat",
    "parse_key_value_text",
    "scan_value",
    "split_array",
    "to_base64",
    "to_bool",
    "to_float",
    "to_int",
]
