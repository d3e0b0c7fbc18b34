"""
Resumable array cursor tests.

Validates the cursor lifecycle across separate calls: initialization options,
stepping, end-of-sequence handling and host-style activations.
"""

import pytest

import jspan
from jspan import ArrayCursor
from jspan import CursorState
from jspan import CursorStep


def test_steps_through_items() -> None:
    """
    Validates each call hands out one item and reports what remains.
    """
    cursor = ArrayCursor()
    assert cursor.initialize('["a", "b", "c"]') is CursorState.READY
    assert cursor.fresh

    assert cursor.next() == CursorStep('"a"', 0, has_more=True, total_count=3)
    assert not cursor.fresh
    assert cursor.next() == CursorStep('"b"', 1, has_more=True, total_count=3)
    assert cursor.next() == CursorStep('"c"', 2, has_more=False, total_count=3)
    assert cursor.state is CursorState.EXHAUSTED

    assert cursor.next() is None
    assert cursor.state is CursorState.UNINITIALIZED


def test_exhausted_cursor_persists_without_auto_reset() -> None:
    """
    Validates the cursor stays exhausted until reset when auto_reset is off.
    """
    cursor = ArrayCursor(auto_reset=False)
    cursor.initialize("[1]")

    assert cursor.next().item == "1"
    assert cursor.next() is None
    assert cursor.next() is None
    assert cursor.state is CursorState.EXHAUSTED
    assert cursor.index == 1

    cursor.reset()
    assert cursor.state is CursorState.UNINITIALIZED
    assert cursor.items == ()
    assert cursor.index == 0


def test_start_index_and_max_items() -> None:
    """
    Validates truncation happens before the start index is applied.
    """
    cursor = ArrayCursor()
    cursor.initialize("[10, 20, 30, 40]", start_index=1, max_items=2)

    assert cursor.items == ("10", "20")
    assert cursor.total_count == 4
    assert cursor.next() == CursorStep("20", 1, has_more=False, total_count=4)
    assert cursor.next() is None


def test_negative_start_index_clamped() -> None:
    """
    Validates a negative start index begins at the first item.
    """
    cursor = ArrayCursor()
    cursor.initialize("[1, 2]", start_index=-3)
    assert cursor.next().index == 0


@pytest.mark.parametrize("text", ["[]", "[ ]", "not an array", "", None])
def test_empty_source_is_exhausted(text) -> None:
    """
    Validates an empty view is exhausted straight after initialization.
    """
    cursor = ArrayCursor()
    assert cursor.initialize(text) is CursorState.EXHAUSTED
    assert cursor.total_count == 0
    assert cursor.next() is None


def test_start_past_end_is_exhausted() -> None:
    """
    Validates a start index beyond the items yields no steps.
    """
    cursor = ArrayCursor()
    assert cursor.initialize("[1, 2]", start_index=2) is CursorState.EXHAUSTED
    assert cursor.next() is None


def test_array_located_by_key(catalog_document) -> None:
    """
    Validates iteration over an array stored under a key.
    """
    cursor = ArrayCursor()
    cursor.initialize(catalog_document, array_key="items")

    names = [jspan.get_value(step.item, "name").raw for step in cursor]
    assert names == ["bolt", "nut", "washer"]


def test_iterator_protocol() -> None:
    """
    Validates the cursor can drive a for loop and is spent afterwards.
    """
    cursor = ArrayCursor()
    cursor.initialize('[{"a": 1}, [2], "3"]')

    assert [step.item for step in cursor] == ['{"a": 1}', "[2]", '"3"']
    assert list(cursor) == []


def test_uninitialized_next() -> None:
    """
    Validates stepping before initialization reports end-of-sequence.
    """
    cursor = ArrayCursor()
    assert cursor.next() is None
    assert cursor.state is CursorState.UNINITIALIZED


def test_activations_resume_position() -> None:
    """
    Validates repeated activations continue where the last one stopped.
    """
    doc = "[1, 2]"
    cursor = ArrayCursor()

    assert cursor.activate(doc).item == "1"
    assert cursor.activate(doc).item == "2"
    assert cursor.activate(doc) is None
    assert cursor.activate(doc).item == "1"


def test_activation_reinitializes_on_request() -> None:
    """
    Validates a reinitializing activation starts over with new options.
    """
    doc = "[1, 2, 3]"
    cursor = ArrayCursor()

    assert cursor.activate(doc).item == "1"
    assert cursor.activate(doc, reinitialize=True).item == "1"
    assert cursor.activate(doc, reinitialize=True, start_index=2).item == "3"


def test_invalid_option() -> None:
    """
    Validates non-boolean auto_reset is rejected.
    """
    with pytest.raises(TypeError, match="auto_reset"):
        ArrayCursor(auto_reset="no")  # type: ignore[arg-type]
