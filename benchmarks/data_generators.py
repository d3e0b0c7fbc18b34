"""
Test documents for extraction benchmarks.

Each document comes with the key a benchmark looks up in it, placed so that
a scanner has to pass over most of the text before finding it:
- Flat records and large records with nested collections
- Long mixed arrays for counting and item access
- String-heavy content with escape sequences and decoy keys
"""

import json
import random
import string
from dataclasses import dataclass
from typing import Any

_ESCAPE_PROBABILITY = 0.3
_ESCAPES = ['\\"', "\\\\", "\\/", "\\b", "\\f", "\\n", "\\r", "\\t"]


@dataclass(frozen=True)
class BenchDocument:
    """A generated JSON text and the top-level key to extract from it."""

    text: str
    key: str


def generate_test_data(data_type: str) -> BenchDocument:
    """Generates a benchmark document of the given shape."""
    generators = {
        "small_object": _generate_small_object,
        "large_object": _generate_large_object,
        "mixed_array": _generate_mixed_array,
        "string_heavy": _generate_string_heavy,
    }

    if data_type not in generators:
        raise ValueError(f"Unknown data type: {data_type}")

    return generators[data_type]()


def generate_key_value_text(fields: int = 40) -> str:
    """Generates ``key: value`` lines with mixed scalar kinds and comments."""
    lines = []
    for i in range(fields):
        if i % 10 == 0:
            lines.append(f"# section {i // 10}")
        kind = i % 4
        if kind == 0:
            value = str(random.randint(-1000, 1000))
        elif kind == 1:
            value = random.choice(["true", "FALSE", "null"])
        elif kind == 2:
            value = f"{random.uniform(0, 100):.3f}"
        else:
            value = f'{_random_string(12)} "{_random_string(4)}"'
        lines.append(f"field_{i}: {value}")
    return "\n".join(lines)


def _generate_small_object() -> BenchDocument:
    """A flat record under 1KB; the key is the last field."""
    data = {
        "id": 12345,
        "name": "Alice Johnson",
        "active": True,
        "balance": 1234.56,
        "metadata": {"created": "2024-01-15T10:30:00Z", "source": "api"},
        "email": "alice@example.com",
    }
    return BenchDocument(json.dumps(data), "email")


def _generate_large_object() -> BenchDocument:
    """A record over 10KB whose lookup key follows two large collections."""
    data = {
        "user_id": random.randint(1000000, 9999999),
        "transactions": [
            {
                "id": f"txn_{i:06d}",
                "amount": round(random.uniform(1.0, 1000.0), 2),
                "currency": random.choice(["USD", "EUR", "GBP", "JPY"]),
                "description": f"Payment for {_random_string(20)}",
                "status": random.choice(["completed", "pending", "failed"]),
            }
            for i in range(50)
        ],
        "activity_log": [
            {
                "action": random.choice(["login", "purchase", "view"]),
                "ip_address": ".".join(
                    str(random.randint(1, 255)) for _ in range(4)
                ),
                "user_agent": f"Mozilla/5.0 ({_random_string(20)})",
            }
            for _ in range(30)
        ],
        "profile": {
            "first_name": _random_string(10),
            "last_name": _random_string(12),
            "timezone": "Europe/London",
        },
    }
    return BenchDocument(json.dumps(data), "profile")


def _generate_mixed_array() -> BenchDocument:
    """An array of 200 mixed values stored under a key."""
    items: list[Any] = []
    for i in range(200):
        choice = i % 6
        if choice == 0:
            items.append(random.randint(-1000, 1000))
        elif choice == 1:
            items.append(round(random.uniform(-100.0, 100.0), 3))
        elif choice == 2:
            items.append(_random_string(random.randint(5, 30)))
        elif choice == 3:
            items.append(random.choice([True, False, None]))
        elif choice == 4:
            items.append([i, _random_string(5)])
        else:
            items.append(
                {"index": i, "value": _random_string(10), "tags": ["a", "b"]}
            )
    return BenchDocument(json.dumps({"count": 200, "items": items}), "items")


def _generate_string_heavy() -> BenchDocument:
    """Escape-heavy strings with the lookup key also appearing as values."""

    def escaped_string() -> str:
        chars = []
        for _ in range(50):
            if random.random() < _ESCAPE_PROBABILITY:
                chars.append(random.choice(_ESCAPES))
            else:
                chars.append(
                    random.choice(string.ascii_letters + string.digits + " ")
                )
        return "".join(chars)

    data = {
        "strings": [escaped_string() for _ in range(100)],
        "decoys": ["target"] * 20,
        "paths": {
            f"key_{i}": f"C:\\Users\\{_random_string(8)}\\file_{i}.txt"
            for i in range(20)
        },
        "target": escaped_string(),
    }
    return BenchDocument(json.dumps(data), "target")


def _random_string(length: int) -> str:
    """Generates a random string of specified length."""
    return "".join(random.choices(string.ascii_letters, k=length))
