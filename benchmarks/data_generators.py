"""
Test value generators for transcoding benchmarks.

Creates canonical Python values shaped to hit each TOON layout:
- Uniform records (tabular arrays)
- Heterogeneous arrays (expanded list items)
- Deep nesting and string-heavy content that needs quoting
"""

import json
import random
import string
from typing import Any

import toonfmt

# Constants for random data generation
_INT_TYPE = 1
_FLOAT_TYPE = 2
_STRING_TYPE = 3
_BOOL_TYPE = 4
_NULL_TYPE = 5
_ESCAPE_PROBABILITY = 0.3

DATA_TYPES = [
    "small_object",
    "tabular_records",
    "mixed_array",
    "nested_structure",
    "string_heavy",
]


def generate_test_value(data_type: str, seed: int = 1234) -> Any:
    """Generates a canonical value of the specified type."""
    generators = {
        "small_object": _generate_small_object,
        "tabular_records": _generate_tabular_records,
        "mixed_array": _generate_mixed_array,
        "nested_structure": _generate_nested_structure,
        "string_heavy": _generate_string_heavy,
    }

    if data_type not in generators:
        raise ValueError(f"Unknown data type: {data_type}")

    random.seed(seed)
    return generators[data_type]()


def generate_documents(data_type: str) -> tuple[Any, str, str]:
    """Returns the value with its JSON and TOON renderings."""
    value = generate_test_value(data_type)
    return value, json.dumps(value), toonfmt.encode(value)


def _generate_small_object() -> dict[str, Any]:
    """Generates a small object with scalars and one nested map."""
    return {
        "id": 12345,
        "name": "Alice Johnson",
        "email": "alice@example.com",
        "active": True,
        "balance": 1234.56,
        "tags": ["admin", "ops", "on-call"],
        "metadata": {"created": "2024-01-15T10:30:00Z", "source": "api"},
    }


def _generate_tabular_records() -> dict[str, Any]:
    """Generates uniform records, the layout TOON is built for."""
    return {
        "transactions": [
            {
                "id": f"txn_{i:06d}",
                "amount": round(random.uniform(1.0, 1000.0), 2),
                "currency": random.choice(["USD", "EUR", "GBP", "JPY"]),
                "timestamp": f"2024-{random.randint(1, 12):02d}-"
                f"{random.randint(1, 28):02d}T{random.randint(0, 23):02d}:00Z",
                "description": f"Payment for {_random_string(20)}",
                "status": random.choice(["completed", "pending", "failed"]),
                "settled": random.choice([True, False]),
            }
            for i in range(500)
        ]
    }


def _generate_mixed_array() -> list[Any]:
    """Generates an array mixing primitives, records and small arrays."""
    array: list[Any] = []

    for i in range(200):
        choice = random.randint(1, 7)
        if choice == _INT_TYPE:
            array.append(random.randint(-1000, 1000))
        elif choice == _FLOAT_TYPE:
            array.append(round(random.uniform(-100.0, 100.0), 3))
        elif choice == _STRING_TYPE:
            array.append(_random_string(random.randint(5, 30)))
        elif choice == _BOOL_TYPE:
            array.append(random.choice([True, False]))
        elif choice == _NULL_TYPE:
            array.append(None)
        elif choice == 6:
            array.append([random.randint(0, 9) for _ in range(4)])
        else:
            array.append(
                {
                    "index": i,
                    "value": _random_string(10),
                    "scores": [round(random.uniform(0, 100), 2)],
                }
            )

    return array


def _generate_nested_structure() -> dict[str, Any]:
    """Generates a deeply nested structure."""

    def create_nested_dict(depth: int) -> dict[str, Any]:
        if depth <= 0:
            return {"value": _random_string(10)}

        return {
            "level": depth,
            "data": _random_string(15),
            "items": [create_nested_dict(depth - 1) for _ in range(3)],
            "nested": create_nested_dict(depth - 1),
        }

    return create_nested_dict(6)


def _generate_string_heavy() -> dict[str, Any]:
    """Generates strings that force quoting and escaping."""

    def create_awkward_string() -> str:
        chars = []
        for _ in range(50):
            if random.random() < _ESCAPE_PROBABILITY:
                chars.append(random.choice(['"', "\\", "\n", "\t", ",", ":"]))
            else:
                chars.append(
                    random.choice(string.ascii_letters + string.digits + " ")
                )
        return "".join(chars)

    return {
        "strings": [create_awkward_string() for _ in range(100)],
        "lookalikes": ["true", "null", "42", "-1.5e3", "- item", ""] * 10,
        "files": {
            f"key_{i}": {
                "description": create_awkward_string(),
                "path": f"C:\\Users\\{_random_string(8)}\\file_{i}.txt",
            }
            for i in range(20)
        },
    }


def _random_string(length: int) -> str:
    """Generates a random string of specified length."""
    return "".join(random.choices(string.ascii_letters, k=length))
