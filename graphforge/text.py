"""Plain-text rendering of values and sequences, one record per line."""

from __future__ import annotations

import io
from collections.abc import Iterable, Sequence
from typing import IO, Any

DEFAULT_BLOCK_SIZE = 1_000_000


def format_value(value: Any) -> str:
    """Render a value as text.

    Integers are written in decimal, floats as ``%.11e``, strings as they are,
    and tuples or lists as their components separated by single spaces.
    ``None`` stands for an empty weight and is left out of a record.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return str(int(value))
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return "%.11e" % value
    if isinstance(value, str):
        return value
    if isinstance(value, bytes):
        return value.decode("ascii")
    if isinstance(value, (tuple, list)):
        return " ".join(format_value(part) for part in value if part is not None)
    raise TypeError(f"cannot format value of type {type(value).__name__}")


def sequence_to_string(values: Iterable[Any]) -> str:
    """Render every value on its own line, each line ending with a newline."""
    return "".join(f"{format_value(value)}\n" for value in values)


def array_to_string(values: Iterable[Any]) -> str:
    """Render an array of records, one per line; empty weights are omitted."""
    return "".join(f"{format_value(value)}\n" for value in values)


def write_array_to_stream(
    stream: IO[Any], values: Sequence[Any], block_size: int = DEFAULT_BLOCK_SIZE
) -> int:
    """Write ``values`` to ``stream`` in blocks of at most ``block_size`` records.

    Text streams receive ``str``, any other stream receives ASCII bytes.
    Returns the number of characters written.
    """
    if block_size <= 0:
        raise ValueError("block_size must be positive")
    text_stream = isinstance(stream, io.TextIOBase)
    written = 0
    for offset in range(0, len(values), block_size):
        chunk = array_to_string(values[offset : offset + block_size])
        stream.write(chunk if text_stream else chunk.encode("ascii"))
        written += len(chunk)
    return written