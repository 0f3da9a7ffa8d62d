"""Loading and parsing of type-hint tables."""

import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Union

from .types import TypeHintTable


def normalize_type_hints(raw: Any) -> TypeHintTable:
    """
    Check the shape of a hint table and return a copy of it.

    A bare string value is accepted as a one-tag sequence. Tags themselves
    are not checked here; an unknown tag only fails when a value uses it.

    Args:
        raw: Mapping of key to tag or list of tags

    Returns:
        A new TypeHintTable

    Raises:
        ValueError: If the table has the wrong shape or an empty sequence
    """
    if not isinstance(raw, dict):
        raise ValueError(f"Type hints must be an object, got {type(raw).__name__}")

    table: Dict[str, List[str]] = {}
    for key, tags in raw.items():
        if not isinstance(key, str):
            raise ValueError(f"Type hint key must be a string, got {type(key).__name__}")
        if isinstance(tags, str):
            tags = [tags]
        if not isinstance(tags, (list, tuple)):
            raise ValueError(f"Type hints for {key!r} must be a list of tags")
        if not tags:
            raise ValueError(f"Type hints for {key!r} must not be empty")
        if not all(isinstance(tag, str) for tag in tags):
            raise ValueError(f"Type hints for {key!r} must all be strings")
        table[key] = list(tags)
    return table


def load_type_hints(path: Union[str, Path]) -> TypeHintTable:
    """
    Load a hint table from a JSON file.

    Example file: {"Fee": ["int64"], "": ["int64", "uint64"]}

    Raises:
        ValueError: If the file is not valid JSON or the table is malformed
        OSError: If the file cannot be read
    """
    text = Path(path).read_text(encoding="utf-8")
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid type hint file {path}: {e.msg} at line {e.lineno}") from e
    return normalize_type_hints(raw)


def parse_hint_option(option: str) -> TypeHintTable:
    """
    Parse a KEY=tag[,tag...] pair; an empty KEY is the positional wildcard.

    >>> parse_hint_option("=int64,uint64")
    {'': ['int64', 'uint64']}
    """
    key, sep, tags = option.partition("=")
    if not sep:
        raise ValueError(f"Type hint {option!r} must look like KEY=tag[,tag...]")
    sequence = [tag.strip() for tag in tags.split(",") if tag.strip()]
    return normalize_type_hints({key: sequence})


def merge_type_hints(tables: Iterable[TypeHintTable]) -> TypeHintTable:
    """Merge hint tables; later tables win per key."""
    merged: Dict[str, List[str]] = {}
    for table in tables:
        merged.update(table)
    return merged
