"""JSON text encoding on top of the tree backend."""

import json
from typing import IO, Any

from dapserde.config import SerdeConfig
from dapserde.serde.serialization import SerializationError

from .tree import ABSENT, decode, encode


def dumps(
    value: Any, tp: Any = None, *, indent: int | None = None, config: SerdeConfig | None = None
) -> str:
    """Encode value as a JSON document. An unset optional encodes as null."""
    tree = encode(value, tp, config=config)
    return json.dumps(None if tree is ABSENT else tree, indent=indent)


def loads(
    tp: Any, text: str | bytes, *, into: Any = None, config: SerdeConfig | None = None
) -> Any:
    """Decode a JSON document as tp.

    Raises:
        SerializationError: If text is not valid JSON or does not decode as tp.
    """
    try:
        tree = json.loads(text)
    except json.JSONDecodeError as exc:
        raise SerializationError(f"Invalid JSON: {exc}") from exc
    return decode(tp, tree, into=into, config=config)


def dump(
    value: Any,
    fp: IO[str],
    tp: Any = None,
    *,
    indent: int | None = None,
    config: SerdeConfig | None = None,
) -> None:
    """Write value as a JSON document to fp."""
    fp.write(dumps(value, tp, indent=indent, config=config))


def load(
    tp: Any, fp: IO[str], *, into: Any = None, config: SerdeConfig | None = None
) -> Any:
    """Read a JSON document from fp and decode it as tp."""
    return loads(tp, fp.read(), into=into, config=config)
