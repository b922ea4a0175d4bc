"""Storage backends for the serialization engine."""

from .jsonio import dump, dumps, load, loads
from .tree import ABSENT, TreeDeserializer, TreeSerializer, decode, encode

__all__ = [
    "ABSENT",
    "TreeDeserializer",
    "TreeSerializer",
    "decode",
    "dump",
    "dumps",
    "encode",
    "load",
    "loads",
]
