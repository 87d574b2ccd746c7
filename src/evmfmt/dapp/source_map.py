"""
Solidity source map decoding.

Parses the compressed ``srcmap`` / ``srcmap-runtime`` strings from solc
combined.json output.
Format specification: https://docs.soliditylang.org/en/latest/internals/source_mappings.html

Each entry is `s:l:f:j:m` where:
- s = byte offset in source file
- l = length in bytes
- f = source file index (-1 = no source)
- j = jump type (i=into function, o=out of function, -=regular)
- m = modifier depth

Entries are separated by `;` and there is one entry per instruction. Empty
fields inherit from the previous entry.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from evmfmt.utils.logging import get_logger

logger = get_logger('dapp')


@dataclass(frozen=True)
class SourceMapEntry:
    """Single source mapping entry."""
    offset: int
    length: int
    file_index: int
    jump_type: str = "-"
    modifier_depth: int = 0

    def is_valid(self) -> bool:
        """Check if this entry points to valid source."""
        return self.file_index >= 0 and self.offset >= 0


@dataclass(frozen=True)
class SourceFile:
    path: str
    content: bytes

    def line_at(self, offset: int) -> int:
        """1-based line number of a byte offset."""
        return self.content.count(b"\n", 0, offset) + 1

    @classmethod
    def load(cls, path: Union[str, Path], display_path: Optional[str] = None) -> 'SourceFile':
        with open(path, 'rb') as f:
            content = f.read()
        return cls(display_path or str(path), content)


def _field(fields: List[str], index: int, previous):
    if len(fields) > index and fields[index].strip():
        value = fields[index].strip()
        return value if isinstance(previous, str) else int(value)
    return previous


def parse_source_map(srcmap: str) -> List[SourceMapEntry]:
    """
    Parse a compressed source map into one entry per instruction.

    Raises:
        ValueError: If a numeric field is not an integer
    """
    if not srcmap:
        return []

    entries = []
    prev = SourceMapEntry(offset=0, length=0, file_index=-1)

    for part in srcmap.split(";"):
        fields = part.split(":") if part else []
        entry = SourceMapEntry(
            offset=_field(fields, 0, prev.offset),
            length=_field(fields, 1, prev.length),
            file_index=_field(fields, 2, prev.file_index),
            jump_type=_field(fields, 3, prev.jump_type),
            modifier_depth=_field(fields, 4, prev.modifier_depth),
        )
        entries.append(entry)
        prev = entry

    return entries


def code_position(
    sources: Dict[int, SourceFile],
    entry: SourceMapEntry
) -> Optional[Tuple[str, int]]:
    """Map a source map entry to ``(path, line)``; None when the source is unknown."""
    if not entry.is_valid():
        return None
    source = sources.get(entry.file_index)
    if source is None:
        logger.debug(f"No source loaded for file index {entry.file_index}")
        return None
    return source.path, source.line_at(entry.offset)
