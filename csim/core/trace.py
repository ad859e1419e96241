"""Trace parsing for valgrind-style memory traces.

Each line looks like ``[space]op address,size``, for example ``" L 7ff0005c8,8"``.
op is one of I (instruction fetch), L (load), S (store) or M (modify).
Instruction fetches and lines that do not parse are skipped; only data
accesses reach the simulator.
"""
import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, Optional, TextIO

from .cache import ADDRESS_MASK

logger = logging.getLogger(__name__)

_LINE_RE = re.compile(r'^\s*([A-Za-z])\s+(?:0[xX])?([0-9a-fA-F]+)\s*,\s*(\d+)\s*$')


class Operation(Enum):
    INSTRUCTION = 'I'
    LOAD = 'L'
    STORE = 'S'
    MODIFY = 'M'


DATA_OPERATIONS = frozenset((Operation.LOAD, Operation.STORE, Operation.MODIFY))


def split_lines(address: int, length: int, block_size: int) -> Iterator[int]:
    """Yield the address of every cache line touched by an access.

    The first address is yielded as is, followed by every block-aligned
    address inside ``[address, address + length)``. Lengths of 0 or 1
    touch a single line.
    """
    yield address
    if length <= 1:
        return
    boundary = (address // block_size + 1) * block_size
    yield from range(boundary, address + length, block_size)


@dataclass(frozen=True)
class TraceRecord:
    operation: Operation
    address: int
    length: int

    @property
    def is_data_access(self) -> bool:
        return self.operation in DATA_OPERATIONS

    def line_addresses(self, block_size: int) -> Iterator[int]:
        return split_lines(self.address, self.length, block_size)

    def __str__(self):
        return f"{self.operation.value} {self.address:x},{self.length}"


def parse_line(text: str) -> Optional[TraceRecord]:
    """Parse one trace line. Returns None for blank or malformed lines."""
    m = _LINE_RE.match(text)
    if m is None:
        return None
    op, addr, size = m.groups()
    try:
        operation = Operation(op.upper())
    except ValueError:
        return None
    address = int(addr, 16)
    if address > ADDRESS_MASK:
        return None
    return TraceRecord(operation, address, int(size))


def parse_trace(lines: Iterable[str]) -> Iterator[TraceRecord]:
    """Yield the data-access records (L/S/M) of a trace, in file order."""
    for lineno, text in enumerate(lines, start=1):
        record = parse_line(text)
        if record is None:
            if text.strip():
                logger.debug("skipping malformed trace line %d: %r", lineno, text.rstrip('\n'))
            continue
        if not record.is_data_access:
            continue
        yield record


def open_trace(path: str) -> TextIO:
    """Open a trace file for reading.

    Undecodable bytes become U+FFFD so the line fails to parse and is
    skipped instead of aborting the replay.
    """
    return open(path, 'r', encoding='ascii', errors='replace')


def read_trace(path: str) -> Iterator[TraceRecord]:
    """Yield the data-access records of the trace file at `path`."""
    with open_trace(path) as fh:
        yield from parse_trace(fh)
