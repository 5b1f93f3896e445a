#!/usr/bin/env python3
"""
Binary to ASCII-hex line formatter

Renders a byte range into a caller-owned destination buffer as hex pairs,
optionally prefixed with '0x' and optionally followed by a printable-character
trailer per 8-byte group:

    41 42 43 1f 7f 20 00 ff    ABC.. ..
    01 02                      ..

A single space separates pairs within a group. Each full group that is
followed by more bytes ends with a '\\n', with or without the trailer, so a
rendering of more than 8 bytes spans several lines.

Destination capacity is never exceeded. When the buffer runs out of room the
formatter stops emitting bytes and returns what it wrote; nothing is raised
for truncation.
"""

from typing import Union

# Format flags
INCLUDE_HEX_PREFIX = 0x00000002
INCLUDE_DECODING = 0x00000004

BYTES_PER_GROUP = 8
DECODING_GAP = b'    '

_HEX_DIGITS = b'0123456789abcdef'

# Two lowercase hex digits (upper nibble first) for every byte value
_HEX_PAIRS = tuple(
    bytes((_HEX_DIGITS[(value >> 4) & 0x0f], _HEX_DIGITS[value & 0x0f]))
    for value in range(256)
)

BytesLike = Union[bytes, bytearray, memoryview]


def is_printable(value: int) -> bool:
    """True for bytes rendered literally in a decoding trailer"""
    return 0x1f < value < 0x7f


def printable(data: BytesLike) -> bytes:
    """Decoding trailer for data: printable bytes kept, others become '.'"""
    return bytes(value if is_printable(value) else 0x2e for value in data)


class _BoundedWriter:
    """Writes into dest[0:capacity] and silently drops anything past it"""

    __slots__ = ('dest', 'capacity', 'pos')

    def __init__(self, dest: bytearray, capacity: int):
        self.dest = dest
        self.capacity = capacity
        self.pos = 0

    def room(self) -> int:
        return self.capacity - self.pos

    def put(self, data: bytes) -> None:
        count = min(len(data), self.room())
        if count <= 0:
            return
        self.dest[self.pos:self.pos + count] = data[:count]
        self.pos += count


def _pair_width(flags: int) -> int:
    return 4 if flags & INCLUDE_HEX_PREFIX else 2


def _min_room(flags: int) -> int:
    # pair (+ '0x') plus room for a line terminator and a string terminator
    return 7 if flags & INCLUDE_HEX_PREFIX else 5


def hex_area_width(flags: int = 0) -> int:
    """Width of the hex part of a full 8-byte group"""
    return BYTES_PER_GROUP * (_pair_width(flags) + 1) - 1


def required_capacity(length: int, flags: int = 0) -> int:
    """Destination size that holds the complete rendering of length bytes"""
    if length <= 0:
        return 0
    groups = (length + BYTES_PER_GROUP - 1) // BYTES_PER_GROUP
    per_group = hex_area_width(flags) + 1 + len(DECODING_GAP) + BYTES_PER_GROUP
    return groups * per_group + _min_room(flags)


def bin2hex(dest: bytearray, capacity: int, src: BytesLike, length: int,
            flags: int = 0) -> int:
    """
    Format length bytes of src as ASCII hex into dest.

    Args:
        dest: Destination buffer, written in place from offset 0
        capacity: Number of bytes of dest that may be written
        src: Source bytes
        length: Number of source bytes to format
        flags: INCLUDE_HEX_PREFIX and/or INCLUDE_DECODING

    Returns:
        Number of characters written to dest. No terminator is appended.

    Raises:
        ValueError: On negative length or capacity, capacity larger than
            dest, or length larger than src
    """
    if length < 0:
        raise ValueError(f"Invalid length: {length}")
    if capacity < 0 or capacity > len(dest):
        raise ValueError(f"Invalid capacity: {capacity} (destination holds {len(dest)})")
    if length == 0:
        return 0

    source = memoryview(src).cast('B')
    if length > len(source):
        raise ValueError(f"Length {length} exceeds source size {len(source)}")

    show_prefix = bool(flags & INCLUDE_HEX_PREFIX)
    show_printable = bool(flags & INCLUDE_DECODING)
    min_room = _min_room(flags)
    hex_area = hex_area_width(flags)

    out = _BoundedWriter(dest, capacity)
    converted = 0
    group_start = 0
    group_column = 0

    for idx in range(length):
        if out.room() < min_room:
            break

        if show_prefix:
            out.put(b'0x')
        out.put(_HEX_PAIRS[source[idx]])
        converted += 1

        # Nothing follows the last byte of the input
        if converted == length:
            break

        if converted % BYTES_PER_GROUP == 0:
            if show_printable:
                out.put(DECODING_GAP)
                out.put(printable(source[group_start:converted]))
            out.put(b'\n')
            group_start = converted
            group_column = out.pos
        else:
            out.put(b' ')

    if show_printable and converted > group_start:
        # Line the trailer up with the trailer of a full group
        out.put(b' ' * (group_column + hex_area - out.pos))
        out.put(DECODING_GAP)
        out.put(printable(source[group_start:converted]))

    return out.pos


def hexlify(data: BytesLike, flags: int = 0) -> str:
    """Render all of data and return it as a string"""
    source = memoryview(data).cast('B')
    capacity = required_capacity(len(source), flags)
    dest = bytearray(capacity)
    written = bin2hex(dest, capacity, source, len(source), flags)
    return dest[:written].decode('ascii')
