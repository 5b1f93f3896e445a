#!/usr/bin/env python3
"""
Hex/ASCII logging of buffers and scatter-gather messages

A named buffer is logged as a header line followed by one line per 8-byte
chunk, each carrying the chunk's memory address:

    iovec: [12] bytes
    0x00007f3a5c2e1b40: [10 00 00 00 12 00 01 03    ........]
    0x00007f3a5c2e1b48: [01 00 00 00                ....]

All lines are emitted at INFO level; filtering is left to the logging
configuration of the application.
"""

import logging
from typing import Optional, Sequence

from . import hexfmt
from . import libc

log = logging.getLogger(__name__)

MAX_BYTES_PER_LINE = 8
LINE_BUFFER_SIZE = 512


class MsgHdr:
    """
    Scatter-gather message descriptor.

    Attributes:
        name: Socket address part (raw struct sockaddr bytes) or None
        iov: Ordered data chunks
    """

    def __init__(self, name: Optional[bytes] = None, iov: Sequence = ()):
        self.name = name
        self.iov = list(iov)

    @property
    def msg_namelen(self) -> int:
        return 0 if self.name is None else len(self.name)

    @property
    def msg_iovlen(self) -> int:
        return len(self.iov)

    def __repr__(self) -> str:
        return f'MsgHdr(msg_namelen={self.msg_namelen}, msg_iovlen={self.msg_iovlen})'


def log_buffer(message: str, data, size: Optional[int] = None,
               logger: Optional[logging.Logger] = None) -> None:
    """
    Log data as 8-byte hex/ASCII lines.

    Args:
        message: Label for the header line
        data: bytes-like object, cffi pointer, or None
        size: Number of bytes to log (required for cffi pointers)
        logger: Destination logger (defaults to this module's logger)

    Raises:
        ValueError: If size is negative or larger than the buffer
    """
    logger = logger or log

    if size is not None and size < 0:
        raise ValueError(f"Invalid buffer size: {size}")

    if libc.is_null(data):
        logger.log(logging.INFO, "%s: [%d] bytes", message, size or 0)
        return

    view = libc.as_view(data, size)
    if size is None:
        size = len(view)
    elif size > len(view):
        raise ValueError(f"Size {size} exceeds buffer length {len(view)}")

    logger.log(logging.INFO, "%s: [%d] bytes", message, size)
    if size == 0:
        return

    base = libc.buffer_address(data)
    offset = 0
    remaining = size

    while remaining > 0:
        count = min(remaining, MAX_BYTES_PER_LINE)

        line = bytearray(LINE_BUFFER_SIZE)
        written = hexfmt.bin2hex(line, len(line), view[offset:], count,
                                 hexfmt.INCLUDE_DECODING)

        logger.log(logging.INFO, "0x%016x: [%s]", base + offset,
                   line[:written].decode('ascii'))

        # Advance by the nominal chunk size even if the line was truncated
        offset += MAX_BYTES_PER_LINE
        remaining -= count


def dump_iovec(iov, logger: Optional[logging.Logger] = None) -> None:
    """Log one iovec: a bytes-like chunk or a cffi 'struct iovec'"""
    if libc.is_cdata(iov) and libc.ffi.typeof(iov).kind == 'struct':
        log_buffer("iovec", iov.iov_base, iov.iov_len, logger)
    else:
        log_buffer("iovec", iov, None, logger)


def dump_msghdr(msg, logger: Optional[logging.Logger] = None) -> None:
    """
    Log the address part and every chunk of a scatter-gather message.

    Args:
        msg: MsgHdr, or a cffi 'struct msghdr *'
        logger: Destination logger
    """
    if libc.is_cdata(msg):
        log_buffer("msg_name", msg.msg_name, msg.msg_namelen, logger)
        for k in range(msg.msg_iovlen):
            dump_iovec(msg.msg_iov[k], logger)
        return

    log_buffer("msg_name", msg.name, msg.msg_namelen, logger)
    for iov in msg.iov:
        dump_iovec(iov, logger)
