#!/usr/bin/env python3
"""
C library access via CFFI (ABI mode)

Declares the socket structures the dump code understands (iovec, msghdr,
mmsghdr, sockaddr_*) and binds recvmmsg(2), which the socket module does
not expose. The C library is opened lazily on first use, so importing this
module never touches the dynamic loader.

Requirements:
    - Python 3.8+
    - cffi>=1.12.0
"""

import os
import socket
from typing import List, Optional, Union

from cffi import FFI

ffi = FFI()
ffi.cdef("""
struct iovec {
    void *iov_base;
    size_t iov_len;
};

struct msghdr {
    void *msg_name;
    unsigned int msg_namelen;
    struct iovec *msg_iov;
    size_t msg_iovlen;
    void *msg_control;
    size_t msg_controllen;
    int msg_flags;
};

struct mmsghdr {
    struct msghdr msg_hdr;
    unsigned int msg_len;
};

struct timespec {
    long tv_sec;
    long tv_nsec;
};

struct sockaddr_nl {
    unsigned short nl_family;
    unsigned short nl_pad;
    uint32_t nl_pid;
    uint32_t nl_groups;
};

struct sockaddr_in {
    unsigned short sin_family;
    uint16_t sin_port;
    unsigned char sin_addr[4];
    unsigned char sin_zero[8];
};

struct sockaddr_in6 {
    unsigned short sin6_family;
    uint16_t sin6_port;
    uint32_t sin6_flowinfo;
    unsigned char sin6_addr[16];
    uint32_t sin6_scope_id;
};

struct sockaddr_un {
    unsigned short sun_family;
    char sun_path[108];
};

int recvmmsg(int sockfd, struct mmsghdr *msgvec, unsigned int vlen,
             int flags, struct timespec *timeout);
""")

AF_NETLINK = getattr(socket, 'AF_NETLINK', 16)
AF_UNIX = getattr(socket, 'AF_UNIX', 1)

_lib = None


def load_libc():
    """Open the process C library (once)"""
    global _lib
    if _lib is None:
        try:
            _lib = ffi.dlopen(None)
        except OSError as e:
            raise RuntimeError(f"Unable to load the C library: {e}") from e
    return _lib


def fileno(sock: Union[int, socket.socket]) -> int:
    """File descriptor of a socket object, or sock itself if already an int"""
    if isinstance(sock, int):
        return sock
    return int(sock.fileno())


def is_cdata(data) -> bool:
    return isinstance(data, ffi.CData)


def is_null(data) -> bool:
    """True for None and for a NULL cdata pointer"""
    if data is None:
        return True
    return is_cdata(data) and data == ffi.NULL


def as_view(data, size: Optional[int] = None) -> memoryview:
    """
    Byte view over data.

    cdata pointers need an explicit size; for Python buffers size defaults
    to the whole buffer.
    """
    if is_cdata(data):
        if size is None:
            raise ValueError("A size is required to read from a C pointer")
        return memoryview(ffi.buffer(ffi.cast("char *", data), size))
    return memoryview(data).cast('B')


def buffer_address(data) -> int:
    """Memory address of the first byte of data"""
    if is_cdata(data):
        return int(ffi.cast("uintptr_t", data))
    return int(ffi.cast("uintptr_t", ffi.from_buffer(data)))


def sockaddr_bytes(family: int, address) -> Optional[bytes]:
    """
    Encode a socket module address tuple as the raw struct sockaddr.

    Returns None when there is no address or the family is not one of
    netlink, unix, inet or inet6.
    """
    if address is None:
        return None
    if isinstance(address, (bytes, bytearray, memoryview)) and family != AF_UNIX:
        return bytes(address)

    if family == AF_NETLINK:
        pid, groups = address
        sa = ffi.new("struct sockaddr_nl *")
        sa.nl_family = family
        sa.nl_pid = pid
        sa.nl_groups = groups
        return ffi.buffer(sa)[:]

    if family == socket.AF_INET:
        host, port = address[:2]
        try:
            packed = socket.inet_pton(socket.AF_INET, host)
        except OSError:
            # Hostnames are resolved by the kernel call, not here
            return None
        sa = ffi.new("struct sockaddr_in *")
        sa.sin_family = family
        sa.sin_port = socket.htons(port)
        ffi.memmove(sa.sin_addr, packed, len(packed))
        return ffi.buffer(sa)[:]

    if family == socket.AF_INET6:
        host, port = address[:2]
        try:
            packed = socket.inet_pton(socket.AF_INET6, host)
        except OSError:
            return None
        sa = ffi.new("struct sockaddr_in6 *")
        sa.sin6_family = family
        sa.sin6_port = socket.htons(port)
        if len(address) > 2:
            sa.sin6_flowinfo = address[2]
        if len(address) > 3:
            sa.sin6_scope_id = address[3]
        ffi.memmove(sa.sin6_addr, packed, len(packed))
        return ffi.buffer(sa)[:]

    if family == AF_UNIX:
        path = os.fsencode(address) if isinstance(address, str) else bytes(address)
        sa = ffi.new("struct sockaddr_un *")
        sa.sun_family = family
        path = path[:ffi.sizeof(sa.sun_path)]
        ffi.memmove(sa.sun_path, path, len(path))
        # sun_family + path, plus the NUL of a filesystem path
        length = ffi.offsetof("struct sockaddr_un", "sun_path") + len(path)
        if path and not path.startswith(b'\0') and len(path) < ffi.sizeof(sa.sun_path):
            length += 1
        return ffi.buffer(sa)[:length]

    return None


def recvmmsg(sock: Union[int, socket.socket], vlen: int, bufsize: int,
             flags: int = 0, timeout: Optional[float] = None) -> List[bytes]:
    """
    Receive up to vlen datagrams with a single recvmmsg(2) call.

    Args:
        sock: Socket object or file descriptor
        vlen: Maximum number of messages
        bufsize: Receive buffer size per message
        flags: MSG_* flags passed to the kernel
        timeout: Optional timeout in seconds (struct timespec)

    Returns:
        List of received datagrams, at most vlen

    Raises:
        OSError: If recvmmsg returns -1 (errno preserved)
    """
    if vlen <= 0:
        raise ValueError(f"Invalid message count: {vlen}")
    if bufsize <= 0:
        raise ValueError(f"Invalid buffer size: {bufsize}")

    lib = load_libc()

    messages = ffi.new("struct mmsghdr[]", vlen)
    iovecs = ffi.new("struct iovec[]", vlen)
    buffers = [ffi.new("char[]", bufsize) for _ in range(vlen)]

    for k, buf in enumerate(buffers):
        iovecs[k].iov_base = buf
        iovecs[k].iov_len = bufsize
        messages[k].msg_hdr.msg_iov = iovecs + k
        messages[k].msg_hdr.msg_iovlen = 1

    tmo = ffi.NULL
    if timeout is not None:
        tmo = ffi.new("struct timespec *")
        tmo.tv_sec = int(timeout)
        tmo.tv_nsec = int((timeout - int(timeout)) * 1000000000)

    count = lib.recvmmsg(fileno(sock), messages, vlen, flags, tmo)
    if count < 0:
        err = ffi.errno
        raise OSError(err, os.strerror(err))

    return [
        ffi.buffer(buffers[k], min(messages[k].msg_len, bufsize))[:]
        for k in range(count)
    ]
