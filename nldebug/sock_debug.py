#!/usr/bin/env python3
"""
Logging pass-through wrappers for socket calls

Each wrapper logs a banner naming the call, the file descriptor and a
caller tag, dumps the outbound payload for send-side calls, then performs
the real call and returns its result unchanged. Errors raised by the socket
call propagate as-is.

Receive-side wrappers log the banner only: the received data does not
exist yet when the banner is written, and received payloads are not dumped
after the call either.

Usage:
    from nldebug.sock_debug import dbg_sock_send, dbg_sock_recv

    dbg_sock_send(sock, request, 0, "nl_transact")
    reply = dbg_sock_recv(sock, 65536, 0, "nl_transact")
"""

import logging
import socket
from typing import Iterable, List, Optional, Tuple, Union

from . import libc
from .buffer_log import MsgHdr, dump_msghdr, log_buffer

log = logging.getLogger(__name__)

RULE = '~' * 78


def _banner(function: str, sock, caller: str, msg: Optional[MsgHdr] = None) -> None:
    log.log(logging.INFO, RULE)
    if msg is None:
        log.log(logging.INFO, "%s: fd: [%d] caller: [%s]...",
                function, libc.fileno(sock), caller)
    else:
        log.log(logging.INFO, "%s: fd: [%d] msg->msg_iovlen: [%d] caller: [%s]...",
                function, libc.fileno(sock), msg.msg_iovlen, caller)


def _msg_name(sock, address) -> Optional[bytes]:
    try:
        return libc.sockaddr_bytes(sock.family, address)
    except Exception:
        # Only rendered for the dump; sendmsg reports bad addresses itself
        return None


def dbg_sock_send(sock: socket.socket, data, flags: int = 0, caller: str = '') -> int:
    """socket.send() with the outgoing bytes logged first"""
    _banner('dbg_sock_send', sock, caller)
    log_buffer(caller, data, None, log)
    log.log(logging.INFO, RULE)

    return sock.send(data, flags)


def dbg_sock_sendmsg(sock: socket.socket, buffers: Iterable, ancdata: Iterable = (),
                     flags: int = 0, address=None, caller: str = '') -> int:
    """socket.sendmsg() with the destination address and every buffer logged first"""
    buffers = list(buffers)
    msg = MsgHdr(_msg_name(sock, address), buffers)

    _banner('dbg_sock_sendmsg', sock, caller, msg)
    dump_msghdr(msg, log)
    log.log(logging.INFO, RULE)

    if address is None:
        return sock.sendmsg(buffers, ancdata, flags)
    return sock.sendmsg(buffers, ancdata, flags, address)


def dbg_sock_recv(sock: socket.socket, bufsize: int, flags: int = 0,
                  caller: str = '') -> bytes:
    _banner('dbg_sock_recv', sock, caller)
    log.log(logging.INFO, RULE)

    return sock.recv(bufsize, flags)


def dbg_sock_recvmsg(sock: socket.socket, bufsize: int, ancbufsize: int = 0,
                     flags: int = 0, caller: str = '') -> Tuple:
    _banner('dbg_sock_recvmsg', sock, caller)
    log.log(logging.INFO, RULE)

    return sock.recvmsg(bufsize, ancbufsize, flags)


def dbg_sock_recvfrom(sock: socket.socket, bufsize: int, flags: int = 0,
                      caller: str = '') -> Tuple:
    _banner('dbg_sock_recvfrom', sock, caller)
    log.log(logging.INFO, RULE)

    return sock.recvfrom(bufsize, flags)


def dbg_sock_recvmmsg(sock: Union[int, socket.socket], vlen: int, bufsize: int,
                      flags: int = 0, timeout: Optional[float] = None,
                      caller: str = '') -> List[bytes]:
    """Batched receive through libc recvmmsg(2); see libc.recvmmsg"""
    _banner('dbg_sock_recvmmsg', sock, caller)
    log.log(logging.INFO, RULE)

    return libc.recvmmsg(sock, vlen, bufsize, flags, timeout)
