#!/usr/bin/env python3
"""
Example: Basic usage of NlDebug package

This example logs one RTM_GETLINK dump request/response exchange on a
NETLINK_ROUTE socket:
  - Part 1: Format a buffer directly with hexfmt
  - Part 2: Send and receive through the logging socket wrappers
  - Part 3: Name the message types found in the reply

Note: opening a NETLINK_ROUTE socket does not require root for dump requests.
"""

import logging
import socket
import struct
import sys

NLM_F_REQUEST = 0x01
NLM_F_DUMP = 0x300
RTM_GETLINK = 18


def build_getlink_request(seq: int) -> bytes:
    """nlmsghdr + ifinfomsg asking for every link"""
    ifinfomsg = struct.pack("=BxHiII", socket.AF_UNSPEC, 0, 0, 0, 0)
    header = struct.pack("=IHHII", 16 + len(ifinfomsg), RTM_GETLINK,
                         NLM_F_REQUEST | NLM_F_DUMP, seq, 0)
    return header + ifinfomsg


def part1_format():
    """Part 1: Direct formatting"""
    print("\nPart 1: Direct Formatting")
    print("-" * 70)

    from nldebug import hexfmt

    request = build_getlink_request(1)
    print(hexfmt.hexlify(request, hexfmt.INCLUDE_DECODING))


def part2_exchange():
    """Part 2: Logged socket calls"""
    print("\nPart 2: Logged Socket Calls")
    print("-" * 70)

    from nldebug.sock_debug import dbg_sock_sendmsg, dbg_sock_recv

    with socket.socket(socket.AF_NETLINK, socket.SOCK_RAW, socket.NETLINK_ROUTE) as sock:
        request = build_getlink_request(2)
        dbg_sock_sendmsg(sock, [request[:16], request[16:]], (), 0, (0, 0), "part2_exchange")
        return dbg_sock_recv(sock, 65536, 0, "part2_exchange")


def part3_names(reply: bytes):
    """Part 3: Message type names"""
    print("\nPart 3: Message Types In Reply")
    print("-" * 70)

    from nldebug.code_names import rtm_to_string, netlink_to_string

    print(f"Socket protocol: {netlink_to_string(socket.NETLINK_ROUTE)}")
    offset = 0
    while offset + 16 <= len(reply):
        length, msg_type = struct.unpack_from("=IH", reply, offset)
        print(f"  offset {offset:5d}: {rtm_to_string(msg_type)} ({length} bytes)")
        if length < 16:
            break
        offset += (length + 3) & ~3


def main():
    logging.basicConfig(level=logging.INFO, format="%(message)s")

    print("=" * 70)
    print("NlDebug Basic Usage Examples")
    print("=" * 70)

    try:
        part1_format()
        reply = part2_exchange()
        part3_names(reply)
    except PermissionError:
        print("Error: netlink socket not permitted here", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        import traceback
        traceback.print_exc()
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
