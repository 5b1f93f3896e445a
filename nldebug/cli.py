#!/usr/bin/env python3
"""
nldebug - netlink debug dump tool

Commands:
- hexdump: log a file (or stdin) as 8-byte hex/ASCII lines with addresses
- hex:     format a hex string the way the dump lines are formatted
- name:    resolve numeric codes to symbolic names
- codes:   list every name of a code space

Requirements:
    - Python 3.8+
    - cffi>=1.12.0

Usage:
    nldebug hexdump capture.bin                 # Dump a whole file
    nldebug hexdump capture.bin -o 16 -n 32     # 32 bytes from offset 16
    nldebug hex 100000001200010300000000 -p     # Format with 0x prefixes
    nldebug name rtm 16 24 0x1e                 # RTM_NEWLINK RTM_NEWROUTE RTM_GETNEIGH
    nldebug codes tca -j                        # TCA names as JSON
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

from . import __version__
from . import hexfmt
from .buffer_log import log_buffer
from .code_names import CODE_TABLES, code_to_string

# Check Python version
if sys.version_info < (3, 8):
    print("Error: Python 3.8 or higher is required", file=sys.stderr)
    sys.exit(1)


def _code(value: str) -> int:
    """Integer in decimal, hex (0x..) or octal (0o..)"""
    try:
        return int(value, 0)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid code: {value!r}") from None


def _read_input(path: str) -> bytes:
    if path == '-':
        return sys.stdin.buffer.read()
    with open(path, 'rb') as fh:
        return fh.read()


def cmd_hexdump(args) -> int:
    data = _read_input(args.file)
    if args.offset < 0 or args.offset > len(data):
        raise ValueError(f"Offset {args.offset} outside input of {len(data)} bytes")
    data = data[args.offset:]
    if args.length is not None:
        data = data[:args.length]
    log_buffer(args.label or args.file, data)
    return 0


def cmd_hex(args) -> int:
    data = bytes.fromhex(''.join(args.hex))
    flags = 0
    if args.prefix:
        flags |= hexfmt.INCLUDE_HEX_PREFIX
    if not args.no_decoding:
        flags |= hexfmt.INCLUDE_DECODING
    text = hexfmt.hexlify(data, flags)
    if text:
        print(text)
    return 0


def cmd_name(args) -> int:
    for code in args.codes:
        print(f"{code}: {code_to_string(args.space, code)}")
    return 0


def cmd_codes(args) -> int:
    table = CODE_TABLES[args.space]
    if args.json:
        print(json.dumps({str(code): name for code, name in table.items()}, indent=2))
    else:
        for code, name in table.items():
            print(f"  {code:5d}  {name}")
        print(f"\nTotal codes: {len(table)} (fallback: {table.fallback})")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='nldebug',
        description='Netlink debug dump tool - hex/ASCII dumps and protocol code names',
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument('--version', action='version',
                        version=f'nldebug {__version__}')
    parser.add_argument('--quiet', '-q', action='store_true',
                        help='Suppress dump output (log level WARNING)')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Prefix log lines with time, level and logger name')

    sub = parser.add_subparsers(dest='command')
    sub.required = True

    p = sub.add_parser('hexdump', help='Dump a file as 8-byte hex/ASCII lines')
    p.add_argument('file', help="Input file ('-' for stdin)")
    p.add_argument('--offset', '-o', type=int, default=0,
                   help='Start offset in the input (default: 0)')
    p.add_argument('--length', '-n', type=int,
                   help='Number of bytes to dump (default: all)')
    p.add_argument('--label', '-l', type=str,
                   help='Header label (default: file name)')
    p.set_defaults(func=cmd_hexdump)

    p = sub.add_parser('hex', help='Format a hex string')
    p.add_argument('hex', nargs='+', help='Hex digits, e.g. 41424344 or "41 42 43 44"')
    p.add_argument('--prefix', '-p', action='store_true',
                   help='Prefix every byte with 0x')
    p.add_argument('--no-decoding', action='store_true',
                   help='Omit the printable-character trailer')
    p.set_defaults(func=cmd_hex)

    p = sub.add_parser('name', help='Resolve codes to names')
    p.add_argument('space', choices=sorted(CODE_TABLES), help='Code space')
    p.add_argument('codes', nargs='+', type=_code, help='Numeric codes')
    p.set_defaults(func=cmd_name)

    p = sub.add_parser('codes', help='List the names of a code space')
    p.add_argument('space', choices=sorted(CODE_TABLES), help='Code space')
    p.add_argument('-j', '--json', action='store_true', help='Output in JSON format')
    p.set_defaults(func=cmd_codes)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point"""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        stream=sys.stdout,
        level=logging.WARNING if args.quiet else logging.INFO,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s' if args.verbose else '%(message)s',
    )

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return 130
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
