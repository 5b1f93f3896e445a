"""
NlDebug - Netlink control-plane debug instrumentation

A Python package for logging netlink traffic as hex/ASCII dumps and for
rendering netlink, rtnetlink, traffic control and OVS vport codes as
symbolic names.

Modules:
    code_names: Code -> name tables for the four protocol code spaces
    hexfmt: Bounded binary to ASCII-hex line formatter
    buffer_log: 8-byte hex/ASCII logging of buffers and scatter-gather messages
    sock_debug: Logging pass-through wrappers for socket calls
    libc: CFFI declarations for socket structures and recvmmsg(2)

Example:
    >>> from nldebug import buffer_log, code_names
    >>> code_names.rtm_to_string(16)
    'RTM_NEWLINK'
    >>> buffer_log.log_buffer("request", b"\\x10\\x00\\x00\\x00")
"""

__version__ = "1.0.0"
__author__ = "Harry Coin"
__email__ = "hcoin@quietfountain.com"
__license__ = "MIT"

from . import code_names
from . import hexfmt
from . import libc
from . import buffer_log
from . import sock_debug

__all__ = [
    "code_names",
    "hexfmt",
    "libc",
    "buffer_log",
    "sock_debug",
    "__version__",
]
