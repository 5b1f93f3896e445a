#!/usr/bin/env python3
"""
Symbolic names for netlink protocol codes

Four independent code spaces are resolved:
- netlink protocol family   (socket(AF_NETLINK, ..., protocol))
- rtnetlink message type    (nlmsghdr.nlmsg_type for NETLINK_ROUTE)
- traffic control attribute (rtattr.rta_type inside tcmsg)
- OVS virtual port type     (OVS_VPORT_ATTR_TYPE)

Every resolver is a total function: a code that is not in the table resolves
to the fallback name of its space (e.g. 'RTM_???') instead of failing.

Example:
    >>> from nldebug.code_names import rtm_to_string
    >>> rtm_to_string(16)
    'RTM_NEWLINK'
    >>> rtm_to_string(1000)
    'RTM_???'
"""

from bisect import bisect_left
from typing import Dict, Iterator, Tuple


class CodeTable:
    """
    Immutable code -> name table for one code space.

    Codes are kept in a sorted tuple and searched with binary search, names
    in a parallel tuple. Tables are built once at import and shared freely
    between threads.
    """

    __slots__ = ('space', 'fallback', '_codes', '_names')

    def __init__(self, space: str, names: Dict[int, str]):
        self.space = space
        self.fallback = f'{space}_???'
        ordered = sorted(names.items())
        self._codes: Tuple[int, ...] = tuple(code for code, _ in ordered)
        self._names: Tuple[str, ...] = tuple(name for _, name in ordered)

    def name(self, code: int) -> str:
        """Return the symbolic name of code, or the fallback name"""
        idx = bisect_left(self._codes, code)
        if idx < len(self._codes) and self._codes[idx] == code:
            return self._names[idx]
        return self.fallback

    def __contains__(self, code: object) -> bool:
        if not isinstance(code, int):
            return False
        idx = bisect_left(self._codes, code)
        return idx < len(self._codes) and self._codes[idx] == code

    def __len__(self) -> int:
        return len(self._codes)

    def items(self) -> Iterator[Tuple[int, str]]:
        return zip(self._codes, self._names)

    def __repr__(self) -> str:
        return f'CodeTable({self.space!r}, {len(self)} codes)'


# Netlink protocol families (linux/netlink.h)
NETLINK_NAMES = {
    0: 'NETLINK_ROUTE', 1: 'NETLINK_UNUSED', 2: 'NETLINK_USERSOCK',
    3: 'NETLINK_FIREWALL', 4: 'NETLINK_SOCK_DIAG', 5: 'NETLINK_NFLOG',
    6: 'NETLINK_XFRM', 7: 'NETLINK_SELINUX', 8: 'NETLINK_ISCSI',
    9: 'NETLINK_AUDIT', 10: 'NETLINK_FIB_LOOKUP', 11: 'NETLINK_CONNECTOR',
    12: 'NETLINK_NETFILTER', 13: 'NETLINK_IP6_FW', 14: 'NETLINK_DNRTMSG',
    15: 'NETLINK_KOBJECT_UEVENT', 16: 'NETLINK_GENERIC',
    18: 'NETLINK_SCSITRANSPORT', 19: 'NETLINK_ECRYPTFS', 20: 'NETLINK_RDMA',
    21: 'NETLINK_CRYPTO',
}

# rtnetlink message types (linux/rtnetlink.h)
RTM_NAMES = {
    16: 'RTM_NEWLINK', 17: 'RTM_DELLINK', 18: 'RTM_GETLINK', 19: 'RTM_SETLINK',
    20: 'RTM_NEWADDR', 21: 'RTM_DELADDR', 22: 'RTM_GETADDR',
    24: 'RTM_NEWROUTE', 25: 'RTM_DELROUTE', 26: 'RTM_GETROUTE',
    28: 'RTM_NEWNEIGH', 29: 'RTM_DELNEIGH', 30: 'RTM_GETNEIGH',
    32: 'RTM_NEWRULE', 33: 'RTM_DELRULE', 34: 'RTM_GETRULE',
    36: 'RTM_NEWQDISC', 37: 'RTM_DELQDISC', 38: 'RTM_GETQDISC',
    40: 'RTM_NEWTCLASS', 41: 'RTM_DELTCLASS', 42: 'RTM_GETTCLASS',
    44: 'RTM_NEWTFILTER', 45: 'RTM_DELTFILTER', 46: 'RTM_GETTFILTER',
    48: 'RTM_NEWACTION', 49: 'RTM_DELACTION', 50: 'RTM_GETACTION',
    52: 'RTM_NEWPREFIX', 58: 'RTM_GETMULTICAST', 62: 'RTM_GETANYCAST',
    64: 'RTM_NEWNEIGHTBL', 66: 'RTM_GETNEIGHTBL', 67: 'RTM_SETNEIGHTBL',
    68: 'RTM_NEWNDUSEROPT',
    72: 'RTM_NEWADDRLABEL', 73: 'RTM_DELADDRLABEL', 74: 'RTM_GETADDRLABEL',
    78: 'RTM_GETDCB', 79: 'RTM_SETDCB',
    80: 'RTM_NEWNETCONF', 81: 'RTM_DELNETCONF', 82: 'RTM_GETNETCONF',
    84: 'RTM_NEWMDB', 85: 'RTM_DELMDB', 86: 'RTM_GETMDB',
    88: 'RTM_NEWNSID', 89: 'RTM_DELNSID', 90: 'RTM_GETNSID',
    92: 'RTM_NEWSTATS', 94: 'RTM_GETSTATS',
    96: 'RTM_NEWCACHEREPORT',
    100: 'RTM_NEWCHAIN', 101: 'RTM_DELCHAIN', 102: 'RTM_GETCHAIN',
    104: 'RTM_NEWNEXTHOP', 105: 'RTM_DELNEXTHOP', 106: 'RTM_GETNEXTHOP',
}

# Traffic control attributes (linux/rtnetlink.h, enum TCA_*)
TCA_NAMES = {
    0: 'TCA_UNSPEC', 1: 'TCA_KIND', 2: 'TCA_OPTIONS', 3: 'TCA_STATS',
    4: 'TCA_XSTATS', 5: 'TCA_RATE', 6: 'TCA_FCNT', 7: 'TCA_STATS2',
    8: 'TCA_STAB', 9: 'TCA_PAD', 10: 'TCA_DUMP_INVISIBLE', 11: 'TCA_CHAIN',
    12: 'TCA_INGRESS_BLOCK', 13: 'TCA_EGRESS_BLOCK',
}

# Open vSwitch datapath vport types (openvswitch.h)
OVS_VPORT_TYPE_NAMES = {
    0: 'OVS_VPORT_TYPE_UNSPEC', 1: 'OVS_VPORT_TYPE_NETDEV',
    2: 'OVS_VPORT_TYPE_INTERNAL', 3: 'OVS_VPORT_TYPE_GRE',
    4: 'OVS_VPORT_TYPE_VXLAN', 5: 'OVS_VPORT_TYPE_GENEVE',
}

NETLINK_TABLE = CodeTable('NETLINK', NETLINK_NAMES)
RTM_TABLE = CodeTable('RTM', RTM_NAMES)
TCA_TABLE = CodeTable('TCA', TCA_NAMES)
OVS_VPORT_TYPE_TABLE = CodeTable('OVS_VPORT_TYPE', OVS_VPORT_TYPE_NAMES)

# Code space tag -> table
CODE_TABLES = {
    'netlink': NETLINK_TABLE,
    'rtm': RTM_TABLE,
    'tca': TCA_TABLE,
    'ovs_vport': OVS_VPORT_TYPE_TABLE,
}


def netlink_to_string(protocol: int) -> str:
    """Name of a netlink protocol family, e.g. 16 -> 'NETLINK_GENERIC'"""
    return NETLINK_TABLE.name(protocol)


def rtm_to_string(code: int) -> str:
    """Name of an rtnetlink message type, e.g. 24 -> 'RTM_NEWROUTE'"""
    return RTM_TABLE.name(code)


def tca_to_string(tca_type: int) -> str:
    """Name of a traffic control attribute type (16-bit rta_type)"""
    return TCA_TABLE.name(tca_type & 0xFFFF)


def ovs_vport_type_to_string(vport_type: int) -> str:
    """Name of an OVS vport type, e.g. 4 -> 'OVS_VPORT_TYPE_VXLAN'"""
    return OVS_VPORT_TYPE_TABLE.name(vport_type)


_RESOLVERS = {
    'netlink': netlink_to_string,
    'rtm': rtm_to_string,
    'tca': tca_to_string,
    'ovs_vport': ovs_vport_type_to_string,
}


def code_to_string(space: str, code: int) -> str:
    """
    Resolve code within the named code space.

    Args:
        space: One of 'netlink', 'rtm', 'tca', 'ovs_vport'
        code: Numeric code

    Raises:
        ValueError: If space is not a known code space
    """
    try:
        resolver = _RESOLVERS[space]
    except KeyError:
        raise ValueError(
            f"Invalid code space: {space}. Use one of: {', '.join(_RESOLVERS)}"
        ) from None
    return resolver(code)
