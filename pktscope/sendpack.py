"""Building the UDP broadcast probe frame and fitting it to a link type."""

from __future__ import annotations

import ipaddress
import struct

from pktscope.savefile import LINKTYPE_ETHERNET, LINKTYPE_NULL

ORIG_PACKET_LEN = 64
ETHERNET_HEADER_LEN = 14
IPV4_HEADER_LEN = 20
NULL_HEADER_LEN = 4
NULL_VS_ETH_DIFF = ETHERNET_HEADER_LEN - NULL_HEADER_LEN

_TEMPLATE = (
    b"\xff\xff\xff\xff\xff\xff"  # destination MAC: broadcast
    b"\x02\x02\x02\x02\x02\x02"  # source MAC
    b"\x08\x00"  # ethertype IPv4
    b"\x45\x00\x00\x00"  # IPv4, minimal header, length filled in later
    b"\x12\x34\x00\x00"  # IP id 0x1234, no fragmentation
    b"\x10\x11\x00\x00"  # TTL 0x10, UDP, checksum filled in later
    b"\x00\x00\x00\x00"  # source IP filled in later
    b"\xff\xff\xff\xff"  # destination IP: broadcast
    b"\x00\x07\x00\x07"  # UDP ports 7 -> 7 (echo)
    b"\x00\x00\x00\x00"  # UDP length filled in later, no checksum
)


def close_enough(one: str, two: str) -> bool:
    """Case-insensitive comparison that may also equate some punctuation pairs."""
    if len(one) != len(two):
        return False
    for a, b in zip(one, two):
        if a == b:
            continue
        ca, cb = ord(a), ord(b)
        if (a >= "a" and ca - cb == 0x20) or (b >= "a" and cb - ca == 0x20):
            continue
        return False
    return True


def ipv4_checksum(header: bytes) -> int:
    """Internet checksum over an IPv4 header, checksum field included as given."""
    data = bytes(header)
    if len(data) % 2:
        data += b"\x00"
    total = sum(word for (word,) in struct.iter_unpack("!H", data))
    while total >> 16:
        total = (total & 0xFFFF) + (total >> 16)
    return ~total & 0xFFFF


def build_udp_broadcast(source_ip) -> bytes:
    """The 64-byte Ethernet frame carrying a UDP echo broadcast from source_ip."""
    source = ipaddress.IPv4Address(source_ip)
    frame = bytearray(_TEMPLATE.ljust(ORIG_PACKET_LEN, b"\x00"))
    ip_start = ETHERNET_HEADER_LEN
    udp_start = ip_start + IPV4_HEADER_LEN
    struct.pack_into("!H", frame, ip_start + 2, ORIG_PACKET_LEN - ETHERNET_HEADER_LEN)
    struct.pack_into(
        "!H", frame, udp_start + 4, ORIG_PACKET_LEN - ETHERNET_HEADER_LEN - IPV4_HEADER_LEN
    )
    frame[ip_start + 12 : ip_start + 16] = source.packed
    ihl = (frame[ip_start] & 0x0F) * 4
    checksum = ipv4_checksum(frame[ip_start : ip_start + ihl])
    struct.pack_into("!H", frame, ip_start + 10, checksum)
    return bytes(frame)


def frame_for_datalink(frame: bytes, datalink: int) -> bytes:
    """Adapt an Ethernet frame to the link type of the adapter it is sent on."""
    if datalink == LINKTYPE_ETHERNET:
        return bytes(frame)
    if datalink == LINKTYPE_NULL:
        # The loopback header is shorter; it holds the address family (IPv4).
        return b"\x02\x00\x00\x00" + bytes(frame[ETHERNET_HEADER_LEN:])
    raise ValueError("unknown data-link type %d" % datalink)