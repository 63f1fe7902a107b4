"""IPv4, IPv6, TCP and UDP header parsing."""

from __future__ import annotations

import ipaddress
import struct
from dataclasses import dataclass, field
from datetime import datetime
from typing import ClassVar, Optional

PROTOCOL_ICMP = 1
PROTOCOL_TCP = 6
PROTOCOL_UDP = 17
PROTOCOL_ICMPV6 = 58

_PROTOCOL_NAMES = {
    PROTOCOL_ICMP: "ICMP",
    PROTOCOL_TCP: "TCP",
    PROTOCOL_UDP: "UDP",
    PROTOCOL_ICMPV6: "ICMPv6",
}


def _require(data: bytes, size: int, what: str) -> None:
    if len(data) < size:
        raise ValueError("%s header needs %d bytes, got %d" % (what, size, len(data)))


@dataclass(frozen=True)
class IPv4Header:
    version: int
    ihl: int
    tos: int
    total_length: int
    identification: int
    frag_offset: int
    ttl: int
    protocol: int
    checksum: int
    source: ipaddress.IPv4Address
    destination: ipaddress.IPv4Address

    SIZE: ClassVar[int] = 20

    @property
    def header_length(self) -> int:
        """Header length in bytes."""
        return self.ihl * 4

    @classmethod
    def from_bytes(cls, data: bytes) -> "IPv4Header":
        _require(data, cls.SIZE, "IPv4")
        (ver_ihl, tos, total, ident, frag, ttl, proto, cksum, src, dst) = struct.unpack_from(
            "!BBHHHBBH4s4s", data
        )
        return cls(
            version=ver_ihl >> 4,
            ihl=ver_ihl & 0x0F,
            tos=tos,
            total_length=total,
            identification=ident,
            frag_offset=frag,
            ttl=ttl,
            protocol=proto,
            checksum=cksum,
            source=ipaddress.IPv4Address(src),
            destination=ipaddress.IPv4Address(dst),
        )


@dataclass(frozen=True)
class IPv6Header:
    version: int
    traffic_class: int
    flow_label: int
    payload_length: int
    next_header: int
    hop_limit: int
    source: ipaddress.IPv6Address
    destination: ipaddress.IPv6Address

    SIZE: ClassVar[int] = 40

    @classmethod
    def from_bytes(cls, data: bytes) -> "IPv6Header":
        _require(data, cls.SIZE, "IPv6")
        b0, b1, flow_low, payload, nxt, hops, src, dst = struct.unpack_from(
            "!BBHHBB16s16s", data
        )
        return cls(
            version=b0 >> 4,
            traffic_class=((b0 & 0x0F) << 4) | (b1 >> 4),
            flow_label=((b1 & 0x0F) << 16) | flow_low,
            payload_length=payload,
            next_header=nxt,
            hop_limit=hops,
            source=ipaddress.IPv6Address(src),
            destination=ipaddress.IPv6Address(dst),
        )


@dataclass(frozen=True)
class TCPHeader:
    source_port: int
    dest_port: int
    seq: int
    ack: int
    data_offset: int
    reserved: int
    flags: int
    window: int
    checksum: int
    urgent_ptr: int

    SIZE: ClassVar[int] = 20

    @property
    def header_length(self) -> int:
        """Header length in bytes."""
        return self.data_offset * 4

    @classmethod
    def from_bytes(cls, data: bytes) -> "TCPHeader":
        _require(data, cls.SIZE, "TCP")
        sport, dport, seq, ack, off, flags, win, cksum, urg = struct.unpack_from(
            "!HHIIBBHHH", data
        )
        return cls(
            source_port=sport,
            dest_port=dport,
            seq=seq,
            ack=ack,
            data_offset=off >> 4,
            reserved=off & 0x0F,
            flags=flags,
            window=win,
            checksum=cksum,
            urgent_ptr=urg,
        )


@dataclass(frozen=True)
class UDPHeader:
    source_port: int
    dest_port: int
    length: int
    checksum: int

    SIZE: ClassVar[int] = 8

    @classmethod
    def from_bytes(cls, data: bytes) -> "UDPHeader":
        _require(data, cls.SIZE, "UDP")
        return cls(*struct.unpack_from("!HHHH", data))


@dataclass
class PacketInfo:
    """Summary of one captured IP packet."""

    source_ip: str = ""
    dest_ip: str = ""
    source_port: int = 0
    dest_port: int = 0
    protocol: str = ""
    data_size: int = 0
    data: bytes = field(default=b"", repr=False)
    timestamp: Optional[datetime] = None
    is_ipv6: bool = False


def _transport(protocol: int, segment: bytes) -> tuple[int, int, bytes]:
    if protocol == PROTOCOL_TCP:
        tcp = TCPHeader.from_bytes(segment)
        if tcp.header_length < TCPHeader.SIZE or tcp.header_length > len(segment):
            raise ValueError("invalid TCP data offset %d" % tcp.data_offset)
        return tcp.source_port, tcp.dest_port, segment[tcp.header_length:]
    if protocol == PROTOCOL_UDP:
        udp = UDPHeader.from_bytes(segment)
        return udp.source_port, udp.dest_port, segment[UDPHeader.SIZE:]
    return 0, 0, segment


def packet_info_from_ip(data: bytes, timestamp: Optional[datetime]) -> PacketInfo:
    """Build a PacketInfo from a packet that starts at its IP header."""
    if not data:
        raise ValueError("empty packet")
    version = data[0] >> 4
    if version == 4:
        ip = IPv4Header.from_bytes(data)
        if ip.header_length < IPv4Header.SIZE or ip.header_length > len(data):
            raise ValueError("invalid IPv4 header length %d" % ip.ihl)
        protocol = ip.protocol
        segment = data[ip.header_length:]
        is_ipv6 = False
    elif version == 6:
        ip = IPv6Header.from_bytes(data)
        protocol = ip.next_header
        segment = data[IPv6Header.SIZE:]
        is_ipv6 = True
    else:
        raise ValueError("unsupported IP version %d" % version)

    sport, dport, payload = _transport(protocol, segment)
    return PacketInfo(
        source_ip=str(ip.source),
        dest_ip=str(ip.destination),
        source_port=sport,
        dest_port=dport,
        protocol=_PROTOCOL_NAMES.get(protocol, "OTHER(%d)" % protocol),
        data_size=len(payload),
        data=bytes(payload),
        timestamp=timestamp,
        is_ipv6=is_ipv6,
    )