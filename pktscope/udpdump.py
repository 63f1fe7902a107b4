"""Printing the UDP-over-IPv4 packets of an Ethernet capture."""

from __future__ import annotations

import argparse
import struct
import sys
import time

from pktscope.headers import PROTOCOL_UDP, IPv4Header, UDPHeader
from pktscope.savefile import LINKTYPE_ETHERNET, PacketHeader, PcapFormatError, open_offline

ETHERNET_HEADER_LEN = 14
ETHERTYPE_IPV4 = 0x0800
PACKET_FILTER = "ip and udp"


def is_ipv4_udp(frame: bytes) -> bool:
    """True when an Ethernet frame carries IPv4 with the UDP protocol number."""
    if len(frame) < ETHERNET_HEADER_LEN + IPv4Header.SIZE:
        return False
    (ethertype,) = struct.unpack_from("!H", frame, 12)
    return ethertype == ETHERTYPE_IPV4 and frame[ETHERNET_HEADER_LEN + 9] == PROTOCOL_UDP


def format_udp_packet(header: PacketHeader, frame: bytes) -> str:
    """One line: local time, length, and source/destination address.port."""
    timestr = time.strftime("%H:%M:%S", time.localtime(header.ts_sec))
    ip = IPv4Header.from_bytes(frame[ETHERNET_HEADER_LEN:])
    udp = UDPHeader.from_bytes(frame[ETHERNET_HEADER_LEN + ip.header_length :])
    return "%s.%.6d len:%d %s.%d -> %s.%d" % (
        timestr,
        header.ts_usec,
        header.length,
        ip.source,
        udp.source_port,
        ip.destination,
        udp.dest_port,
    )


def main(argv=None) -> int:
    """Print the UDP packets found in an Ethernet capture file."""
    parser = argparse.ArgumentParser(
        prog="udpdump", description="Print UDP packets of an Ethernet capture file."
    )
    parser.add_argument("filename", help="pcap savefile to read")
    args = parser.parse_args(argv)
    try:
        reader = open_offline(args.filename)
    except (OSError, PcapFormatError) as exc:
        print("Unable to open the file %s: %s" % (args.filename, exc), file=sys.stderr)
        return 1
    with reader:
        if reader.linktype != LINKTYPE_ETHERNET:
            print("This program works only on Ethernet networks.", file=sys.stderr)
            return 1
        try:
            for header, frame in reader:
                if not is_ipv4_udp(frame):
                    continue
                try:
                    line = format_udp_packet(header, frame)
                except ValueError:
                    continue
                print(line)
        except PcapFormatError as exc:
            print("Error reading the packets: %s" % exc, file=sys.stderr)
            return 1
    return 0