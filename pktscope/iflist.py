"""Listing the network interfaces of this machine and their addresses."""

from __future__ import annotations

import argparse
import enum
import ipaddress
import socket
import sys
from dataclasses import dataclass, field
from typing import Optional, Sequence

import psutil

from pktscope.pcapconst import (
    PCAP_IF_CONNECTION_STATUS,
    PCAP_IF_LOOPBACK,
    PCAP_IF_RUNNING,
    PCAP_IF_UP,
    PCAP_IF_WIRELESS,
)

_FAMILY_NAMES = {
    socket.AF_INET: "AF_INET",
    socket.AF_INET6: "AF_INET6",
}


class InterfaceFlags(enum.IntFlag):
    """Interface flags, as reported alongside each interface."""

    NONE = 0
    LOOPBACK = PCAP_IF_LOOPBACK
    UP = PCAP_IF_UP
    RUNNING = PCAP_IF_RUNNING
    WIRELESS = PCAP_IF_WIRELESS
    CONNECTION_STATUS_CONNECTED = 0x00000010
    CONNECTION_STATUS_DISCONNECTED = 0x00000020
    CONNECTION_STATUS_NOT_APPLICABLE = PCAP_IF_CONNECTION_STATUS


@dataclass(frozen=True)
class InterfaceAddress:
    """One address of an interface, with its netmask, broadcast and peer."""

    family: int
    addr: Optional[str] = None
    netmask: Optional[str] = None
    broadaddr: Optional[str] = None
    dstaddr: Optional[str] = None

    @property
    def family_name(self) -> str:
        return _FAMILY_NAMES.get(self.family, "Unknown")


@dataclass(frozen=True)
class Interface:
    """A network interface that can be named to open a capture."""

    name: str
    description: Optional[str] = None
    addresses: tuple[InterfaceAddress, ...] = field(default_factory=tuple)
    flags: InterfaceFlags = InterfaceFlags.NONE

    @property
    def is_loopback(self) -> bool:
        return bool(self.flags & InterfaceFlags.LOOPBACK)

    @property
    def connection_status(self) -> InterfaceFlags:
        return InterfaceFlags(self.flags & PCAP_IF_CONNECTION_STATUS)


def _is_loopback_address(family: int, text: Optional[str]) -> bool:
    if family not in _FAMILY_NAMES or not text:
        return False
    try:
        return ipaddress.ip_address(text.split("%", 1)[0]).is_loopback
    except ValueError:
        return False


def _interface_flags(addresses: Sequence[InterfaceAddress], stats) -> InterfaceFlags:
    flags = InterfaceFlags.NONE
    stat_flags = str(getattr(stats, "flags", "") or "").split(",") if stats else []
    if "loopback" in stat_flags or any(
        _is_loopback_address(a.family, a.addr) for a in addresses
    ):
        flags |= InterfaceFlags.LOOPBACK
    is_up = bool(stats is not None and stats.isup)
    if is_up:
        flags |= InterfaceFlags.UP
        if not stat_flags or stat_flags == [""] or "running" in stat_flags:
            flags |= InterfaceFlags.RUNNING
    if flags & InterfaceFlags.LOOPBACK:
        flags |= InterfaceFlags.CONNECTION_STATUS_NOT_APPLICABLE
    elif is_up:
        flags |= InterfaceFlags.CONNECTION_STATUS_CONNECTED
    else:
        flags |= InterfaceFlags.CONNECTION_STATUS_DISCONNECTED
    return flags


def list_interfaces() -> list[Interface]:
    """All interfaces of this machine, with their addresses and flags."""
    all_addrs = psutil.net_if_addrs()
    all_stats = psutil.net_if_stats()
    interfaces = []
    for name, entries in all_addrs.items():
        addresses = tuple(
            InterfaceAddress(
                family=int(entry.family),
                addr=entry.address,
                netmask=entry.netmask,
                broadaddr=entry.broadcast,
                dstaddr=entry.ptp,
            )
            for entry in entries
        )
        interfaces.append(
            Interface(
                name=name,
                description=None,
                addresses=addresses,
                flags=_interface_flags(addresses, all_stats.get(name)),
            )
        )
    return interfaces


def _iptos(family: int, text: str) -> str:
    """Numeric form of an address, or "ERROR!" if it is not an IP address."""
    if family not in _FAMILY_NAMES:
        return "ERROR!"
    host, _, zone = text.partition("%")
    try:
        numeric = str(ipaddress.ip_address(host))
    except ValueError:
        return "ERROR!"
    return numeric + ("%" + zone if zone else "")


def format_interface(interface: Interface) -> str:
    """Describe an interface and all its addresses, one fact per line."""
    lines = [interface.name]
    if interface.description:
        lines.append("\tDescription: %s" % interface.description)
    lines.append("\tLoopback: %s" % ("yes" if interface.is_loopback else "no"))
    for address in interface.addresses:
        lines.append("\tAddress Family: #%d" % address.family)
        lines.append("\tAddress Family Name: %s" % address.family_name)
        if address.family > 0:
            for label, value in (
                ("Address", address.addr),
                ("Netmask", address.netmask),
                ("Broadcast Address", address.broadaddr),
                ("Destination Address", address.dstaddr),
            ):
                if value:
                    lines.append("\t%s: %s" % (label, _iptos(address.family, value)))
    return "\n".join(lines) + "\n\n"


def main(argv=None) -> int:
    """Print every interface with all the information available on it."""
    parser = argparse.ArgumentParser(
        prog="iflist", description="List network interfaces and their addresses."
    )
    parser.parse_args(argv)
    try:
        interfaces = list_interfaces()
    except (OSError, psutil.Error) as exc:
        print("Error in pcap_findalldevs: %s" % exc, file=sys.stderr)
        return 1
    for interface in interfaces:
        sys.stdout.write(format_interface(interface))
    return 0