import socket
from types import SimpleNamespace
from unittest import mock

import psutil
import pytest

from pktscope.iflist import (
    Interface,
    InterfaceAddress,
    InterfaceFlags,
    format_interface,
    list_interfaces,
    main,
)


def _addr(family, address, netmask=None, broadcast=None, ptp=None):
    return SimpleNamespace(
        family=family, address=address, netmask=netmask, broadcast=broadcast, ptp=ptp
    )


def _stats(isup, flags=""):
    return SimpleNamespace(isup=isup, duplex=0, speed=0, mtu=1500, flags=flags)


FAKE_ADDRS = {
    "lo": [
        _addr(socket.AF_INET, "127.0.0.1", "255.0.0.0"),
        _addr(socket.AF_INET6, "::1", "ffff:ffff:ffff:ffff:ffff:ffff:ffff:ffff"),
    ],
    "eth0": [
        _addr(socket.AF_INET, "192.0.2.10", "255.255.255.0", "192.0.2.255"),
    ],
    "eth1": [
        _addr(socket.AF_INET, "198.51.100.7", "255.255.255.0"),
    ],
}
FAKE_STATS = {"lo": _stats(True), "eth0": _stats(True), "eth1": _stats(False)}


def _patched():
    return (
        mock.patch.object(psutil, "net_if_addrs", return_value=FAKE_ADDRS),
        mock.patch.object(psutil, "net_if_stats", return_value=FAKE_STATS),
    )


def test_raw_pcap_flag_values_are_understood():
    iface = Interface(name="x", flags=InterfaceFlags(0x1 | 0x2 | 0x30))
    assert iface.is_loopback
    assert iface.connection_status == InterfaceFlags.CONNECTION_STATUS_NOT_APPLICABLE
    assert int(iface.connection_status) == 0x30
    assert "\tLoopback: yes\n" in format_interface(iface)


def test_list_interfaces_detects_loopback_and_state():
    p1, p2 = _patched()
    with p1, p2:
        interfaces = {i.name: i for i in list_interfaces()}
    assert set(interfaces) == {"lo", "eth0", "eth1"}
    assert interfaces["lo"].is_loopback
    assert not interfaces["eth0"].is_loopback
    assert interfaces["eth0"].flags & InterfaceFlags.UP
    assert not interfaces["eth1"].flags & InterfaceFlags.UP
    assert interfaces["eth1"].connection_status == InterfaceFlags.CONNECTION_STATUS_DISCONNECTED
    assert interfaces["eth0"].connection_status == InterfaceFlags.CONNECTION_STATUS_CONNECTED


def test_list_interfaces_keeps_addresses():
    p1, p2 = _patched()
    with p1, p2:
        eth0 = next(i for i in list_interfaces() if i.name == "eth0")
    assert eth0.addresses == (
        InterfaceAddress(socket.AF_INET, "192.0.2.10", "255.255.255.0", "192.0.2.255", None),
    )


def test_format_interface_loopback_lines():
    iface = Interface(
        name="lo",
        description="Loopback adapter",
        addresses=(InterfaceAddress(socket.AF_INET, "127.0.0.1", "255.0.0.0"),),
        flags=InterfaceFlags.LOOPBACK | InterfaceFlags.UP,
    )
    lines = format_interface(iface).split("\n")
    assert lines[0] == "lo"
    assert lines[1] == "\tDescription: Loopback adapter"
    assert lines[2] == "\tLoopback: yes"
    assert lines[3] == "\tAddress Family: #%d" % socket.AF_INET
    assert lines[4] == "\tAddress Family Name: AF_INET"
    assert lines[5] == "\tAddress: 127.0.0.1"
    assert lines[6] == "\tNetmask: 255.0.0.0"
    assert format_interface(iface).endswith("\n\n")


def test_format_interface_without_description_or_addresses():
    text = format_interface(Interface(name="eth9"))
    assert text == "eth9\n\tLoopback: no\n\n"


def test_format_interface_ipv6_and_broadcast():
    iface = Interface(
        name="eth0",
        addresses=(
            InterfaceAddress(socket.AF_INET6, "2001:db8::1"),
            InterfaceAddress(socket.AF_INET, "192.0.2.10", "255.255.255.0", "192.0.2.255", "192.0.2.1"),
        ),
    )
    text = format_interface(iface)
    assert "\tAddress Family Name: AF_INET6\n\tAddress: 2001:db8::1\n" in text
    assert "\tBroadcast Address: 192.0.2.255\n" in text
    assert "\tDestination Address: 192.0.2.1\n" in text


def test_format_interface_unknown_family():
    iface = Interface(name="x", addresses=(InterfaceAddress(-1, "aa-bb"),))
    text = format_interface(iface)
    assert "\tAddress Family Name: Unknown\n" in text
    assert "\tAddress:" not in text


def test_format_interface_non_ip_address_is_error():
    iface = Interface(name="x", addresses=(InterfaceAddress(17, "00:00:5e:00:53:01"),))
    assert "\tAddress: ERROR!\n" in format_interface(iface)


def test_main_prints_every_interface(capsys):
    p1, p2 = _patched()
    with p1, p2:
        assert main([]) == 0
    out = capsys.readouterr().out
    assert out.splitlines()[0] == "lo"
    assert "\tAddress: 192.0.2.10" in out
    assert out.count("\tLoopback: yes") == 1


def test_main_reports_enumeration_failure(capsys):
    with mock.patch.object(psutil, "net_if_addrs", side_effect=OSError("denied")):
        assert main([]) == 1
    assert "Error in pcap_findalldevs: denied" in capsys.readouterr().err


def test_main_rejects_arguments():
    with pytest.raises(SystemExit):
        main(["--bogus"])