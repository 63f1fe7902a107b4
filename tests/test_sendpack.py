import socket
import struct

import pytest

from pktscope.sendpack import (
    ORIG_PACKET_LEN,
    build_udp_broadcast,
    close_enough,
    frame_for_datalink,
    ipv4_checksum,
)


@pytest.mark.parametrize(
    "one, two",
    [("eth0", "ETH0"), ("eth0", "eth0"), ("\\Device\\NPF_{AbC}", "\\device\\npf_{aBc}"),
     ("", "")],
)
def test_close_enough_matches(one, two):
    assert close_enough(one, two) is True


@pytest.mark.parametrize(
    "one, two",
    [("eth0", "eth1"), ("eth0", "eth00"), ("abc", "ab"), ("@", "`")],
)
def test_close_enough_differs(one, two):
    assert close_enough(one, two) is False


def test_close_enough_mixes_up_brackets():
    assert close_enough("{", "[") is True


def test_close_enough_symmetric():
    for a, b in [("ABC", "abc"), ("x", "y"), ("{", "[")]:
        assert close_enough(a, b) == close_enough(b, a)


def test_checksum_worked_example():
    header = bytes.fromhex("450000730000400040110000c0a80001c0a800c7")
    assert ipv4_checksum(header) == 0xB861


def test_checksum_verifies_to_zero():
    header = bytearray(bytes.fromhex("450000730000400040110000c0a80001c0a800c7"))
    struct.pack_into("!H", header, 10, ipv4_checksum(header))
    assert ipv4_checksum(header) == 0


def test_build_frame_fields():
    frame = build_udp_broadcast("10.1.2.3")
    assert len(frame) == ORIG_PACKET_LEN
    assert frame[:6] == b"\xff" * 6
    assert frame[12:14] == b"\x08\x00"
    assert frame[26:30] == socket.inet_aton("10.1.2.3")
    assert frame[30:34] == b"\xff" * 4
    assert struct.unpack("!H", frame[16:18])[0] == ORIG_PACKET_LEN - 14
    assert struct.unpack("!H", frame[38:40])[0] == ORIG_PACKET_LEN - 14 - 20
    assert struct.unpack("!HH", frame[34:38]) == (7, 7)


def test_build_frame_checksum_valid():
    for source in ("10.1.2.3", "192.168.100.200", "0.0.0.0"):
        frame = build_udp_broadcast(source)
        assert ipv4_checksum(frame[14:34]) == 0


def test_build_frame_rejects_bad_address():
    with pytest.raises(ValueError):
        build_udp_broadcast("not-an-address")


def test_frame_for_ethernet_unchanged():
    frame = build_udp_broadcast("10.0.0.1")
    assert frame_for_datalink(frame, 1) == frame


def test_frame_for_null_link():
    frame = build_udp_broadcast("10.0.0.1")
    adapted = frame_for_datalink(frame, 0)
    assert len(adapted) == len(frame) - 10
    assert adapted[:4] == b"\x02\x00\x00\x00"
    assert adapted[4:] == frame[14:]


def test_frame_for_unknown_link():
    with pytest.raises(ValueError):
        frame_for_datalink(build_udp_broadcast("10.0.0.1"), 105)