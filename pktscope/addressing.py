"""Validation of the port and IP address a user types in, and status text."""

from __future__ import annotations

import enum
import ipaddress
import re

DEFAULT_PORT = 8080
MAX_LOG_LINES = 1000
MAX_STRING_LENGTH = 512
MIN_PORT = 1
MAX_PORT = 65535

RECV_BUFFER_SIZE = 65536
SOCKET_BUFFER_SIZE = 262144
RECV_TIMEOUT_MS = 5000

# The input fields hold one character less than their buffers.
MAX_PORT_STRING_LENGTH = 6
MAX_IP_STRING_LENGTH = 46

STATUS_RUNNING = "Running"
STATUS_STOPPED = "Stopped"
STATUS_PACKET_COUNT = "Packets captured: %d"
STATUS_USAGE = (
    "Enter a port number and, optionally, an IP address, then start the capture."
)
STATUS_ADMIN_REQUIRED = "Capturing packets requires administrator privileges."

_WHITESPACE = " \t\r\n"
_LEADING_INT = re.compile(r"[ \t\n\v\f\r]*([+-]?[0-9]+)")
_LOOPBACK_NAME = "localhost"
_LOOPBACK_V4 = "127.0.0.1"
_LOOPBACK_V6 = "::1"


class IPAddressType(enum.Enum):
    """What kind of address a filter string names."""

    NONE = "none"
    IPV4 = "ipv4"
    IPV6 = "ipv6"


class InvalidInputError(ValueError):
    """Raised when a port number or IP address typed by the user is rejected."""


def _is_ipv4(address: str) -> bool:
    try:
        ipaddress.IPv4Address(address)
    except ValueError:
        return False
    return True


def _is_ipv6(address: str) -> bool:
    if "%" in address:
        return False
    try:
        ipaddress.IPv6Address(address)
    except ValueError:
        return False
    return True


def validate_ip_address(address: str) -> bool:
    """True for an empty string, "localhost", or a numeric IPv4/IPv6 address."""
    if not address:
        return True
    if address.lower() == _LOOPBACK_NAME:
        return True
    if address in (_LOOPBACK_V4, _LOOPBACK_V6):
        return True
    return _is_ipv4(address) or _is_ipv6(address)


def resolve_ip_address(address: str) -> str:
    """Map "localhost" (any case) to the IPv4 loopback; leave others unchanged."""
    if not address:
        return ""
    if address.lower() == _LOOPBACK_NAME:
        return _LOOPBACK_V4
    return address


def get_ip_address_type(address: str) -> IPAddressType:
    """Classify an address string; "localhost" counts as IPv4."""
    if not address:
        return IPAddressType.NONE
    if address.lower() == _LOOPBACK_NAME:
        return IPAddressType.IPV4
    if _is_ipv4(address):
        return IPAddressType.IPV4
    if _is_ipv6(address):
        return IPAddressType.IPV6
    return IPAddressType.NONE


def _leading_int(text: str) -> int:
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


def parse_port(text: str) -> int:
    """Read a port number the way the port field does; raise if out of range."""
    port = _leading_int(text[: MAX_PORT_STRING_LENGTH - 1])
    if port < MIN_PORT or port > MAX_PORT:
        raise InvalidInputError(
            "port number must be between %d and %d" % (MIN_PORT, MAX_PORT)
        )
    return port


def parse_ip_field(text: str) -> str:
    """Trim the IP address field; empty means all addresses. Raise if invalid."""
    address = text[: MAX_IP_STRING_LENGTH - 1].strip(_WHITESPACE)
    if not address:
        return ""
    if not validate_ip_address(address):
        raise InvalidInputError("invalid IP address: %r" % address)
    return address


def format_status(is_capturing: bool, packet_count: int) -> str:
    """The text of the status panel."""
    state = STATUS_RUNNING if is_capturing else STATUS_STOPPED
    return "".join(
        (
            "Status: ",
            state,
            "\r\n",
            STATUS_PACKET_COUNT % packet_count,
            "\r\n\r\n",
            STATUS_USAGE,
            "\r\n\r\n",
            STATUS_ADMIN_REQUIRED,
        )
    )