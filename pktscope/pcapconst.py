"""Status codes, enumerations and link-type helpers of the pcap API."""

from __future__ import annotations

import enum

PCAP_ERRBUF_SIZE = 256
PCAP_NETMASK_UNKNOWN = 0xFFFFFFFF

PCAP_IF_LOOPBACK = 0x00000001
PCAP_IF_UP = 0x00000002
PCAP_IF_RUNNING = 0x00000004
PCAP_IF_WIRELESS = 0x00000008
PCAP_IF_CONNECTION_STATUS = 0x00000030

PCAP_TSTAMP_PRECISION_MICRO = 0
PCAP_TSTAMP_PRECISION_NANO = 1

PCAP_OPENFLAG_PROMISCUOUS = 0x00000001
PCAP_OPENFLAG_DATATX_UDP = 0x00000002
PCAP_OPENFLAG_NOCAPTURE_RPCAP = 0x00000004
PCAP_OPENFLAG_NOCAPTURE_LOCAL = 0x00000008
PCAP_OPENFLAG_MAX_RESPONSIVENESS = 0x00000010

_FCS_LENGTH_PRESENT = 0x04000000


class PcapStatus(enum.IntEnum):
    """Error (negative) and warning (positive) codes of the pcap API."""

    ERROR = -1
    ERROR_BREAK = -2
    ERROR_NOT_ACTIVATED = -3
    ERROR_ACTIVATED = -4
    ERROR_NO_SUCH_DEVICE = -5
    ERROR_RFMON_NOTSUP = -6
    ERROR_NOT_RFMON = -7
    ERROR_PERM_DENIED = -8
    ERROR_IFACE_NOT_UP = -9
    ERROR_CANTSET_TSTAMP_TYPE = -10
    ERROR_PROMISC_PERM_DENIED = -11
    ERROR_TSTAMP_PRECISION_NOTSUP = -12
    ERROR_CAPTURE_NOTSUP = -13
    WARNING = 1
    WARNING_PROMISC_NOTSUP = 2
    WARNING_TSTAMP_TYPE_NOTSUP = 3

    @property
    def is_error(self) -> bool:
        return self.value < 0

    @property
    def is_warning(self) -> bool:
        return self.value > 0

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self]


_DESCRIPTIONS = {
    PcapStatus.ERROR: "generic error",
    PcapStatus.ERROR_BREAK: "loop terminated by pcap_breakloop",
    PcapStatus.ERROR_NOT_ACTIVATED: "the capture needs to be activated",
    PcapStatus.ERROR_ACTIVATED: (
        "the operation can't be performed on already activated captures"
    ),
    PcapStatus.ERROR_NO_SUCH_DEVICE: "no such device exists",
    PcapStatus.ERROR_RFMON_NOTSUP: "this device doesn't support rfmon (monitor) mode",
    PcapStatus.ERROR_NOT_RFMON: "operation supported only in monitor mode",
    PcapStatus.ERROR_PERM_DENIED: "no permission to open the device",
    PcapStatus.ERROR_IFACE_NOT_UP: "interface isn't up",
    PcapStatus.ERROR_CANTSET_TSTAMP_TYPE: (
        "this device doesn't support setting the time stamp type"
    ),
    PcapStatus.ERROR_PROMISC_PERM_DENIED: (
        "you don't have permission to capture in promiscuous mode"
    ),
    PcapStatus.ERROR_TSTAMP_PRECISION_NOTSUP: (
        "the requested time stamp precision is not supported"
    ),
    PcapStatus.ERROR_CAPTURE_NOTSUP: "capture mechanism not available",
    PcapStatus.WARNING: "generic warning",
    PcapStatus.WARNING_PROMISC_NOTSUP: "this device doesn't support promiscuous mode",
    PcapStatus.WARNING_TSTAMP_TYPE_NOTSUP: "the requested time stamp type is not supported",
}


class Direction(enum.IntEnum):
    """Which packets a capture sees, relative to the interface."""

    INOUT = 0
    IN = 1
    OUT = 2


class TimestampType(enum.IntEnum):
    """Sources of packet time stamps."""

    HOST = 0
    HOST_LOWPREC = 1
    HOST_HIPREC = 2
    ADAPTER = 3
    ADAPTER_UNSYNCED = 4
    HOST_HIPREC_UNSYNCED = 5

    @property
    def provided_by_host(self) -> bool:
        return self not in (TimestampType.ADAPTER, TimestampType.ADAPTER_UNSYNCED)

    @property
    def synced_with_system_clock(self) -> bool | None:
        """Whether the stamp follows the system clock; None when unknown."""
        if self is TimestampType.HOST:
            return None
        return self not in (
            TimestampType.ADAPTER_UNSYNCED,
            TimestampType.HOST_HIPREC_UNSYNCED,
        )


def status_to_str(code: int) -> str:
    """Describe a pcap status code."""
    if code == 0:
        return "no error"
    try:
        return PcapStatus(code).description
    except ValueError:
        return "unknown status %d" % code


def lt_linktype(value: int) -> int:
    """The link-layer header type in the low 16 bits."""
    return value & 0x0000FFFF


def lt_linktype_ext(value: int) -> int:
    """The extension bits above the link-layer header type."""
    return value & 0xFFFF0000


def lt_reserved1(value: int) -> int:
    return value & 0x03FF0000


def lt_fcs_length_present(value: int) -> int:
    return value & _FCS_LENGTH_PRESENT


def lt_fcs_length(value: int) -> int:
    """FCS length, in units of 16 bits."""
    return (value & 0xF0000000) >> 28


def lt_fcs_datalink_ext(value: int) -> int:
    """Extension bits announcing an FCS of the given length (16-bit units)."""
    return ((value & 0xF) << 28) | _FCS_LENGTH_PRESENT