"""Reading and writing classic pcap capture files."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import BinaryIO, ClassVar, Iterator

PCAP_VERSION_MAJOR = 2
PCAP_VERSION_MINOR = 4

TCPDUMP_MAGIC = 0xA1B2C3D4
NSEC_TCPDUMP_MAGIC = 0xA1B23C4D

LINKTYPE_NULL = 0
LINKTYPE_ETHERNET = 1

_RECORD = "IIII"
_RECORD_SIZE = struct.calcsize("<" + _RECORD)
_FILE_HEADER = "IHHiIII"


class PcapFormatError(ValueError):
    """Raised when a capture file is malformed or truncated."""


@dataclass(frozen=True)
class FileHeader:
    """The header that opens every pcap savefile."""

    snaplen: int
    linktype: int
    magic: int = TCPDUMP_MAGIC
    version_major: int = PCAP_VERSION_MAJOR
    version_minor: int = PCAP_VERSION_MINOR
    thiszone: int = 0
    sigfigs: int = 0
    byte_order: str = "<"

    SIZE: ClassVar[int] = struct.calcsize("<" + _FILE_HEADER)

    @property
    def nanosecond(self) -> bool:
        """True when record timestamps carry nanoseconds."""
        return self.magic == NSEC_TCPDUMP_MAGIC

    def to_bytes(self) -> bytes:
        return struct.pack(
            self.byte_order + _FILE_HEADER,
            self.magic,
            self.version_major,
            self.version_minor,
            self.thiszone,
            self.sigfigs,
            self.snaplen,
            self.linktype,
        )

    @classmethod
    def from_bytes(cls, data: bytes) -> "FileHeader":
        if len(data) < cls.SIZE:
            raise PcapFormatError("truncated dump file; need %d header bytes" % cls.SIZE)
        for order in ("<", ">"):
            (magic,) = struct.unpack_from(order + "I", data)
            if magic in (TCPDUMP_MAGIC, NSEC_TCPDUMP_MAGIC):
                break
        else:
            raise PcapFormatError("unknown file format")
        fields = struct.unpack_from(order + _FILE_HEADER, data)
        header = cls(
            magic=fields[0],
            version_major=fields[1],
            version_minor=fields[2],
            thiszone=fields[3],
            sigfigs=fields[4],
            snaplen=fields[5],
            linktype=fields[6],
            byte_order=order,
        )
        if header.version_major < PCAP_VERSION_MAJOR:
            raise PcapFormatError("archaic pcap savefile format")
        return header


@dataclass(frozen=True)
class PacketHeader:
    """Per-packet information: timestamp and captured/original lengths."""

    ts_sec: int
    ts_usec: int
    caplen: int
    length: int


class SavefileReader:
    """Iterates over the packets of a pcap savefile."""

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream
        self.header = FileHeader.from_bytes(stream.read(FileHeader.SIZE))

    @property
    def snaplen(self) -> int:
        return self.header.snaplen

    @property
    def linktype(self) -> int:
        return self.header.linktype

    @property
    def is_swapped(self) -> bool:
        return self.header.byte_order != "<"

    def __iter__(self) -> Iterator[tuple[PacketHeader, bytes]]:
        order = self.header.byte_order
        while True:
            raw = self._stream.read(_RECORD_SIZE)
            if not raw:
                return
            if len(raw) < _RECORD_SIZE:
                raise PcapFormatError(
                    "truncated dump file; tried to read %d header bytes, only got %d"
                    % (_RECORD_SIZE, len(raw))
                )
            ts_sec, ts_frac, caplen, length = struct.unpack(order + _RECORD, raw)
            data = self._stream.read(caplen)
            if len(data) < caplen:
                raise PcapFormatError(
                    "truncated dump file; tried to read %d captured bytes, only got %d"
                    % (caplen, len(data))
                )
            ts_usec = ts_frac // 1000 if self.header.nanosecond else ts_frac
            yield PacketHeader(ts_sec, ts_usec, caplen, length), data

    def close(self) -> None:
        self._stream.close()

    def __enter__(self) -> "SavefileReader":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class SavefileWriter:
    """Writes packets to a pcap savefile with microsecond timestamps."""

    def __init__(self, stream: BinaryIO, snaplen: int, linktype: int) -> None:
        self._stream = stream
        self.header = FileHeader(snaplen=snaplen, linktype=linktype)
        stream.write(self.header.to_bytes())

    def write(self, header: PacketHeader, data: bytes) -> None:
        if len(data) < header.caplen:
            raise ValueError(
                "packet data holds %d bytes but caplen is %d" % (len(data), header.caplen)
            )
        self._stream.write(
            struct.pack("<" + _RECORD, header.ts_sec, header.ts_usec, header.caplen, header.length)
        )
        self._stream.write(bytes(data[: header.caplen]))

    def flush(self) -> None:
        self._stream.flush()

    def close(self) -> None:
        self._stream.close()

    def __enter__(self) -> "SavefileWriter":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def open_offline(path) -> SavefileReader:
    """Open a savefile for reading."""
    stream = open(path, "rb")
    try:
        return SavefileReader(stream)
    except Exception:
        stream.close()
        raise


def open_dump(path, snaplen: int, linktype: int) -> SavefileWriter:
    """Create a savefile for writing."""
    stream = open(path, "wb")
    try:
        return SavefileWriter(stream, snaplen, linktype)
    except Exception:
        stream.close()
        raise