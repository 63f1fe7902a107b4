"""Printing the packets of a capture file and checking their timestamps."""

from __future__ import annotations

import argparse
import sys
import time
from typing import Iterable, Optional

from pktscope.savefile import PacketHeader, PcapFormatError, open_offline

LINE_LEN = 16

_ZERO = (0, 0)


class TimestampError(ValueError):
    """Raised when packet timestamps are missing or do not move forward."""


def hex_dump(data: bytes) -> str:
    """Bytes as two-digit hex, each followed by a space, 16 to a line."""
    parts = []
    for index, byte in enumerate(bytes(data), 1):
        parts.append("%.2x " % byte)
        if index % LINE_LEN == 0:
            parts.append("\n")
    return "".join(parts)


def format_packet(header: PacketHeader, data: bytes) -> str:
    """Timestamp, original length and a hex dump of the captured bytes."""
    return "%d:%d (%d)\n%s\n\n" % (
        header.ts_sec,
        header.ts_usec,
        header.length,
        hex_dump(bytes(data)[: header.caplen]),
    )


def format_brief(header: PacketHeader) -> str:
    """Local time of day with microseconds, and the packet length."""
    timestr = time.strftime("%H:%M:%S", time.localtime(header.ts_sec))
    return "%s,%.6d len:%d" % (timestr, header.ts_usec, header.length)


class _TimestampTracker:
    """Follows the first and latest timestamps seen in a capture."""

    def __init__(self, verify: bool) -> None:
        self.verify = verify
        self.first = _ZERO
        self.prev = _ZERO
        self.count = 0

    def feed(self, header: PacketHeader) -> Optional[str]:
        """Record a packet; return an error message if it went backwards."""
        stamp = (header.ts_sec, header.ts_usec)
        if self.first == _ZERO:
            self.first = stamp
        error = None
        if self.verify and self.prev != _ZERO and stamp < self.prev:
            error = "Backwards timestamp!"
        self.prev = stamp
        self.count += 1
        return error

    def finish(self) -> None:
        """Raise unless packets were seen and the last came after the first."""
        if self.prev == _ZERO:
            raise TimestampError("No packets processed!")
        if not self.prev > self.first:
            raise TimestampError(
                "Timestamps do not increase: %d.%06d" % self.prev
            )


def check_timestamps(headers: Iterable[PacketHeader], verify: bool) -> int:
    """Check a run of packet headers; return how many were checked.

    With verify, a timestamp earlier than the one before it is an error.
    In any case the run must not be empty and must end later than it began.
    """
    tracker = _TimestampTracker(verify)
    for header in headers:
        error = tracker.feed(header)
        if error:
            raise TimestampError(error)
    tracker.finish()
    return tracker.count


def main(argv=None) -> int:
    """Print every packet of a capture file."""
    parser = argparse.ArgumentParser(
        prog="dump", description="Print the packets of a pcap capture file."
    )
    parser.add_argument(
        "-v",
        "--verify",
        action="store_true",
        help="fail when a timestamp goes backwards",
    )
    parser.add_argument(
        "--brief",
        action="store_true",
        help="print only time of day and length of each packet",
    )
    parser.add_argument("filename", help="pcap savefile to read")
    args = parser.parse_args(argv)

    try:
        reader = open_offline(args.filename)
    except (OSError, PcapFormatError) as exc:
        print("Unable to open the file %s: %s" % (args.filename, exc), file=sys.stderr)
        return 1

    tracker = _TimestampTracker(args.verify)
    with reader:
        try:
            for header, data in reader:
                error = tracker.feed(header)
                if args.brief:
                    sys.stdout.write(format_brief(header) + "\n")
                else:
                    sys.stdout.write(format_packet(header, data))
                if error:
                    print(error, file=sys.stderr)
                    return 1
        except PcapFormatError as exc:
            print("Error reading the packets: %s" % exc, file=sys.stderr)
            return 1
    try:
        tracker.finish()
    except TimestampError as exc:
        print(exc, file=sys.stderr)
        return 1
    return 0