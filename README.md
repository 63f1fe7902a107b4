# pktscope

Tools for working with classic pcap capture files and the packets inside them:

- read and write pcap savefiles (`pktscope.savefile`)
- decode IPv4, IPv6, TCP and UDP headers into plain Python objects (`pktscope.headers`)
- pcap status codes, capture directions, timestamp types and link-type field helpers (`pktscope.pcapconst`)
- list the machine's network interfaces and their addresses (`pktscope.iflist`)
- validate IP addresses and port numbers typed by a user, and build status text (`pktscope.addressing`)
- build a small UDP broadcast frame with a correct IPv4 checksum (`pktscope.sendpack`)
- print UDP traffic and hex dumps of captured packets (`pktscope.udpdump`, `pktscope.dump`)
- remember window rectangles in a JSON file and check that they still fit on a screen (`pktscope.placement`)

## Installation

```
pip install .
```

Python 3.10 or later is required; `psutil` is installed with the package.
The tests need `pytest`:

```
pip install .[test]
pytest
```

## Commands

List the network interfaces with their address families, addresses, netmasks,
broadcast and destination addresses, and whether each is a loopback interface:

```
pktscope-iflist
```

Print every packet of a capture file as a `sec:usec (length)` line followed by a
hex dump, 16 bytes to a line:

```
pktscope-dump capture.pcap
```

With `--brief`, print only the local time of day, microseconds and length of
each packet. With `-v` (`--verify`), stop with an error as soon as a timestamp
goes backwards. In every case the command fails if the file holds no packets or
if the last timestamp is not later than the first.

```
pktscope-dump --brief capture.pcap
pktscope-dump -v capture.pcap
```

Print the IPv4 UDP packets of an Ethernet capture file as
`HH:MM:SS.uuuuuu len:N src.port -> dst.port`; other packets are skipped, and
files of any other link type are refused:

```
pktscope-udpdump capture.pcap
```

## Library use

Reading a savefile (little- and big-endian files, microsecond and nanosecond
timestamps; nanoseconds are reduced to microseconds):

```python
from pktscope.savefile import open_offline
from pktscope.dump import format_packet

with open_offline("capture.pcap") as reader:
    print(reader.linktype, reader.snaplen)
    for header, data in reader:
        print(format_packet(header, data))
```

Writing one (little-endian, microsecond timestamps):

```python
from pktscope.savefile import LINKTYPE_ETHERNET, PacketHeader, open_dump
from pktscope.sendpack import build_udp_broadcast

frame = build_udp_broadcast("192.0.2.10")
with open_dump("out.pcap", 65536, LINKTYPE_ETHERNET) as writer:
    writer.write(PacketHeader(ts_sec=0, ts_usec=0, caplen=len(frame), length=len(frame)), frame)
```

`pktscope.sendpack.frame_for_datalink` turns that Ethernet frame into the form
for a loopback (`LINKTYPE_NULL`) link, and `ipv4_checksum` computes the
Internet checksum of a header.

Decoding an IP packet:

```python
from pktscope.headers import packet_info_from_ip

info = packet_info_from_ip(ip_bytes, timestamp)
print(info.protocol, info.source_ip, info.source_port, "->", info.dest_ip, info.dest_port)
```

Checking timestamps of a run of packets:

```python
from pktscope.dump import check_timestamps

with open_offline("capture.pcap") as reader:
    count = check_timestamps((header for header, _ in reader), verify=True)
```

Checking user input:

```python
from pktscope.addressing import get_ip_address_type, parse_ip_field, parse_port, validate_ip_address

validate_ip_address("::1")        # True
get_ip_address_type("localhost")  # IPAddressType.IPV4
parse_port("8080")                # 8080
parse_ip_field("  10.0.0.1 ")     # "10.0.0.1"
```

Describing pcap status codes:

```python
from pktscope.pcapconst import status_to_str

status_to_str(-5)  # "no such device exists"
```

## Errors

Malformed or truncated capture files raise `pktscope.savefile.PcapFormatError`;
out-of-range ports and invalid addresses raise
`pktscope.addressing.InvalidInputError`; timestamp problems found by
`check_timestamps` raise `pktscope.dump.TimestampError`. All three are
subclasses of `ValueError`.

## What the package does not do

- It does not capture live traffic from a network interface, apply BPF filters,
  or send packets; the commands work on capture files that already exist, and
  `pktscope.sendpack` only builds frames.
- `pktscope-iflist` reports what the operating system tells `psutil`; interface
  descriptions are not available and are never printed.
- There is no graphical interface: `pktscope.addressing` and
  `pktscope.placement` provide the checks and storage such a window would use,
  but no window.