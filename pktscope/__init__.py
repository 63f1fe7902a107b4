"""Read, write and inspect pcap capture files, decode packet headers and list interfaces."""

__version__ = "0.1.0"

__all__ = [
    "addressing",
    "dump",
    "headers",
    "iflist",
    "pcapconst",
    "placement",
    "savefile",
    "sendpack",
    "udpdump",
]