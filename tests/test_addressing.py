import pytest

from pktscope.addressing import (
    DEFAULT_PORT,
    MAX_PORT,
    MIN_PORT,
    STATUS_ADMIN_REQUIRED,
    STATUS_PACKET_COUNT,
    STATUS_RUNNING,
    STATUS_STOPPED,
    STATUS_USAGE,
    InvalidInputError,
    IPAddressType,
    format_status,
    get_ip_address_type,
    parse_ip_field,
    parse_port,
    resolve_ip_address,
    validate_ip_address,
)


@pytest.mark.parametrize(
    "address",
    ["", "localhost", "LocalHost", "127.0.0.1", "::1", "192.168.1.1", "fe80::1",
     "::ffff:10.0.0.1", "2001:db8::abcd"],
)
def test_valid_addresses(address):
    assert validate_ip_address(address) is True


@pytest.mark.parametrize(
    "address",
    ["256.1.1.1", "1.2.3", "example", "fe80::1%eth0", "1.2.3.4.5", ":::"],
)
def test_invalid_addresses(address):
    assert validate_ip_address(address) is False


def test_resolve_localhost():
    assert resolve_ip_address("LOCALHOST") == "127.0.0.1"
    assert resolve_ip_address("10.1.2.3") == "10.1.2.3"
    assert resolve_ip_address("") == ""


@pytest.mark.parametrize(
    "address, kind",
    [
        ("", IPAddressType.NONE),
        ("localhost", IPAddressType.IPV4),
        ("10.0.0.1", IPAddressType.IPV4),
        ("::1", IPAddressType.IPV6),
        ("2001:db8::1", IPAddressType.IPV6),
        ("not-an-ip", IPAddressType.NONE),
    ],
)
def test_address_type(address, kind):
    assert get_ip_address_type(address) is kind


def test_valid_addresses_have_a_type():
    for address in ("10.0.0.1", "::1", "fe80::2", "localhost"):
        assert validate_ip_address(address)
        assert get_ip_address_type(address) is not IPAddressType.NONE


def test_parse_port_plain_and_prefix():
    assert parse_port(str(DEFAULT_PORT)) == DEFAULT_PORT
    assert parse_port("  443abc") == 443
    assert parse_port(str(MAX_PORT)) == MAX_PORT
    assert parse_port(str(MIN_PORT)) == MIN_PORT


def test_parse_port_reads_only_five_characters():
    assert parse_port("123456") == 12345


@pytest.mark.parametrize("text", ["0", "-1", "abc", "", "65536", "99999"])
def test_parse_port_rejects(text):
    with pytest.raises(InvalidInputError):
        parse_port(text)


def test_parse_ip_field_trims():
    assert parse_ip_field("  192.168.0.1\r\n") == "192.168.0.1"
    assert parse_ip_field("\tLocalHost ") == "LocalHost"


def test_parse_ip_field_empty_means_all():
    assert parse_ip_field("") == ""
    assert parse_ip_field(" \t\r\n ") == ""


def test_parse_ip_field_rejects_garbage():
    with pytest.raises(InvalidInputError):
        parse_ip_field("bogus")


def test_invalid_input_is_value_error():
    with pytest.raises(ValueError):
        parse_port("0")


def test_format_status_layout():
    text = format_status(True, 7)
    parts = text.split("\r\n")
    assert parts[0].endswith(STATUS_RUNNING)
    assert parts[1] == STATUS_PACKET_COUNT % 7
    assert parts[2] == ""
    assert parts[3] == STATUS_USAGE
    assert parts[-1] == STATUS_ADMIN_REQUIRED


def test_format_status_stopped():
    text = format_status(False, 0)
    assert text.split("\r\n")[0].endswith(STATUS_STOPPED)
    assert STATUS_RUNNING not in text.split("\r\n")[0]