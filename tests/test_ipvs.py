import ipaddress

import pytest

from procfs.ipvs import (
    IPVSStats,
    parse_ip_port,
    parse_ipvs_backend_status,
    parse_ipvs_stats,
)

IP_VS_STATS = """   Total Incoming Outgoing         Incoming         Outgoing
   Conns  Packets  Packets            Bytes            Bytes
 16AA370 E33656E5        0    51D8C8883AB3        0

 Conns/s   Pkts/s   Pkts/s          Bytes/s          Bytes/s
       4    1FB3C        0          1282A8F        0
"""

IP_VS = """IP Virtual Server version 1.2.1 (size=4096)
Prot LocalAddress:Port Scheduler Flags
  -> RemoteAddress:Port Forward Weight ActiveConn InActConn
TCP  C0A80016:0CEA wlc
  -> C0A85216:0CEA      Tunnel  100    248        2
  -> C0A85318:0CEA      Tunnel  100    248        2
TCP  [2620:0000:0000:0000:0000:0000:0000:0001]:0050 sr
  -> [2620:0000:0000:0000:0000:0000:0000:0004]:0050      Route   1      1          1
FWM  10001000 wlc
  -> C0A8321A:0CEA      Route   0      0          1
  -> C0A83215:0CEA      Route   0      0          2
"""


def test_parse_ipvs_stats():
    assert parse_ipvs_stats(IP_VS_STATS) == IPVSStats(
        connections=23765872,
        incoming_packets=3811989221,
        outgoing_packets=0,
        incoming_bytes=89991519156915,
        outgoing_bytes=0,
    )


def test_parse_ipvs_stats_accepts_bytes():
    assert parse_ipvs_stats(IP_VS_STATS.encode()).connections == 23765872


def test_parse_ipvs_stats_too_short():
    with pytest.raises(ValueError, match="too short"):
        parse_ipvs_stats("a\nb\n")


def test_parse_ipvs_stats_field_count():
    with pytest.raises(ValueError, match="unexpected number of fields"):
        parse_ipvs_stats("a\nb\n1 2 3\n")


def test_parse_ipvs_stats_bad_hex():
    with pytest.raises(ValueError):
        parse_ipvs_stats("a\nb\n1 2 3 4 ZZ\n")


def test_parse_ip_port():
    ip, port = parse_ip_port("C0A80016:0CEA")
    assert ip == ipaddress.ip_address("192.168.0.22")
    assert port == 3306


@pytest.mark.parametrize(
    "value",
    ["", "C0A80016", "C0A800:1234", "FOOBARBA:1234", "C0A80016:0CEA:1234"],
)
def test_parse_ip_port_invalid(value):
    with pytest.raises(ValueError):
        parse_ip_port(value)


def test_parse_ip_port_ipv6():
    ip, port = parse_ip_port("[DEAD:BEEF:0000:0000:0000:0000:0000:0001]:1F90")
    assert ip == ipaddress.ip_address("dead:beef::1")
    assert port == 8080


def test_parse_backend_status():
    status = parse_ipvs_backend_status(IP_VS)
    assert len(status) == 5

    first = status[0]
    assert first.local_address == ipaddress.ip_address("192.168.0.22")
    assert first.local_port == 3306
    assert first.remote_address == ipaddress.ip_address("192.168.82.22")
    assert first.remote_port == 3306
    assert first.proto == "TCP"
    assert (first.weight, first.active_conn, first.inact_conn) == (100, 248, 2)

    assert status[1].remote_address == ipaddress.ip_address("192.168.83.24")

    v6 = status[2]
    assert v6.local_address == ipaddress.ip_address("2620::1")
    assert v6.remote_address == ipaddress.ip_address("2620::4")
    assert v6.local_port == 80
    assert (v6.weight, v6.active_conn, v6.inact_conn) == (1, 1, 1)


def test_parse_backend_status_fwm():
    status = parse_ipvs_backend_status(IP_VS)
    fwm = status[3:]
    assert [entry.proto for entry in fwm] == ["FWM", "FWM"]
    assert all(entry.local_mark == "10001000" for entry in fwm)
    assert all(entry.local_address is None and entry.local_port == 0 for entry in fwm)
    assert fwm[0].remote_address == ipaddress.ip_address("192.168.50.26")
    assert fwm[1].remote_address == ipaddress.ip_address("192.168.50.21")
    assert [entry.inact_conn for entry in fwm] == [1, 2]


def test_parse_backend_status_bad_address():
    with pytest.raises(ValueError):
        parse_ipvs_backend_status("TCP  C0A800:1234 wlc\n")