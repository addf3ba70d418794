import pytest

from procfs.buddyinfo import BuddyInfo, parse_buddy_info

BUDDYINFO = """Node 0, zone      DMA      1      0      1      0      2      1      1      0      1      1      3
Node 0, zone    DMA32    759    572    791    475    194     45     12      0      0      0      0
Node 0, zone   Normal   4381   1093    185   1530    567    102      4      0      0      0      0
"""


def test_buddy_info():
    info = parse_buddy_info(BUDDYINFO)
    assert len(info) == 3
    assert info[0].zone == "DMA"
    assert info[2].zone == "Normal"
    assert info[2].sizes[0] == 4381.0
    assert info[1].sizes[1] == 572.0
    assert info[0].node == "0"


def test_buddy_info_full_row():
    info = parse_buddy_info(BUDDYINFO)
    assert info[0] == BuddyInfo(
        node="0", zone="DMA", sizes=[1.0, 0.0, 1.0, 0.0, 2.0, 1.0, 1.0, 0.0, 1.0, 1.0, 3.0]
    )


def test_parse_buddy_info_short():
    text = "Node 0, zone\nNode 0, zone\nNode 0, zone\n"
    with pytest.raises(ValueError) as excinfo:
        parse_buddy_info(text)
    assert str(excinfo.value) == "invalid number of fields when parsing buddyinfo"


def test_parse_buddy_info_size_mismatch():
    text = (
        "Node 0, zone      DMA      1      0      1      0      2      1      1      0      1      1      3\n"
        "Node 0, zone    DMA32    759    572    791    475    194     45     12      0      0      0      0      0\n"
        "Node 0, zone   Normal   4381   1093    185   1530    567    102      4      0      0      0\n"
    )
    with pytest.raises(ValueError) as excinfo:
        parse_buddy_info(text)
    assert str(excinfo.value).startswith("mismatch in number of buddyinfo buckets")


def test_parse_buddy_info_invalid_value():
    with pytest.raises(ValueError, match="invalid value in buddyinfo"):
        parse_buddy_info("Node 0, zone DMA 1 x 3\n")


def test_parse_buddy_info_empty():
    assert parse_buddy_info("") == []