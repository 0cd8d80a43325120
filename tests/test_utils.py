import pytest

from snowcore.utils import (
    decode62,
    encode62,
    gen_uuid,
    get_current_milli_time,
    get_current_time,
    get_md5_hash,
    http_build_query,
    join,
    json_encode,
    map_values_to_str,
    num_to_str,
    substr,
    to_str,
)


def test_encode62_round_trip():
    num = 1122
    assert decode62(encode62(num)) == num


def test_encode62_values():
    assert encode62(0) == "0"
    assert encode62(61) == "Z"
    assert encode62(62) == "01"
    assert decode62(" 01 ") == 62


@pytest.mark.parametrize("num", [1, 9, 10, 62, 3843, 10**12])
def test_encode62_round_trip_many(num):
    assert decode62(encode62(num)) == num


def test_map_values_to_str():
    mp = {"a": 1, "b": "bb", "c": 3.2, "d": False}
    assert map_values_to_str(mp) == {"a": "1", "b": "bb", "c": "3.2", "d": "false"}


def test_to_str_other_values():
    assert to_str(None) == "<nil>"
    assert to_str(2.0) == "2"
    assert to_str(1e6) == "1e+06"
    assert to_str(["a", 1]) == "[a 1]"


def test_num_to_str():
    assert num_to_str(2211) == "2211"
    with pytest.raises(TypeError):
        num_to_str("2211")


def test_get_md5_hash():
    s = get_md5_hash("ss")
    assert len(s) == 32
    assert get_md5_hash("") == "d41d8cd98f00b204e9800998ecf8427e"


def test_json_encode():
    assert json_encode(None) == "null"
    assert json_encode({}) == "{}"
    assert json_encode({"name": "hts"}) == '{"name":"hts"}'


def test_json_encode_rejects_nan():
    with pytest.raises(ValueError):
        json_encode(float("nan"))


def test_substr():
    text = "1234567890"
    assert substr(text, 1, 2) == "23"
    assert substr(text, -2, 1) == "8"
    assert substr(text, -1, 0) == ""


def test_join():
    assert join("1", "2", "a") == "12a"


def test_current_time():
    t1 = get_current_time()
    t2 = get_current_milli_time()
    assert t1 == t2 // 1000 or t1 + 1 == t2 // 1000


def test_http_build_query():
    s = http_build_query({"uid": 1, "name": "hts"})
    assert s in ("uid=1&name=hts", "name=hts&uid=1")

    params = {
        "a": ["b", "c"],
        "map": {"a1": "111", "b2": 2.3, "b3": [1, 4]},
    }
    s = http_build_query(params)
    assert s == (
        "a%5B0%5D=b&a%5B1%5D=c&map%5Ba1%5D=111&map%5Bb2%5D=2.3"
        "&map%5Bb3%5D%5B0%5D=1&map%5Bb3%5D%5B1%5D=4"
    )


def test_gen_uuid():
    s = gen_uuid()
    assert len(s) == 36
    assert s != gen_uuid()