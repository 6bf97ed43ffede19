import pytest

from epollserve.endpoint import EndPoint, EndPointV2, ServerError, errif


def test_errif_raises_with_message():
    with pytest.raises(ServerError, match="failed to create socket"):
        errif(True, "failed to create socket")


def test_errif_false_returns_nothing():
    assert errif(False, "unused") is None


def test_default_endpoint_is_unspecified_address():
    endpoint = EndPoint()
    assert endpoint.sockaddr() == ("0.0.0.0", 0)


def test_endpoint_sockaddr_round_trip():
    endpoint = EndPoint("127.0.0.1", 8080)
    assert endpoint.sockaddr() == ("127.0.0.1", 8080)
    assert EndPoint(*endpoint.sockaddr()) == endpoint


def test_endpoint_rejects_bad_address():
    with pytest.raises(ValueError):
        EndPoint("not-an-address", 80)


@pytest.mark.parametrize("port", [-1, 65536])
def test_endpoint_rejects_bad_port(port):
    with pytest.raises(ValueError):
        EndPoint("127.0.0.1", port)


def test_endpoint_v2_str_format():
    assert str(EndPointV2(ip=0x7F000001, port=8080)) == "{EP: 127.0.0.1:8080}"


def test_endpoint_v2_equality_and_hash():
    first = EndPointV2(ip=0x0A000001, port=9000)
    second = EndPointV2(ip=0x0A000001, port=9000)
    other = EndPointV2(ip=0x0A000001, port=9001)
    assert first == second
    assert hash(first) == hash(second)
    assert first != other
    assert len({first, second, other}) == 2


def test_endpoint_v2_hash_of_zero_port_is_ip_hash():
    result = hash(EndPointV2(ip=1234, port=0))
    assert result == 1234


@pytest.mark.parametrize("ip, port", [(-1, 80), (2**32, 80), (1, 70000)])
def test_endpoint_v2_rejects_out_of_range(ip, port):
    with pytest.raises(ValueError):
        EndPointV2(ip=ip, port=port)