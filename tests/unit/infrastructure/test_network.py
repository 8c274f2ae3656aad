import socket

from flowstat.infrastructure.network import LOOPBACK, resolve_server_ip


def test_override_wins(mocker):
    probe = mocker.patch("flowstat.infrastructure.network.socket.socket")

    assert resolve_server_ip("172.16.0.4") == "172.16.0.4"
    probe.assert_not_called()


def test_outbound_route_address(mocker):
    sock = mocker.MagicMock()
    sock.getsockname.return_value = ("10.1.2.3", 50000)
    factory = mocker.patch("flowstat.infrastructure.network.socket.socket")
    factory.return_value.__enter__.return_value = sock

    assert resolve_server_ip() == "10.1.2.3"


def test_falls_back_to_hostname(mocker):
    mocker.patch("flowstat.infrastructure.network.socket.socket", side_effect=OSError("no route"))
    mocker.patch("flowstat.infrastructure.network.socket.gethostname", return_value="gw-1")
    mocker.patch("flowstat.infrastructure.network.socket.gethostbyname", return_value="192.168.0.9")

    assert resolve_server_ip() == "192.168.0.9"


def test_falls_back_to_loopback(mocker):
    mocker.patch("flowstat.infrastructure.network.socket.socket", side_effect=OSError("no route"))
    mocker.patch(
        "flowstat.infrastructure.network.socket.gethostbyname", side_effect=socket.gaierror("unknown")
    )

    assert resolve_server_ip() == LOOPBACK
