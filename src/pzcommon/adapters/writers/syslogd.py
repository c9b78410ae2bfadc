"""Sink writing to the host's syslog daemon.

Only meaningful on hosts running a syslog daemon; there is no Windows
support.
"""

import socket
import threading

from pzcommon.core.encoding.rfc5424 import format_message
from pzcommon.core.errors import SinkNotConfiguredError
from pzcommon.core.models import SyslogMessage

# Where local syslog daemons listen, in the order tried
LOCAL_SOCKET_PATHS = ("/dev/log", "/var/run/syslog", "/var/run/log")

_NETWORKS = {
    "udp": (socket.AF_UNSPEC, socket.SOCK_DGRAM),
    "tcp": (socket.AF_UNSPEC, socket.SOCK_STREAM),
    "unixgram": (socket.AF_UNIX, socket.SOCK_DGRAM),
    "unix": (socket.AF_UNIX, socket.SOCK_STREAM),
}


def _split_host_port(address: str) -> tuple[str, int]:
    host, sep, port = address.rpartition(":")
    if not sep or not port.isdigit():
        raise SinkNotConfiguredError(f"syslog address is not host:port: {address}")
    return host.strip("[]") or "localhost", int(port)


def _connect(family: int, kind: int, address: str | tuple) -> socket.socket:
    sock = socket.socket(family, kind)
    try:
        sock.connect(address)
    except OSError:
        sock.close()
        raise
    return sock


def _connect_inet(kind: int, host: str, port: int) -> socket.socket:
    """Connect to the first address host resolves to, IPv4 or IPv6."""
    last_error: OSError | None = None
    for family, _, _, _, sockaddr in socket.getaddrinfo(host, port, socket.AF_UNSPEC, kind):
        try:
            return _connect(family, kind, sockaddr)
        except OSError as e:
            last_error = e
    raise last_error or OSError(f"no address found for {host}:{port}")


def _dial_local() -> socket.socket:
    errors: list[str] = []
    for path in LOCAL_SOCKET_PATHS:
        for kind in (socket.SOCK_DGRAM, socket.SOCK_STREAM):
            try:
                return _connect(socket.AF_UNIX, kind, path)
            except OSError as e:
                errors.append(f"{path}: {e}")
    raise OSError("no local syslog daemon found (" + "; ".join(errors) + ")")


class SyslogdWriter:
    """Sends each record's text form to a syslog daemon.

    Args:
        network: ``""`` for the local daemon, or one of ``udp``, ``tcp``,
            ``unix``, ``unixgram``.
        address: ``host:port`` (``[v6addr]:port`` for IPv6) for udp/tcp, a socket path for unix and
            unixgram; ignored for the local daemon.
    """

    def __init__(self, network: str = "", address: str = "") -> None:
        if network and network not in _NETWORKS:
            raise SinkNotConfiguredError(f"unsupported syslog network: {network}")
        self.network = network
        self.address = address
        self._sock: socket.socket | None = None
        self._dial_lock = threading.Lock()
        self._send_lock = threading.Lock()

    def _dial(self) -> socket.socket:
        if not self.network:
            return _dial_local()
        if not self.address:
            raise SinkNotConfiguredError(f"{self.network} syslog writer has no address")
        family, kind = _NETWORKS[self.network]
        if family == socket.AF_UNIX:
            return _connect(family, kind, self.address)
        host, port = _split_host_port(self.address)
        return _connect_inet(kind, host, port)

    def _ensure_connected(self) -> socket.socket:
        sock = self._sock
        if sock is not None:
            return sock
        with self._dial_lock:
            if self._sock is None:
                self._sock = self._dial()
            return self._sock

    def write(self, message: SyslogMessage) -> None:
        """Send one record, dialing the daemon on first use.

        Raises:
            SinkNotConfiguredError: If network/address are unusable.
            OSError: If the daemon cannot be reached.
        """
        sock = self._ensure_connected()
        line = format_message(message)
        if sock.type == socket.SOCK_STREAM:
            line += "\n"
        with self._send_lock:
            sock.sendall(line.encode("utf-8"))

    def close(self) -> None:
        """Close the connection if one was dialed."""
        with self._dial_lock:
            if self._sock is not None:
                self._sock.close()
                self._sock = None
