"""Server identity discovery."""

import logging
import socket
from typing import Optional

logger = logging.getLogger(__name__)

LOOPBACK = "127.0.0.1"


def resolve_server_ip(override: Optional[str] = None) -> str:
    """
    Resolve the address stamped on every report record.

    Resolution order: explicit override, the source address of an outbound
    UDP route (no packet is sent), the hostname's address, then loopback.
    """
    if override:
        return override

    try:
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
            sock.connect(("10.255.255.255", 1))
            ip = sock.getsockname()[0]
            if ip and not ip.startswith("127."):
                return ip
    except OSError as e:
        logger.debug(f"Outbound route lookup failed: {e}")

    try:
        ip = socket.gethostbyname(socket.gethostname())
        if ip:
            return ip
    except OSError as e:
        logger.warning(f"Hostname resolution failed: {e}")

    return LOOPBACK
