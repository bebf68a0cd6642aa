"""LAN address discovery for the startup banner."""

import logging
import socket
from dataclasses import dataclass

import psutil

logger = logging.getLogger(__name__)

# macOS: en0 = Wi-Fi, en1..enN = Ethernet/Thunderbolt
# Linux: eth0, wlan0, enpXsY, wlpXsY
PHYSICAL_PREFIXES = ("en", "eth", "wlan", "enp", "wlp")


@dataclass
class LanAddress:
    ip: str
    interface: str


def is_physical_interface(name: str) -> bool:
    """Return True for likely Wi-Fi/Ethernet interfaces, False for VPN, Docker etc."""
    return name.startswith(PHYSICAL_PREFIXES)


def lan_addresses() -> list[LanAddress]:
    """Return the IPv4 addresses of physical interfaces that are up."""
    try:
        stats = psutil.net_if_stats()
        addrs = psutil.net_if_addrs()
    except (OSError, RuntimeError) as e:
        logger.debug("Cannot enumerate network interfaces: %s", e)
        return []

    result = []
    for name, if_addrs in addrs.items():
        stat = stats.get(name)
        if stat is None or not stat.isup:
            continue
        if not is_physical_interface(name):
            continue
        for addr in if_addrs:
            if addr.family != socket.AF_INET or addr.address.startswith("127."):
                continue
            result.append(LanAddress(ip=addr.address, interface=name))
    return result
