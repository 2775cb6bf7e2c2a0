import asyncio
import ipaddress
import socket
from enum import Enum, auto
from urllib.parse import urlparse

from vidrelay.config.settings import config


class UrlValidationResult(Enum):
    """URL validation result without throwing exceptions"""
    OK = auto()
    BLOCKED = auto()
    INVALID = auto()


class SecurityValidator:
    """
    Validate URL security without throwing exceptions.
    Returns result enum for separation of concerns.
    """

    @staticmethod
    def is_blocked_ip(ip_str: str) -> bool:
        ip = ipaddress.ip_address(ip_str)

        if ip.is_link_local or ip.is_multicast or ip.is_unspecified:
            return True

        if ip.is_loopback:
            return not config.security.allow_localhost

        if ip.is_private:
            return not config.security.allow_private_ips

        return False

    @staticmethod
    async def validate_url(url: str) -> UrlValidationResult:
        """
        Validate URL against SSRF attacks.
        Resolves the host off the event loop and checks every address.
        """
        if not config.security.enable_ssrf_protection:
            return UrlValidationResult.OK

        try:
            hostname = urlparse(url).hostname
        except ValueError:
            return UrlValidationResult.INVALID

        if not hostname:
            return UrlValidationResult.INVALID

        try:
            addr_info = await asyncio.to_thread(socket.getaddrinfo, hostname, None)
        except socket.gaierror:
            # DNS failed - let yt-dlp report the unreachable host
            return UrlValidationResult.OK

        for info in addr_info:
            try:
                if SecurityValidator.is_blocked_ip(info[4][0]):
                    return UrlValidationResult.BLOCKED
            except ValueError:
                return UrlValidationResult.INVALID

        return UrlValidationResult.OK
