#!/usr/bin/env python3
"""
ip.py
-----
Privacy-preserving client IP handling for the contact endpoint.

Raw IP addresses are never stored: callers hash them with a salt and use
the digest as the rate-limit identifier.

Usage:
    from folio.security.ip import extract_client_ip, hash_ip_address

    ip = extract_client_ip(request.headers)
    identifier = hash_ip_address(ip) if ip else "anonymous"
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import hashlib
import logging
import os
import re
from typing import Mapping, Optional, Sequence, Union

# --- Local imports ---
from folio.configs import RATE_LIMIT, RateLimitConfig

logger = logging.getLogger(__name__)

DEV_SALT = "dev-salt-change-in-production"

IPV4_PATTERN = re.compile(
    r"^(?:(?:25[0-5]|2[0-4][0-9]|[01]?[0-9][0-9]?)\.){3}"
    r"(?:25[0-5]|2[0-4][0-9]|[01]?[0-9][0-9]?)$"
)
IPV6_PATTERN = re.compile(r"^(?:[0-9a-fA-F]{1,4}:){7}[0-9a-fA-F]{1,4}$|^::1$|^::$")

# Most specific first; x-forwarded-for may carry a comma-separated chain
IP_HEADERS = (
    "x-forwarded-for",
    "x-real-ip",
    "x-client-ip",
    "cf-connecting-ip",
    "x-cluster-client-ip",
    "true-client-ip",
)


def hash_ip_address(
    ip: str, salt: Optional[str] = None, config: RateLimitConfig = RATE_LIMIT
) -> str:
    """
    Hash an IP address with a salt.

    The salt comes from the argument, then the environment variable named
    by `config.salt_env_var` (FOLIO_CONTACT_SALT by default), then a
    development default (logged as a warning).

    Returns:
        First 16 hex characters of sha256(ip + salt)
    """
    if salt is None:
        salt = os.environ.get(config.salt_env_var)
    if not salt:
        logger.warning(
            "%s is not set; hashing IPs with the development salt",
            config.salt_env_var,
        )
        salt = DEV_SALT
    return hashlib.sha256((ip + salt).encode("utf-8")).hexdigest()[:16]


def is_valid_ip_address(ip: str) -> bool:
    """True for dotted IPv4 or full / loopback IPv6 addresses."""
    return bool(IPV4_PATTERN.match(ip) or IPV6_PATTERN.match(ip))


def extract_client_ip(
    headers: Mapping[str, Union[str, Sequence[str], None]]
) -> Optional[str]:
    """
    Find the client IP in proxy headers.

    Header names are matched case-insensitively. The first header holding
    a valid address wins; for lists and comma-separated chains only the
    first element is considered.
    """
    lowered = {str(name).lower(): value for name, value in headers.items()}
    for header in IP_HEADERS:
        value = lowered.get(header)
        if not value:
            continue
        first = value.split(",")[0] if isinstance(value, str) else value[0]
        candidate = first.strip()
        if is_valid_ip_address(candidate):
            return candidate
    return None
