"""
Contact endpoint protections: rate limiting and IP hashing.
"""
from .ip import extract_client_ip, hash_ip_address, is_valid_ip_address
from .rate_limit import RateLimitDecision, RateLimiter

__all__ = [
    "RateLimitDecision",
    "RateLimiter",
    "extract_client_ip",
    "hash_ip_address",
    "is_valid_ip_address",
]
