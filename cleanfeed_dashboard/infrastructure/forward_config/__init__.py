"""
Forwarding configuration persistence (RTMP URL and stream key).
"""

from .store import ConfigStore, parse_forward_env, serialize_forward_env

__all__ = [
    "ConfigStore",
    "parse_forward_env",
    "serialize_forward_env",
]
