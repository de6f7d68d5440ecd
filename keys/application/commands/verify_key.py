"""
VerifyKeyCommand.

Command sent by client software presenting a key.
"""
from dataclasses import dataclass
from typing import Optional


@dataclass
class VerifyKeyCommand:
    """Command to verify a key, optionally from a specific device."""

    key: Optional[str]
    device_id: Optional[str] = None
    device_name: Optional[str] = None
