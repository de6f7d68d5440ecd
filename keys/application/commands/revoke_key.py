"""
RevokeKeyCommand.

Command to permanently deactivate a key.
"""
from dataclasses import dataclass


@dataclass
class RevokeKeyCommand:
    """Command to revoke a key."""

    key: str
