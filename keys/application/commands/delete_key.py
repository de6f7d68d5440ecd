"""
DeleteKeyCommand.

Command to permanently remove a key.
"""
from dataclasses import dataclass


@dataclass
class DeleteKeyCommand:
    """Command to delete a key."""

    key: str
