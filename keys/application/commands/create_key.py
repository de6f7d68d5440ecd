"""
CreateKeyCommand.

Command to mint a new key.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class CreateKeyCommand:
    """
    Command to create a key.

    ``expires_in_days`` applies in fixed-date mode, ``duration``
    (day, week, month, lifetime) in duration mode.
    """

    name: str
    expires_in_days: Optional[int] = None
    duration: Optional[str] = None
