"""
ListKeysQuery.

Query listing every issued key for administrators.
"""
from dataclasses import dataclass


@dataclass
class ListKeysQuery:
    """Query to list all keys, newest first."""
