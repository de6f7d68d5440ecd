"""
Key DTOs for API responses.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional


@dataclass
class CreatedKeyDTO:
    """DTO for a freshly created key; the only time the key is returned in full."""

    key: str
    name: str
    policy: str
    expires_at: Optional[datetime]
    created_at: datetime


@dataclass
class KeyListItemDTO:
    """DTO for one key in the admin listing."""

    key: str
    name: str
    active: bool
    policy: str
    status: str
    expired: bool
    uses: int
    created_at: datetime
    last_used_at: Optional[datetime]
    activated_at: Optional[datetime]
    expires_at: Optional[datetime]
    device_id: Optional[str]
    device_name: Optional[str]


@dataclass
class KeyListDTO:
    """DTO for the admin listing."""

    total: int
    keys: List[KeyListItemDTO]


@dataclass
class VerifiedKeyDTO:
    """DTO for the client-facing view of a verified key."""

    name: str
    uses: int
    expires_at: Optional[datetime]
    type: Optional[str] = None
    device_name: Optional[str] = None


@dataclass
class VerifyKeyResponseDTO:
    """DTO for a successful verification."""

    success: bool
    message: str
    user: VerifiedKeyDTO
