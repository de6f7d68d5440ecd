"""
Model registration for the keys app.

Django discovers models through this module; the model itself lives in
keys.infrastructure.models.
"""
from keys.infrastructure.models import KeyRecord  # noqa: F401
