"""
Keys module - issued key management.

This module handles:
- KeyRecord entity and lifecycle transitions
- The key lifecycle engine (create, revoke, delete, list, verify)
- Key store port and its Django / in-memory adapters
"""
