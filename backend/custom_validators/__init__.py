"""Application Validators

Importing this package registers every application predicate with the
process-wide validator registry.
"""
from pathlib import Path

from custom_validators import accounts, password

MESSAGES_DIR = Path(__file__).parent / "messages"

__all__ = ["MESSAGES_DIR", "accounts", "password"]
