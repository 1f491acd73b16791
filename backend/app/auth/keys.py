"""
Widget API key utilities.

Notes:
  • Widget keys are public by nature (they ship inside the embed snippet),
    so they are stored as-is and looked up directly, not hashed.
  • 128 bits of randomness, hex encoded, 32 characters.
  • masked() is the only form that may appear in logs or diagnostics.
"""

import secrets


def generate_api_key() -> str:
    """Generate a new random widget API key."""
    return secrets.token_hex(16)


def masked(secret: str, visible: int = 6) -> str:
    """Show the first `visible` characters of a secret, or NOT SET."""
    if not secret:
        return "NOT SET"
    return f"{secret[:visible]}..."
