"""Per-process trust token stamped into every generated terminal URI.

URIs carrying shell commands, working directories or environment variables
are only honored when they hold this token, so a URI crafted outside this
process can never result in command execution.
"""

from __future__ import annotations

import hmac
import secrets
from dataclasses import dataclass
from typing import Any

TRUST_TOKEN_BYTES = 256
MIN_TRUST_TOKEN_BYTES = 16


def generate_trust_token(nbytes: int = TRUST_TOKEN_BYTES) -> str:
    """Return a hex-encoded secret of ``nbytes`` random bytes."""
    if nbytes < MIN_TRUST_TOKEN_BYTES:
        raise ValueError(f"Trust token needs at least {MIN_TRUST_TOKEN_BYTES} bytes, got {nbytes}.")
    return secrets.token_hex(nbytes)


@dataclass(frozen=True)
class TrustToken:
    value: str

    @classmethod
    def generate(cls, nbytes: int = TRUST_TOKEN_BYTES) -> "TrustToken":
        return cls(generate_trust_token(nbytes))

    def matches(self, candidate: Any) -> bool:
        if not isinstance(candidate, str) or not candidate:
            return False
        return hmac.compare_digest(self.value.encode("utf-8"), candidate.encode("utf-8"))

    def __repr__(self) -> str:
        return "TrustToken(<redacted>)"


PROCESS_TRUST_TOKEN = TrustToken.generate()


__all__ = [
    "MIN_TRUST_TOKEN_BYTES",
    "PROCESS_TRUST_TOKEN",
    "TRUST_TOKEN_BYTES",
    "TrustToken",
    "generate_trust_token",
]
