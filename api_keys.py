"""API key table for the credit overlay service."""

from __future__ import annotations

import hmac
import json
from dataclasses import dataclass, field
from typing import Mapping

DEFAULT_CALLER = "default"


@dataclass(frozen=True)
class ApiKeyTable:
    """Caller names keyed to their API keys; loaded once at startup."""

    keys: Mapping[str, str] = field(default_factory=dict[str, str])

    @classmethod
    def from_env_value(cls, raw: str | None) -> ApiKeyTable:
        """Parse ``API_KEY``: a JSON object of ``name -> key`` or one bare key."""

        raw = (raw or "").strip()
        if not raw:
            return cls()
        try:
            parsed = json.loads(raw)
        except json.JSONDecodeError:
            return cls({DEFAULT_CALLER: raw})
        if not isinstance(parsed, dict):
            return cls({DEFAULT_CALLER: raw})
        return cls(
            {
                str(name): str(key)
                for name, key in parsed.items()
                if isinstance(key, (str, int)) and str(key)
            }
        )

    def caller_for(self, api_key: object) -> str | None:
        """Return the caller name owning ``api_key``, or ``None``."""

        if not isinstance(api_key, str) or not api_key:
            return None
        for name, key in self.keys.items():
            if hmac.compare_digest(key.encode(), api_key.encode()):
                return name
        return None

    def __len__(self) -> int:
        return len(self.keys)


__all__ = ["ApiKeyTable"]
