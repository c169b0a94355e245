from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class SignResult:
    """
    Outcome of a signing attempt: a URL, or the reason there is none.
    """
    url: Optional[str] = None
    reason: Optional[str] = None

    @property
    def ok(self) -> bool:
        return bool(self.url)

    @classmethod
    def success(cls, url: str) -> "SignResult":
        return cls(url=url)

    @classmethod
    def failure(cls, reason: str) -> "SignResult":
        return cls(reason=reason)
