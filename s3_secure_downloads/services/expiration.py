from __future__ import annotations


def expires_at(now_epoch_seconds: int, lifetime_seconds: int) -> int:
    # A lifetime of 0 yields a link that is already expired; that is allowed.
    return int(now_epoch_seconds) + int(lifetime_seconds)
