# s3_secure_downloads/services/hooks.py
from __future__ import annotations

import importlib
import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional, Protocol, runtime_checkable

from s3_secure_downloads.models.asset import Asset, SigningOptions

logger = logging.getLogger("S3SecureDownloads-Hooks")


@dataclass
class SignEvent:
    """
    Per-call carrier handed to hooks. Created fresh for every sign
    operation and dropped once it completes.
    """
    uid: str
    asset: Optional[Asset]
    options: SigningOptions = field(default_factory=SigningOptions)

    # Filled in once a URL exists
    key: Optional[str] = None
    url: Optional[str] = None
    signer: Optional[str] = None


@dataclass(frozen=True)
class AssetOverride:
    """
    Returned by before_sign to replace the candidate asset.
    AssetOverride(None) clears it, which aborts signing.
    """
    asset: Optional[Asset]


@runtime_checkable
class SignHook(Protocol):
    def before_sign(self, event: SignEvent) -> Optional[AssetOverride]: ...

    def after_sign(self, event: SignEvent) -> None: ...


class BaseSignHook:
    """Convenience base: both extension points do nothing."""

    def before_sign(self, event: SignEvent) -> Optional[AssetOverride]:
        return None

    def after_sign(self, event: SignEvent) -> None:
        return None


class HookDispatcher:
    """
    Ordered, synchronous dispatch. Registration order is call order, and
    every hook finishes before the next step of signing runs.
    """

    def __init__(self, hooks: Iterable[SignHook] = ()):
        self._hooks: list[SignHook] = list(hooks)

    def register(self, hook: SignHook) -> None:
        self._hooks.append(hook)

    @property
    def hooks(self) -> tuple[SignHook, ...]:
        return tuple(self._hooks)

    def before_sign(self, event: SignEvent) -> Optional[Asset]:
        for hook in self._hooks:
            override = hook.before_sign(event)
            if override is not None:
                event.asset = override.asset
        return event.asset

    def after_sign(self, event: SignEvent) -> None:
        for hook in self._hooks:
            hook.after_sign(event)


def load_hook(ref: str) -> SignHook:
    """
    Import "package.module:attr". Classes are instantiated with no
    arguments; instances are used as they are.
    """
    module_name, sep, attr = ref.partition(":")
    if not sep or not module_name or not attr:
        raise ValueError(f"Hook reference must look like 'module:attr', got {ref!r}")

    target = getattr(importlib.import_module(module_name), attr)
    hook = target() if isinstance(target, type) else target

    if not isinstance(hook, SignHook):
        raise TypeError(f"{ref} does not provide before_sign/after_sign")
    return hook


def load_hooks(refs: Iterable[str]) -> HookDispatcher:
    dispatcher = HookDispatcher()
    for ref in refs:
        dispatcher.register(load_hook(ref))
        logger.info("Registered sign hook %s", ref)
    return dispatcher
