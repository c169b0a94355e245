# s3_secure_downloads/core/env.py
from __future__ import annotations

import os
import re
from typing import Mapping, Optional

_ENV_REF = re.compile(r"^\$(?:\{(?P<braced>[A-Za-z_][A-Za-z0-9_]*)\}|(?P<bare>[A-Za-z_][A-Za-z0-9_]*))$")


def parse_env(value: Optional[str], environ: Optional[Mapping[str, str]] = None) -> Optional[str]:
    """
    Resolve a "$NAME" or "${NAME}" reference to its environment value.

    Anything else is returned unchanged. An unset variable resolves to None
    so that store validation reports it as missing.
    """
    if value is None:
        return None
    env = os.environ if environ is None else environ

    text = value.strip()
    match = _ENV_REF.match(text)
    if not match:
        return value

    name = match.group("braced") or match.group("bare")
    return env.get(name)
