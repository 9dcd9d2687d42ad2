"""
Environment sources for the Unitpay configuration.

Settings are layered: a base mapping (the process environment unless told
otherwise), then a ``.env`` file that only fills gaps, then explicit
overrides, which always win.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping, MutableMapping, Optional, Tuple

_QUOTES = ("'", '"')


def _parse_line(raw_line: str) -> Optional[Tuple[str, str]]:
    line = raw_line.strip()
    if line.startswith("export "):
        line = line[len("export "):].lstrip()
    if not line or line.startswith("#") or "=" not in line:
        return None

    key, value = (part.strip() for part in line.split("=", 1))
    if not key:
        return None
    if len(value) >= 2 and value[0] in _QUOTES and value[-1] == value[0]:
        return key, value[1:-1]
    # Unquoted values may carry a trailing " # comment".
    if " #" in value:
        value = value.split(" #", 1)[0].rstrip()
    return key, value


def read_env_file(path: str | Path) -> Dict[str, str]:
    """
    Parse ``KEY=VALUE`` lines from ``path``; a missing file yields ``{}``.
    """
    try:
        text = Path(path).read_text(encoding="utf-8")
    except FileNotFoundError:
        return {}
    pairs = (_parse_line(line) for line in text.splitlines())
    return dict(pair for pair in pairs if pair is not None)


def load_env_file(
    path: str = ".env",
    *,
    environ: Optional[MutableMapping[str, str]] = None,
) -> Dict[str, str]:
    """
    Copy variables from ``path`` into ``environ`` (``os.environ`` by default)
    without replacing keys that are already set, and return the result.
    """
    target = os.environ if environ is None else environ
    for key, value in read_env_file(path).items():
        target.setdefault(key, value)
    return dict(target)


@dataclass(frozen=True)
class UnitpayEnvironment:
    """Resolved variables the configuration is read from."""

    variables: Mapping[str, str]

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self.variables.get(key, default)


def build_environment(
    *,
    env_file: Optional[str] = ".env",
    base: Optional[Mapping[str, str]] = None,
    overrides: Optional[Mapping[str, str]] = None,
) -> UnitpayEnvironment:
    """
    Layer ``base``, ``env_file`` and ``overrides`` into one environment.

    Pass ``env_file=None`` to skip the file and ``base={}`` to ignore the
    process environment.
    """
    variables: Dict[str, str] = dict(os.environ if base is None else base)
    if env_file is not None:
        for key, value in read_env_file(env_file).items():
            variables.setdefault(key, value)
    variables.update(overrides or {})
    return UnitpayEnvironment(variables=variables)
