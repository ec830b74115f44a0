from __future__ import annotations

import os
from pathlib import Path


def load_env_file(path: str | Path = ".env") -> dict[str, str]:
    """Seed calculator settings (``COMMISSION_PCT``, ``DEFAULT_ZONE``, ...) from a file.

    Read by the CLI (``--env-file``) and the Streamlit app before
    ``CalcSettings.from_env``, so a shop can keep its marketplace rates next to
    its batch CSVs. Rates exported in the shell take precedence over the file.
    Returns the settings that were taken from the file; a missing file yields
    ``{}``.
    """
    p = Path(path)
    if not p.is_file():
        return {}
    try:
        raw = p.read_text(encoding="utf-8")
    except OSError:
        return {}

    applied: dict[str, str] = {}
    for line in raw.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#") or "=" not in stripped:
            continue
        if stripped.startswith("export "):
            stripped = stripped[len("export "):].lstrip()
        key, value = stripped.split("=", 1)
        key = key.strip()
        if not key:
            continue
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in {'"', "'"}:
            value = value[1:-1]
        if key in os.environ:
            continue
        os.environ[key] = value
        applied[key] = value
    return applied
