"""Loads .env.test into the environment before offchat.config is imported."""
from __future__ import annotations

import os
from pathlib import Path

_env_file = Path(__file__).resolve().parent / ".env.test"
if _env_file.exists():
    for raw in _env_file.read_text().splitlines():
        raw = raw.strip()
        if raw and not raw.startswith("#"):
            key, _, value = raw.partition("=")
            os.environ.setdefault(key.strip(), value.strip())
