"""Read defaults for the UI test settings from ``.env.defaults``.

The file lives at the repository root and holds plain ``KEY=value`` lines.
Real environment variables always win over it (see ``config.py``).
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Dict

ENV_DEFAULTS_FILE = Path(__file__).resolve().parents[1] / ".env.defaults"


@lru_cache(maxsize=1)
def _load_env_defaults() -> Dict[str, str]:
    return parse_env_file(ENV_DEFAULTS_FILE)


def parse_env_file(path: Path) -> Dict[str, str]:
    if not path.exists():
        return {}

    defaults: Dict[str, str] = {}
    for raw in path.read_text(encoding="utf-8").splitlines():
        line = raw.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        value = value.strip()
        if len(value) >= 2 and value[0] in ('"', "'") and value[-1] == value[0]:
            value = value[1:-1]
        defaults[key.strip()] = value
    return defaults


def get_env_default(key: str) -> str | None:
    return _load_env_defaults().get(key)
