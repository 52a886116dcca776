import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict


@dataclass(frozen=True)
class DiscordAppSettings:
    public_key: str
    application_id: str | None = None
    bot_token: str | None = None


def load_settings() -> DiscordAppSettings:
    values = _load_env_values()
    public_key = values.get("PUBLIC_KEY") or values.get("DISCORD_PUBLIC_KEY")
    application_id = values.get("APPLICATION_ID") or values.get("DISCORD_APPLICATION_ID")
    bot_token = values.get("BOT_TOKEN") or values.get("DISCORD_BOT_TOKEN")
    if not public_key:
        raise RuntimeError("missing PUBLIC_KEY in environment or .env")
    return DiscordAppSettings(
        public_key=public_key,
        application_id=application_id,
        bot_token=bot_token,
    )


def _load_env_values() -> Dict[str, str]:
    values: Dict[str, str] = dict(os.environ)
    for candidate in _candidate_env_files():
        if not candidate.exists():
            continue
        for line in candidate.read_text(encoding="utf-8").splitlines():
            parsed = _parse_line(line)
            if parsed is None:
                continue
            key, value = parsed
            values.setdefault(key, value)
        break
    return values


def _candidate_env_files() -> list[Path]:
    cwd = Path.cwd()
    script_dir = Path(__file__).resolve().parent
    return [cwd / ".env", script_dir.parent / ".env"]


def _parse_line(line: str) -> tuple[str, str] | None:
    stripped = line.strip()
    if not stripped or stripped.startswith("#") or "=" not in stripped:
        return None
    key, value = stripped.split("=", 1)
    key = key.strip()
    if not key:
        return None
    return key, value.strip()
