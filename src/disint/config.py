from dataclasses import dataclass
from typing import Optional

from .security.application import Application


_DEFAULT_DISCORD_BASE_URL = "https://discord.com/api/v8"


@dataclass(frozen=True)
class InteractionConfig:
    public_key: Optional[str] = None
    application_id: Optional[str] = None
    bot_token: Optional[str] = None
    base_url: str = _DEFAULT_DISCORD_BASE_URL
    timeout_seconds: float = 30.0
    timestamp_tolerance_seconds: int = 5

    def __post_init__(self) -> None:
        if self.public_key is not None:
            application = Application.from_public_key(str(self.public_key).strip())
            object.__setattr__(self, "public_key", application.public_key_hex)
        if self.timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive")
        if isinstance(self.timestamp_tolerance_seconds, bool) or int(self.timestamp_tolerance_seconds) < 0:
            raise ValueError("timestamp_tolerance_seconds must be a non-negative integer")
        object.__setattr__(self, "timestamp_tolerance_seconds", int(self.timestamp_tolerance_seconds))
        object.__setattr__(self, "base_url", str(self.base_url).rstrip("/"))
