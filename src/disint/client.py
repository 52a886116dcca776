from typing import Any, Mapping, Optional

from .config import InteractionConfig
from .exceptions import ConfigurationError
from .http_client import AsyncJsonHttpClient, JsonHttpClient


def _build_headers(bot_token: str, method_upper: str) -> dict[str, str]:
    headers = {"Authorization": f"Bot {bot_token}"}
    if method_upper not in {"GET", "DELETE"}:
        headers["Content-Type"] = "application/json"
    return headers


def _require_bot_token(config: InteractionConfig) -> str:
    if not config.bot_token:
        raise ConfigurationError("bot_token is required for REST API calls")
    return config.bot_token


class DiscordClient:
    def __init__(
        self,
        config: InteractionConfig,
        *,
        http_client: Optional[JsonHttpClient] = None,
    ) -> None:
        self._config = config
        self._http = http_client or JsonHttpClient(timeout_seconds=config.timeout_seconds)

    @property
    def config(self) -> InteractionConfig:
        return self._config

    def request_json(
        self,
        method: str,
        path: str,
        *,
        payload: Optional[Any] = None,
        params: Optional[Mapping[str, object]] = None,
    ) -> Any:
        bot_token = _require_bot_token(self._config)
        method_upper = method.upper()
        return self._http.request_json(
            method_upper,
            f"{self._config.base_url}{path}",
            headers=_build_headers(bot_token, method_upper),
            params=params,
            payload=payload,
            timeout_seconds=self._config.timeout_seconds,
        )


class AsyncDiscordClient:
    def __init__(
        self,
        config: InteractionConfig,
        *,
        http_client: Optional[AsyncJsonHttpClient] = None,
    ) -> None:
        self._config = config
        self._http = http_client or AsyncJsonHttpClient(timeout_seconds=config.timeout_seconds)

    @property
    def config(self) -> InteractionConfig:
        return self._config

    async def request_json(
        self,
        method: str,
        path: str,
        *,
        payload: Optional[Any] = None,
        params: Optional[Mapping[str, object]] = None,
    ) -> Any:
        bot_token = _require_bot_token(self._config)
        method_upper = method.upper()
        return await self._http.request_json(
            method_upper,
            f"{self._config.base_url}{path}",
            headers=_build_headers(bot_token, method_upper),
            params=params,
            payload=payload,
            timeout_seconds=self._config.timeout_seconds,
        )

    async def aclose(self) -> None:
        await self._http.aclose()
