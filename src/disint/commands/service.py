from typing import Any, Mapping, Optional, Sequence, Union

from ..client import AsyncDiscordClient, DiscordClient
from ..exceptions import ConfigurationError
from .models import ApplicationCommand

CommandPayload = Union[ApplicationCommand, Mapping[str, Any]]


def _to_payload(command: CommandPayload) -> dict[str, Any]:
    if isinstance(command, ApplicationCommand):
        return command.to_dict()
    return {str(k): v for k, v in command.items()}


def _parse_command(data: Any) -> ApplicationCommand:
    if not isinstance(data, Mapping):
        return ApplicationCommand(name="", description="")
    return ApplicationCommand.from_mapping(data)


def _parse_command_list(data: Any) -> list[ApplicationCommand]:
    if not isinstance(data, list):
        return []
    return [ApplicationCommand.from_mapping(item) for item in data if isinstance(item, Mapping)]


def _commands_path(application_id: str, guild_id: Optional[str]) -> str:
    if guild_id:
        return f"/applications/{application_id}/guilds/{guild_id}/commands"
    return f"/applications/{application_id}/commands"


def _resolve_application_id(application_id: Optional[str], configured: Optional[str]) -> str:
    resolved = application_id or configured
    if not resolved:
        raise ConfigurationError("application_id is required for command operations")
    return resolved


class CommandService:
    """Registers application commands, globally or for a single guild."""

    def __init__(self, client: DiscordClient, *, application_id: Optional[str] = None) -> None:
        self._client = client
        self._application_id = _resolve_application_id(application_id, client.config.application_id)

    def list_commands(self, *, guild_id: Optional[str] = None) -> list[ApplicationCommand]:
        data = self._client.request_json("GET", _commands_path(self._application_id, guild_id))
        return _parse_command_list(data)

    def create_command(
        self,
        command: CommandPayload,
        *,
        guild_id: Optional[str] = None,
    ) -> ApplicationCommand:
        data = self._client.request_json(
            "POST",
            _commands_path(self._application_id, guild_id),
            payload=_to_payload(command),
        )
        return _parse_command(data)

    def get_command(self, command_id: str, *, guild_id: Optional[str] = None) -> ApplicationCommand:
        data = self._client.request_json(
            "GET",
            f"{_commands_path(self._application_id, guild_id)}/{command_id}",
        )
        return _parse_command(data)

    def edit_command(
        self,
        command_id: str,
        command: CommandPayload,
        *,
        guild_id: Optional[str] = None,
    ) -> ApplicationCommand:
        data = self._client.request_json(
            "PATCH",
            f"{_commands_path(self._application_id, guild_id)}/{command_id}",
            payload=_to_payload(command),
        )
        return _parse_command(data)

    def delete_command(self, command_id: str, *, guild_id: Optional[str] = None) -> None:
        self._client.request_json(
            "DELETE",
            f"{_commands_path(self._application_id, guild_id)}/{command_id}",
        )

    def overwrite_commands(
        self,
        commands: Sequence[CommandPayload],
        *,
        guild_id: Optional[str] = None,
    ) -> list[ApplicationCommand]:
        data = self._client.request_json(
            "PUT",
            _commands_path(self._application_id, guild_id),
            payload=[_to_payload(command) for command in commands],
        )
        return _parse_command_list(data)


class AsyncCommandService:
    def __init__(self, client: AsyncDiscordClient, *, application_id: Optional[str] = None) -> None:
        self._client = client
        self._application_id = _resolve_application_id(application_id, client.config.application_id)

    async def list_commands(self, *, guild_id: Optional[str] = None) -> list[ApplicationCommand]:
        data = await self._client.request_json("GET", _commands_path(self._application_id, guild_id))
        return _parse_command_list(data)

    async def create_command(
        self,
        command: CommandPayload,
        *,
        guild_id: Optional[str] = None,
    ) -> ApplicationCommand:
        data = await self._client.request_json(
            "POST",
            _commands_path(self._application_id, guild_id),
            payload=_to_payload(command),
        )
        return _parse_command(data)

    async def get_command(self, command_id: str, *, guild_id: Optional[str] = None) -> ApplicationCommand:
        data = await self._client.request_json(
            "GET",
            f"{_commands_path(self._application_id, guild_id)}/{command_id}",
        )
        return _parse_command(data)

    async def edit_command(
        self,
        command_id: str,
        command: CommandPayload,
        *,
        guild_id: Optional[str] = None,
    ) -> ApplicationCommand:
        data = await self._client.request_json(
            "PATCH",
            f"{_commands_path(self._application_id, guild_id)}/{command_id}",
            payload=_to_payload(command),
        )
        return _parse_command(data)

    async def delete_command(self, command_id: str, *, guild_id: Optional[str] = None) -> None:
        await self._client.request_json(
            "DELETE",
            f"{_commands_path(self._application_id, guild_id)}/{command_id}",
        )

    async def overwrite_commands(
        self,
        commands: Sequence[CommandPayload],
        *,
        guild_id: Optional[str] = None,
    ) -> list[ApplicationCommand]:
        data = await self._client.request_json(
            "PUT",
            _commands_path(self._application_id, guild_id),
            payload=[_to_payload(command) for command in commands],
        )
        return _parse_command_list(data)
