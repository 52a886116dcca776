import json
from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum
from typing import Any, Mapping, Optional, Union

from ..exceptions import InteractionParseError
from .option_value import OptionValue


class InteractionType(IntEnum):
    PING = 1
    APPLICATION_COMMAND = 2


def _as_mapping(value: Any) -> Mapping[str, Any]:
    if isinstance(value, Mapping):
        return value
    return {}


def _as_optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    return str(value)


def _as_optional_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    return None


def _as_optional_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    return None


def _require(payload: Mapping[str, Any], key: str, owner: str) -> Any:
    if key not in payload or payload[key] is None:
        raise InteractionParseError(f"{owner} is missing required field: {key}")
    return payload[key]


def _require_str(payload: Mapping[str, Any], key: str, owner: str) -> str:
    value = _require(payload, key, owner)
    if not isinstance(value, str):
        raise InteractionParseError(f"{owner}.{key} must be a string")
    return value


def _require_bool(payload: Mapping[str, Any], key: str, owner: str) -> bool:
    value = _require(payload, key, owner)
    if not isinstance(value, bool):
        raise InteractionParseError(f"{owner}.{key} must be a boolean")
    return value


def _require_mapping(payload: Mapping[str, Any], key: str, owner: str) -> Mapping[str, Any]:
    value = _require(payload, key, owner)
    if not isinstance(value, Mapping):
        raise InteractionParseError(f"{owner}.{key} must be an object")
    return value


def _parse_snowflake(value: str, what: str) -> int:
    try:
        return int(value)
    except ValueError as exc:
        raise InteractionParseError(f"invalid {what}: {value!r}") from exc


def _parse_datetime(value: Any, what: str) -> Optional[datetime]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise InteractionParseError(f"{what} must be an ISO-8601 string")
    normalized = value[:-1] + "+00:00" if value.endswith("Z") else value
    try:
        return datetime.fromisoformat(normalized)
    except ValueError as exc:
        raise InteractionParseError(f"invalid {what}: {value!r}") from exc


def _require_datetime(payload: Mapping[str, Any], key: str, owner: str) -> datetime:
    parsed = _parse_datetime(_require(payload, key, owner), f"{owner}.{key}")
    if parsed is None:
        raise InteractionParseError(f"{owner} is missing required field: {key}")
    return parsed


@dataclass(frozen=True)
class User:
    id: str
    username: str
    discriminator: str
    avatar: Optional[str] = None
    bot: Optional[bool] = None
    system: Optional[bool] = None
    mfa_enabled: Optional[bool] = None
    locale: Optional[str] = None
    verified: Optional[bool] = None
    email: Optional[str] = None
    flags: Optional[int] = None
    premium_type: Optional[int] = None
    public_flags: Optional[int] = None

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> "User":
        return cls(
            id=_require_str(payload, "id", "user"),
            username=_require_str(payload, "username", "user"),
            discriminator=_require_str(payload, "discriminator", "user"),
            avatar=_as_optional_str(payload.get("avatar")),
            bot=_as_optional_bool(payload.get("bot")),
            system=_as_optional_bool(payload.get("system")),
            mfa_enabled=_as_optional_bool(payload.get("mfa_enabled")),
            locale=_as_optional_str(payload.get("locale")),
            verified=_as_optional_bool(payload.get("verified")),
            email=_as_optional_str(payload.get("email")),
            flags=_as_optional_int(payload.get("flags")),
            premium_type=_as_optional_int(payload.get("premium_type")),
            public_flags=_as_optional_int(payload.get("public_flags")),
        )

    @property
    def user_id(self) -> int:
        return _parse_snowflake(self.id, "user id")

    @property
    def username_and_discriminator(self) -> str:
        return f"{self.username}#{self.discriminator}"

    @property
    def cdn_avatar_path(self) -> str:
        if self.avatar:
            ext = "gif" if self.avatar.startswith("a_") else "png"
            return f"/avatars/{self.id}/{self.avatar}.{ext}"
        try:
            discriminator = int(self.discriminator)
        except ValueError:
            discriminator = 0
        return f"/embed/avatars/{discriminator % 5}.png"

    @property
    def is_bot(self) -> bool:
        return bool(self.bot)

    @property
    def is_system(self) -> bool:
        return bool(self.system)

    @property
    def is_mfa_enabled(self) -> bool:
        return bool(self.mfa_enabled)


@dataclass(frozen=True)
class GuildMember:
    user: User
    roles: tuple[str, ...]
    joined_at: datetime
    deaf: bool
    mute: bool
    nick: Optional[str] = None
    premium_since: Optional[datetime] = None

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> "GuildMember":
        roles = _require(payload, "roles", "member")
        if not isinstance(roles, list) or not all(isinstance(role, str) for role in roles):
            raise InteractionParseError("member.roles must be a list of strings")
        return cls(
            user=User.from_mapping(_require_mapping(payload, "user", "member")),
            roles=tuple(roles),
            joined_at=_require_datetime(payload, "joined_at", "member"),
            deaf=_require_bool(payload, "deaf", "member"),
            mute=_require_bool(payload, "mute", "member"),
            nick=_as_optional_str(payload.get("nick")),
            premium_since=_parse_datetime(payload.get("premium_since"), "member.premium_since"),
        )

    @property
    def role_ids(self) -> list[int]:
        return [_parse_snowflake(role, "role id") for role in self.roles]

    @property
    def nick_or_username(self) -> str:
        return self.nick if self.nick is not None else self.user.username

    @property
    def is_boosting(self) -> bool:
        return self.premium_since is not None


@dataclass(frozen=True)
class ValueOption:
    name: str
    value: OptionValue


@dataclass(frozen=True)
class SubcommandOption:
    name: str
    options: tuple["CommandOption", ...] = ()

    def get_option(self, name: str) -> Optional["CommandOption"]:
        return _find_option(self.options, name)


CommandOption = Union[ValueOption, SubcommandOption]


def _find_option(options: tuple[CommandOption, ...], name: str) -> Optional[CommandOption]:
    for option in options:
        if option.name == name:
            return option
    return None


def parse_option(payload: Any) -> CommandOption:
    if not isinstance(payload, Mapping):
        raise InteractionParseError("option must be an object")
    name = _require_str(payload, "name", "option")
    if "value" in payload:
        try:
            value = OptionValue(payload["value"])
        except TypeError as exc:
            raise InteractionParseError(f"option {name!r} has unsupported value type") from exc
        return ValueOption(name=name, value=value)
    nested = payload.get("options") or []
    if not isinstance(nested, list):
        raise InteractionParseError(f"option {name!r} options must be a list")
    return SubcommandOption(name=name, options=tuple(parse_option(item) for item in nested))


@dataclass(frozen=True)
class ApplicationCommandInteractionData:
    id: str
    name: str
    options: tuple[CommandOption, ...] = ()

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> "ApplicationCommandInteractionData":
        options = payload.get("options") or []
        if not isinstance(options, list):
            raise InteractionParseError("data.options must be a list")
        return cls(
            id=_require_str(payload, "id", "data"),
            name=_require_str(payload, "name", "data"),
            options=tuple(parse_option(item) for item in options),
        )

    def get_option(self, name: str) -> Optional[CommandOption]:
        return _find_option(self.options, name)


@dataclass(frozen=True)
class Interaction:
    version: int
    id: str
    token: str
    type: InteractionType
    guild_id: Optional[str] = None
    channel_id: Optional[str] = None
    member: Optional[GuildMember] = None
    data: Optional[ApplicationCommandInteractionData] = None
    raw: Mapping[str, Any] = field(default_factory=dict)

    @property
    def interaction_id(self) -> int:
        return _parse_snowflake(self.id, "interaction id")

    @property
    def is_ping(self) -> bool:
        return self.type == InteractionType.PING

    @property
    def is_application_command(self) -> bool:
        return self.type == InteractionType.APPLICATION_COMMAND

    @property
    def command_name(self) -> Optional[str]:
        if self.data is None:
            return None
        return self.data.name


def parse_interaction(payload: Mapping[str, Any]) -> Interaction:
    if not isinstance(payload, Mapping):
        raise InteractionParseError("interaction must be a json object")
    version = _require(payload, "version", "interaction")
    if isinstance(version, bool) or not isinstance(version, int):
        raise InteractionParseError("interaction.version must be an integer")
    raw_type = _require(payload, "type", "interaction")
    if isinstance(raw_type, bool) or not isinstance(raw_type, int):
        raise InteractionParseError("interaction.type must be an integer")
    try:
        interaction_type = InteractionType(raw_type)
    except ValueError as exc:
        raise InteractionParseError(f"unsupported interaction type: {raw_type}") from exc

    base: dict[str, Any] = {
        "version": version,
        "id": _require_str(payload, "id", "interaction"),
        "token": _require_str(payload, "token", "interaction"),
        "type": interaction_type,
        "raw": {str(k): v for k, v in payload.items()},
    }
    if interaction_type == InteractionType.PING:
        return Interaction(**base)
    return Interaction(
        guild_id=_require_str(payload, "guild_id", "interaction"),
        channel_id=_require_str(payload, "channel_id", "interaction"),
        member=GuildMember.from_mapping(_require_mapping(payload, "member", "interaction")),
        data=ApplicationCommandInteractionData.from_mapping(_require_mapping(payload, "data", "interaction")),
        **base,
    )


def decode_interaction(raw_body: bytes) -> Interaction:
    try:
        payload = json.loads(bytes(raw_body).decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise InteractionParseError("interaction body is not valid json") from exc
    return parse_interaction(payload)
