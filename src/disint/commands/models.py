from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Mapping, Optional

from ..exceptions import InteractionParseError
from ..interactions.option_value import OptionValue


class ApplicationCommandOptionType(IntEnum):
    SUB_COMMAND = 1
    SUB_COMMAND_GROUP = 2
    STRING = 3
    INTEGER = 4
    BOOLEAN = 5
    USER = 6
    CHANNEL = 7
    ROLE = 8


def _as_optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    return str(value)


def _as_mapping_list(value: Any) -> list[Mapping[str, Any]]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, Mapping)]


@dataclass(frozen=True)
class ApplicationCommandOptionChoice:
    name: str
    value: OptionValue

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "value": self.value.to_json()}

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> "ApplicationCommandOptionChoice":
        try:
            value = OptionValue(payload.get("value"))
        except TypeError as exc:
            raise InteractionParseError("choice value must be a string or an integer") from exc
        return cls(name=str(payload.get("name", "")), value=value)


@dataclass(frozen=True)
class ApplicationCommandOption:
    type: ApplicationCommandOptionType
    name: str
    description: str
    required: Optional[bool] = None
    choices: tuple[ApplicationCommandOptionChoice, ...] = ()
    options: tuple["ApplicationCommandOption", ...] = ()

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "type": int(self.type),
            "name": self.name,
            "description": self.description,
        }
        if self.required is not None:
            payload["required"] = self.required
        if self.choices:
            payload["choices"] = [choice.to_dict() for choice in self.choices]
        if self.options:
            payload["options"] = [option.to_dict() for option in self.options]
        return payload

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> "ApplicationCommandOption":
        try:
            option_type = ApplicationCommandOptionType(payload.get("type"))
        except ValueError as exc:
            raise InteractionParseError(f"unsupported option type: {payload.get('type')!r}") from exc
        required = payload.get("required")
        return cls(
            type=option_type,
            name=str(payload.get("name", "")),
            description=str(payload.get("description", "")),
            required=required if isinstance(required, bool) else None,
            choices=tuple(
                ApplicationCommandOptionChoice.from_mapping(item)
                for item in _as_mapping_list(payload.get("choices"))
            ),
            options=tuple(cls.from_mapping(item) for item in _as_mapping_list(payload.get("options"))),
        )


@dataclass(frozen=True)
class ApplicationCommand:
    name: str
    description: str
    options: tuple[ApplicationCommandOption, ...] = ()
    id: Optional[str] = None
    application_id: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"name": self.name, "description": self.description}
        if self.id is not None:
            payload["id"] = self.id
        if self.application_id is not None:
            payload["application_id"] = self.application_id
        if self.options:
            payload["options"] = [option.to_dict() for option in self.options]
        return payload

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> "ApplicationCommand":
        return cls(
            name=str(payload.get("name", "")),
            description=str(payload.get("description", "")),
            options=tuple(
                ApplicationCommandOption.from_mapping(item)
                for item in _as_mapping_list(payload.get("options"))
            ),
            id=_as_optional_str(payload.get("id")),
            application_id=_as_optional_str(payload.get("application_id")),
        )
