from typing import Any, Callable, Optional, Union

from ..interactions.option_value import OptionValue
from .models import (
    ApplicationCommand,
    ApplicationCommandOption,
    ApplicationCommandOptionChoice,
    ApplicationCommandOptionType,
)

_CHOICE_TYPES = {
    ApplicationCommandOptionType.STRING: str,
    ApplicationCommandOptionType.INTEGER: int,
}


class OptionBuilder:
    """Builds a regular (non-subcommand) option.

    A value type must be chosen with one of ``string()``, ``integer()``,
    ``boolean()``, ``user()``, ``channel()`` or ``role()``. Options are
    required unless ``required(False)`` is called.
    """

    def __init__(self, name: str, description: str) -> None:
        self._name = name
        self._description = description
        self._type: Optional[ApplicationCommandOptionType] = None
        self._required = True
        self._choices: list[ApplicationCommandOptionChoice] = []

    def string(self) -> "OptionBuilder":
        return self._set_type(ApplicationCommandOptionType.STRING)

    def integer(self) -> "OptionBuilder":
        return self._set_type(ApplicationCommandOptionType.INTEGER)

    def boolean(self) -> "OptionBuilder":
        return self._set_type(ApplicationCommandOptionType.BOOLEAN)

    def user(self) -> "OptionBuilder":
        return self._set_type(ApplicationCommandOptionType.USER)

    def channel(self) -> "OptionBuilder":
        return self._set_type(ApplicationCommandOptionType.CHANNEL)

    def role(self) -> "OptionBuilder":
        return self._set_type(ApplicationCommandOptionType.ROLE)

    def required(self, required: bool) -> "OptionBuilder":
        self._required = required
        return self

    def choice(self, name: str, value: Union[str, int]) -> "OptionBuilder":
        if self._type not in _CHOICE_TYPES:
            raise ValueError("choices are only supported on string and integer options")
        expected = _CHOICE_TYPES[self._type]
        if isinstance(value, bool) or not isinstance(value, expected):
            raise ValueError(f"choice value for {self._type.name.lower()} option must be {expected.__name__}")
        self._choices.append(ApplicationCommandOptionChoice(name=name, value=OptionValue(value)))
        return self

    def _set_type(self, option_type: ApplicationCommandOptionType) -> "OptionBuilder":
        if self._choices and option_type != self._type:
            raise ValueError("cannot change option type after choices were added")
        self._type = option_type
        return self

    def finish(self) -> ApplicationCommandOption:
        if self._type is None:
            raise ValueError(f"option {self._name!r} has no value type")
        return ApplicationCommandOption(
            type=self._type,
            name=self._name,
            description=self._description,
            required=self._required,
            choices=tuple(self._choices),
        )


class SubcommandBuilder:
    def __init__(self, name: str, description: str) -> None:
        self._name = name
        self._description = description
        self._options: list[ApplicationCommandOption] = []

    def option(
        self,
        name: str,
        description: str,
        configure: Callable[[OptionBuilder], Any],
    ) -> "SubcommandBuilder":
        builder = OptionBuilder(name, description)
        configure(builder)
        self._options.append(builder.finish())
        return self

    def finish(self) -> ApplicationCommandOption:
        return ApplicationCommandOption(
            type=ApplicationCommandOptionType.SUB_COMMAND,
            name=self._name,
            description=self._description,
            options=tuple(self._options),
        )


class ApplicationCommandBuilder:
    """Builds an application command definition.

    A command holds either subcommands or regular options, never both.
    """

    def __init__(self, name: str, description: str) -> None:
        self._name = name
        self._description = description
        self._options: list[ApplicationCommandOption] = []
        self._kind: Optional[str] = None

    def subcommand(
        self,
        name: str,
        description: str,
        configure: Optional[Callable[[SubcommandBuilder], Any]] = None,
    ) -> "ApplicationCommandBuilder":
        self._claim("subcommand")
        builder = SubcommandBuilder(name, description)
        if configure is not None:
            configure(builder)
        self._options.append(builder.finish())
        return self

    def option(
        self,
        name: str,
        description: str,
        configure: Callable[[OptionBuilder], Any],
    ) -> "ApplicationCommandBuilder":
        self._claim("option")
        builder = OptionBuilder(name, description)
        configure(builder)
        self._options.append(builder.finish())
        return self

    def build(self) -> ApplicationCommand:
        return ApplicationCommand(
            name=self._name,
            description=self._description,
            options=tuple(self._options),
        )

    def _claim(self, kind: str) -> None:
        if self._kind is not None and self._kind != kind:
            raise ValueError("a command cannot mix subcommands and regular options")
        self._kind = kind
