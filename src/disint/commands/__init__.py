from .builder import ApplicationCommandBuilder, OptionBuilder, SubcommandBuilder
from .models import (
    ApplicationCommand,
    ApplicationCommandOption,
    ApplicationCommandOptionChoice,
    ApplicationCommandOptionType,
)
from .service import AsyncCommandService, CommandService

__all__ = [
    "ApplicationCommand",
    "ApplicationCommandBuilder",
    "ApplicationCommandOption",
    "ApplicationCommandOptionChoice",
    "ApplicationCommandOptionType",
    "AsyncCommandService",
    "CommandService",
    "OptionBuilder",
    "SubcommandBuilder",
]
