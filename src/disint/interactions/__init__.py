from .handlers import (
    AsyncInteractionHandler,
    InteractionHandlerRegistry,
    SyncInteractionHandler,
    is_async_handler,
)
from .models import (
    ApplicationCommandInteractionData,
    CommandOption,
    GuildMember,
    Interaction,
    InteractionType,
    SubcommandOption,
    User,
    ValueOption,
    decode_interaction,
    parse_interaction,
    parse_option,
)
from .option_value import OptionValue

__all__ = [
    "ApplicationCommandInteractionData",
    "AsyncInteractionHandler",
    "CommandOption",
    "GuildMember",
    "Interaction",
    "InteractionHandlerRegistry",
    "InteractionType",
    "OptionValue",
    "SubcommandOption",
    "SyncInteractionHandler",
    "User",
    "ValueOption",
    "decode_interaction",
    "is_async_handler",
    "parse_interaction",
    "parse_option",
]
