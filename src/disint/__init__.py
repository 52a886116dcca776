from .client import AsyncDiscordClient, DiscordClient
from .commands import (
    ApplicationCommand,
    ApplicationCommandBuilder,
    ApplicationCommandOption,
    ApplicationCommandOptionChoice,
    ApplicationCommandOptionType,
    AsyncCommandService,
    CommandService,
)
from .config import InteractionConfig
from .exceptions import (
    ConfigurationError,
    HTTPRequestError,
    InteractionHandlerError,
    InteractionParseError,
    SDKError,
)
from .http_client import AsyncJsonHttpClient, JsonHttpClient
from .interactions import (
    GuildMember,
    Interaction,
    InteractionHandlerRegistry,
    InteractionType,
    OptionValue,
    User,
    decode_interaction,
    parse_interaction,
)
from .responses import (
    AllowedMentions,
    AllowedMentionsKind,
    Embed,
    InteractionResponse,
    InteractionResponseBuilder,
    InteractionResponseType,
)
from .security import (
    Application,
    InteractionAuthError,
    InteractionAuthMiddleware,
    InteractionReceiver,
    KeyFormatError,
    NoSignatureError,
    SignatureFormatError,
    TimestampError,
    TimestampFormatError,
    VerificationError,
    is_fresh,
)
from .server import InteractionServer, InteractionServerStatus

__all__ = [
    "AllowedMentions",
    "AllowedMentionsKind",
    "Application",
    "ApplicationCommand",
    "ApplicationCommandBuilder",
    "ApplicationCommandOption",
    "ApplicationCommandOptionChoice",
    "ApplicationCommandOptionType",
    "AsyncCommandService",
    "AsyncDiscordClient",
    "AsyncJsonHttpClient",
    "CommandService",
    "ConfigurationError",
    "DiscordClient",
    "Embed",
    "GuildMember",
    "HTTPRequestError",
    "Interaction",
    "InteractionAuthError",
    "InteractionAuthMiddleware",
    "InteractionConfig",
    "InteractionHandlerError",
    "InteractionHandlerRegistry",
    "InteractionParseError",
    "InteractionReceiver",
    "InteractionResponse",
    "InteractionResponseBuilder",
    "InteractionResponseType",
    "InteractionServer",
    "InteractionServerStatus",
    "InteractionType",
    "JsonHttpClient",
    "KeyFormatError",
    "NoSignatureError",
    "OptionValue",
    "SDKError",
    "SignatureFormatError",
    "TimestampError",
    "TimestampFormatError",
    "User",
    "VerificationError",
    "decode_interaction",
    "is_fresh",
    "parse_interaction",
]
