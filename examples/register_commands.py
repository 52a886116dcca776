from disint import ApplicationCommandBuilder, CommandService, DiscordClient, InteractionConfig

from _settings import load_settings


def main() -> None:
    settings = load_settings()
    config = InteractionConfig(
        public_key=settings.public_key,
        application_id=settings.application_id,
        bot_token=settings.bot_token,
    )
    service = CommandService(DiscordClient(config))

    cardsearch = (
        ApplicationCommandBuilder("cardsearch", "Search for a card")
        .option("cardname", "Name of the card", lambda option: option.string())
        .option(
            "format",
            "Restrict results to a format",
            lambda option: option.string().required(False).choice("Standard", "standard").choice("Modern", "modern"),
        )
        .build()
    )
    hello = ApplicationCommandBuilder("hello", "Say hello").build()

    for command in service.overwrite_commands([cardsearch, hello]):
        print(command.id, command.name)


if __name__ == "__main__":
    main()
