import logging

import uvicorn

from disint import InteractionResponseBuilder, InteractionServer
from disint.responses import Embed, Field

from _settings import load_settings


logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s %(message)s")

settings = load_settings()
server = InteractionServer(settings.public_key, path="/interactions")


@server.command("cardsearch")
def _on_cardsearch(interaction):
    option = interaction.data.get_option("cardname") if interaction.data else None
    name = option.value.as_str() if option is not None else "unknown"
    embed = Embed(title=name, fields=[Field(name="requested by", value=interaction.member.nick_or_username)])
    return InteractionResponseBuilder.channel_message().embed(embed)


@server.command("slow")
async def _on_slow(interaction):
    print("[slow]", interaction.id)
    return None


def main() -> None:
    print("interaction endpoint: POST http://127.0.0.1:7777/interactions")
    uvicorn.run(server, host="127.0.0.1", port=7777, log_level="info")


if __name__ == "__main__":
    main()
