import logging

import discord

from power_news import NewsPipeline, configure_logging, load_settings
from power_news.render import render_messages

logger = logging.getLogger("discord_bot")

# Cards per reply; the header still reports the full count for the range.
MAX_CARDS = 10

HELP = (
    "`!news` latest Indian power sector news\n"
    "`!news YYYY-MM-DD YYYY-MM-DD` news within a date range (UTC)\n"
    "`!refresh` fetch the feed again, ignoring the cache"
)


def build_client(pipeline: NewsPipeline) -> discord.Client:
    # Reading message content requires the privileged intent
    intents = discord.Intents.default()
    intents.message_content = True

    client = discord.Client(intents=intents)

    async def reply(channel) -> None:
        for text in render_messages(
            pipeline.filtered_sorted(),
            error=pipeline.error,
            loading=pipeline.loading,
            max_items=MAX_CARDS,
        ):
            await channel.send(text)

    @client.event
    async def on_ready():
        """Initial load once the bot is logged in."""
        logger.info("Logged in as %s", client.user)
        await pipeline.activate()

    @client.event
    async def on_message(message):
        # Ignore the bot's own messages
        if message.author == client.user:
            return

        parts = message.content.split()
        if not parts:
            return
        command, args = parts[0], parts[1:]

        if command == "!news":
            if len(args) == 2:
                pipeline.set_date_range(args[0], args[1])
            elif args:
                await message.channel.send(HELP)
                return
            await pipeline.activate()
            await reply(message.channel)
        elif command == "!refresh":
            await message.channel.send("Fetching the latest news... please wait.")
            await pipeline.refresh()
            await reply(message.channel)
        elif command == "!help":
            await message.channel.send(HELP)

    return client


def main() -> None:
    settings = load_settings()
    configure_logging(settings.log_level)

    if not settings.discord_token:
        raise ValueError("DISCORD_BOT_TOKEN is not set. Check your .env file.")

    pipeline = NewsPipeline.from_settings(settings)
    client = build_client(pipeline)
    client.run(settings.discord_token, log_handler=None)


if __name__ == "__main__":
    main()
