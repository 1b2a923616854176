import asyncio
import html
import logging
import os
from typing import Iterable

import discord
from dotenv import load_dotenv

from topic_rss import Article, ConfigError, FeedAggregator
from topic_rss.logging_utils import setup_logging
from topic_rss.settings import load_settings

MESSAGE_LIMIT = 2000

logger = logging.getLogger("topic_rss.bot")


def format_articles(articles: Iterable[Article], title: str) -> str:
    """Render articles as a Discord message, capped at MESSAGE_LIMIT characters."""
    response = f"📰 {title}\n\n"
    for item in articles:
        response += f"**{html.unescape(item.title)}**\n"
        response += f"*{item.source} - {item.published_at.strftime('%Y-%m-%d %H:%M')}*\n"
        if item.link:
            response += f"<{item.link}>\n"
        response += "\n"

    if len(response) > MESSAGE_LIMIT:
        response = response[: MESSAGE_LIMIT - 3] + "..."
    return response


def parse_max(content: str, default: int) -> int:
    """`!topic 5` -> 5; anything unparsable falls back to `default`."""
    parts = content.split()
    if len(parts) > 1 and parts[1].isdigit():
        return int(parts[1])
    return default


def build_client() -> discord.Client:
    intents = discord.Intents.default()
    intents.message_content = True  # needed to read commands

    client = discord.Client(intents=intents)

    @client.event
    async def on_ready():
        logger.info("Logged in as %s", client.user)

    @client.event
    async def on_message(message):
        if message.author == client.user:
            return
        if not message.content.startswith("!topic"):
            return

        try:
            settings = load_settings()
        except ConfigError as e:
            logger.error("Invalid settings: %s", e)
            await message.channel.send("The topic feed is misconfigured.")
            return
        if not settings.sources:
            await message.channel.send("No feeds are configured (set TOPIC_RSS_FEEDS).")
            return

        await message.channel.send("Fetching the latest articles...")
        max_items = parse_max(message.content, settings.max_items)
        aggregator = FeedAggregator(max_workers=settings.max_workers)
        # feedparser is blocking; keep the event loop free
        articles = await asyncio.to_thread(
            aggregator.aggregate, list(settings.sources), settings.filters, max_items
        )

        if not articles:
            await message.channel.send("No articles found.")
            return
        await message.channel.send(format_articles(articles, settings.display_name))

    return client


def main() -> None:
    load_dotenv()
    setup_logging(os.getenv("TOPIC_RSS_LOG_LEVEL", "INFO"))

    token = os.getenv("DISCORD_BOT_TOKEN")
    if not token:
        raise ValueError("DISCORD_BOT_TOKEN is not set. Check your .env file.")

    build_client().run(token)


if __name__ == "__main__":
    main()
