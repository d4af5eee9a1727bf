#!/usr/bin/env python3
"""WHL Pick'em Discord bot.

  /pick picks:<text>   submit today's picks, one team per line or comma separated

Also ticks the Results-sheet sync scheduler every POLL_MINUTES.

Usage:
    python bot.py                 # needs BOT_TOKEN, GUILD_ID and Google credentials in .env
"""
import asyncio
import sys

import discord
from discord import app_commands
from discord.ext import tasks

from config import BOT_TOKEN, GUILD_ID, POLL_MINUTES
from game_sync import GameSyncEngine
from google_sheets import open_gateway
from hockeytech_client import FeedClient
from models import GatewayError
from picks import FAILURE_REPLY, ColumnLocks, submit_picks
from scheduler import SyncScheduler
from shared_utils import setup_logger

log = setup_logger("bot", "bot.log")


def run_tick(scheduler):
    """One scheduler tick; an unexpected error is logged so the loop keeps going."""
    try:
        return scheduler.tick()
    except Exception:
        log.exception("Sync tick crashed, will try again next interval")
        return []


def answer_pick(gateway, submitter_id, raw_text, locks):
    """Reply text for one /pick, even when something unexpected breaks."""
    try:
        return submit_picks(gateway, submitter_id, raw_text, locks)
    except Exception:
        log.exception(f"Unexpected error handling picks from {submitter_id}")
        return FAILURE_REPLY


def create_bot(gateway, scheduler, guild_id=GUILD_ID):
    """Build the Discord client with /pick registered and the sync loop attached."""
    intents = discord.Intents.default()
    intents.guilds = True
    client = discord.Client(intents=intents)
    tree = app_commands.CommandTree(client)
    guild = discord.Object(id=guild_id)
    locks = ColumnLocks()

    @tree.command(name="pick", description="Submit your picks", guild=guild)
    @app_commands.describe(picks="One team per line or comma separated")
    async def pick(interaction: discord.Interaction, picks: str):
        # acknowledge quickly so Discord doesn't time out
        await interaction.response.defer(ephemeral=True)
        reply = await asyncio.to_thread(
            answer_pick, gateway, str(interaction.user.id), picks, locks)
        await interaction.followup.send(reply, ephemeral=True)

    @tasks.loop(minutes=POLL_MINUTES)
    async def sync_loop():
        await asyncio.to_thread(run_tick, scheduler)

    @sync_loop.error
    async def sync_loop_error(error):
        log.error("Sync loop stopped", exc_info=error)

    @client.event
    async def on_ready():
        log.info(f"✅ Logged in as {client.user}")
        try:
            await tree.sync(guild=guild)
            log.info("✅ /pick command registered")
        except discord.HTTPException as e:
            log.error(f"Slash command sync failed: {e}")
        if not sync_loop.is_running():
            sync_loop.start()

    client.tree = tree
    client.sync_loop = sync_loop
    return client


def main():
    if not BOT_TOKEN:
        log.error("BOT_TOKEN is missing in .env")
        sys.exit(1)
    try:
        gateway = open_gateway()
    except GatewayError as e:
        log.error(f"Could not open the spreadsheet: {e}")
        sys.exit(1)

    engine = GameSyncEngine(gateway, FeedClient())
    scheduler = SyncScheduler(engine.insert_scheduled, engine.update_results)
    client = create_bot(gateway, scheduler)
    client.run(BOT_TOKEN, log_handler=None)


if __name__ == "__main__":
    main()
