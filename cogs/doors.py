"""Door tracking tick loop and operator commands."""

from __future__ import annotations

import logging
from typing import List, Optional

import discord
from discord import app_commands
from discord.ext import commands, tasks

from doorwatch.config import Settings, load_settings
from doorwatch.publisher import Message
from doorwatch.render import format_door_table
from doorwatch.snapshot import SnapshotHost
from doorwatch.tracker import DoorTracker
from doorwatch.transport import SocketRelay

log = logging.getLogger(__name__)


class DoorsCog(commands.Cog):
    """Drive the door tracker from a background loop and expose its toggles."""

    def __init__(
        self,
        bot: commands.Bot,
        *,
        settings: Optional[Settings] = None,
        host: Optional[SnapshotHost] = None,
        relay: Optional[SocketRelay] = None,
    ) -> None:
        self.bot = bot
        self.settings = settings or load_settings()
        self.host = host or SnapshotHost(self.settings.snapshot_path)
        self.relay = relay or SocketRelay(self.settings.ws_url, self.settings.sender)
        self.tracker = DoorTracker(self.host, self.host, self.host, self.relay, self.settings)
        self.tick_loop.change_interval(seconds=self.settings.tick_interval)

    async def cog_load(self) -> None:
        await self.relay.connect()
        self.tick_loop.start()

    async def cog_unload(self) -> None:
        self.tick_loop.cancel()
        await self.relay.close()

    def run_tick(self) -> List[Message]:
        try:
            unloaded = self.host.refresh()
        except Exception:
            log.exception("Failed to refresh dungeon snapshot %s", self.host.path)
            unloaded = False
        if unloaded:
            log.info("World unloaded; clearing door tracker state")
            self.tracker.on_world_unload()
        return self.tracker.tick()

    @tasks.loop(seconds=0.05)
    async def tick_loop(self) -> None:
        self.run_tick()

    @tick_loop.before_loop
    async def before_tick(self) -> None:
        await self.bot.wait_until_ready()

    @app_commands.command(name="gotodoor", description="Toggle auto GOTO to the first tracked door.")
    async def gotodoor(self, interaction: discord.Interaction) -> None:
        enabled = self.tracker.toggle_auto_goto()
        state = "enabled" if enabled else "disabled"
        await interaction.response.send_message(f"Auto GOTO to first door {state}.", ephemeral=True)

    @app_commands.command(name="wsreconnect", description="Reconnect to the companion WebSocket.")
    async def wsreconnect(self, interaction: discord.Interaction) -> None:
        await interaction.response.defer(ephemeral=True, thinking=True)
        connected = await self.relay.reconnect()
        if connected:
            message = f"Connected to {self.relay.url}."
        else:
            message = f"Could not connect to {self.relay.url}."
        await interaction.followup.send(message, ephemeral=True)

    @app_commands.command(name="doors", description="Show the doors currently being tracked.")
    async def doors(self, interaction: discord.Interaction) -> None:
        table = format_door_table(self.tracker.doors)
        goto = "on" if self.tracker.auto_goto_enabled else "off"
        socket = "open" if self.relay.is_open else "closed"
        await interaction.response.send_message(
            f"```\n{table}\n```Auto GOTO: {goto} | Socket: {socket}", ephemeral=True
        )

    @app_commands.command(name="dmapreset", description="Clear tracked doors and sent state.")
    async def dmapreset(self, interaction: discord.Interaction) -> None:
        self.tracker.reset()
        await interaction.response.send_message("Door tracker reset.", ephemeral=True)


async def setup(bot: commands.Bot) -> None:
    await bot.add_cog(DoorsCog(bot))
