"""Per-account persistence boundary."""

from questline.modules.player.gateway import PlayerGateway
from questline.modules.player.repository import LoadedPlayer, PlayerRepository

__all__ = ["LoadedPlayer", "PlayerGateway", "PlayerRepository"]
