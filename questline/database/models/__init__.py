"""
ORM models. Importing this package registers every table on Base.metadata.
"""

from questline.database.models.player_record import PlayerRecord

__all__ = ["PlayerRecord"]
