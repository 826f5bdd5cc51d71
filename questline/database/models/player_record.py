"""
PlayerRecord: one row per account holding the full player snapshot.
Schema only.
"""

from __future__ import annotations

from typing import Any, Dict

from sqlalchemy import JSON, Integer, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from questline.core.database.base import Base, TimestampMixin


class PlayerRecord(Base, TimestampMixin):
    """
    Persisted player aggregate.

    `version` is the optimistic lock: every UPDATE is issued as
    ``... WHERE version = <loaded version>`` and bumps it, so a writer
    holding a stale copy fails with StaleDataError instead of overwriting.
    """

    __tablename__ = "player_records"

    account_id: Mapped[str] = mapped_column(String(64), primary_key=True)

    version: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        doc="Optimistic locking version",
    )

    payload: Mapped[Dict[str, Any]] = mapped_column(
        JSON().with_variant(JSONB(), "postgresql"),
        nullable=False,
        default=dict,
    )

    __mapper_args__ = {"version_id_col": version}

    def __repr__(self) -> str:
        return f"<PlayerRecord(account_id={self.account_id!r}, version={self.version})>"
