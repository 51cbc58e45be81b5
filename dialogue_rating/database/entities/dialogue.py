"""
Dialogue ORM Model
==================

The ``Dialogue`` ORM model stores one machine-generated dialogue exactly as it
was read from its JSON source file. Rows are inserted once by the startup
bootstrap and never updated afterwards.

Table
-----
- ``dialogues``

Key Features
~~~~~~~~~~~~
- Integer primary key (``id``) plus the unique external ``dialogue_id``
  (``dialogue_<product_id>``) that ratings refer to by value
- Product id and title copied out of the payload for listings
- ``kind`` tag (1-4) copied out of the payload when present
- ``dialogue_data``: the payload serialized verbatim as JSON text
"""

import json
import logging

from dialogue_rating.database.config.connection_engine import declarativeBase
from sqlalchemy import VARCHAR, CheckConstraint, DateTime, Integer, TEXT
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime, timezone
from typing import Optional

logger = logging.getLogger(__name__)

DIALOGUE_ID_TEMPLATE = "dialogue_{product_id}"
"""External identifier of a dialogue, derived from its product id."""

DIALOGUE_KINDS = (1, 2, 3, 4)
"""Accepted values of the categorical ``kind`` tag."""


def make_dialogue_id(product_id) -> str:
    return DIALOGUE_ID_TEMPLATE.format(product_id=product_id)


def parse_payload(raw: Optional[str], dialogue_id: str = "") -> Optional[dict]:
    """
    Decode a stored JSON payload.

    A malformed payload is logged and reported as ``None`` so that one bad row
    does not break a whole listing.
    """
    if raw is None:
        return None
    try:
        return json.loads(raw)
    except (TypeError, ValueError):
        logger.warning("Stored payload of %s is not valid JSON", dialogue_id or "<unknown dialogue>")
        return None


class Dialogue(declarativeBase):
    """
    ORM model for the `dialogues` table.

    Attributes
    ----------
    id : int
        Storage primary key (reported to clients as ``db_id``).
    dialogue_id : str
        Unique external identifier, ``dialogue_<product_id>``.
    product_id : int | None
        Product the dialogue was generated for.
    product_title : str | None
        Product title shown in rating listings.
    kind : int | None
        Categorical tag 1-4, when the payload carries one.
    dialogue_data : str
        Source JSON document serialized as text.
    source_file : str | None
        Name of the file the dialogue was loaded from.
    created_at : datetime
        Load time (UTC).
    """

    __tablename__ = "dialogues"
    __table_args__ = (
        CheckConstraint("kind IS NULL OR (kind >= 1 AND kind <= 4)", name="ck_dialogues_kind"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    dialogue_id: Mapped[str] = mapped_column(VARCHAR(255), unique=True, nullable=False)

    product_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    product_title: Mapped[Optional[str]] = mapped_column(TEXT, nullable=True)

    kind: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    dialogue_data: Mapped[str] = mapped_column(TEXT, nullable=False)

    source_file: Mapped[Optional[str]] = mapped_column(TEXT, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )

    @property
    def payload(self) -> Optional[dict]:
        """The decoded ``dialogue_data``, or None when it cannot be decoded."""
        return parse_payload(self.dialogue_data, self.dialogue_id)

    def __str__(self) -> str:
        return f"Dialogue: id:{self.id}, dialogue_id: {self.dialogue_id}, product_title: {self.product_title}"
