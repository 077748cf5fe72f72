from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import BigInteger, CheckConstraint, Index, Integer, UniqueConstraint, text
from sqlalchemy.dialects.postgresql import TIMESTAMP, UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from novel_chat.infrastructure.db.base import Base


class ConversationModel(Base):
    __tablename__ = "conversations"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        server_default=text("gen_random_uuid()"),
    )
    participant_low: Mapped[int] = mapped_column(BigInteger, nullable=False)
    participant_high: Mapped[int] = mapped_column(BigInteger, nullable=False)
    send_count: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default=text("0"),
    )
    reset_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        server_default=text("now()"),
    )
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        server_default=text("now()"),
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        server_default=text("now()"),
    )

    messages = relationship(
        "MessageModel",
        back_populates="conversation",
        lazy="noload",
        passive_deletes=True,
    )

    __table_args__ = (
        UniqueConstraint("participant_low", "participant_high", name="uq_conversation_pair"),
        CheckConstraint("participant_low < participant_high", name="ck_conversation_pair_order"),
        Index("ix_conversations_high", "participant_high"),
        Index("ix_conversations_updated", updated_at.desc()),
    )
