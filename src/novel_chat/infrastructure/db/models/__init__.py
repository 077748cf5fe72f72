"""Import all models so Base.metadata knows every table."""
from novel_chat.infrastructure.db.models.conversation import ConversationModel
from novel_chat.infrastructure.db.models.message import MessageModel
from novel_chat.infrastructure.db.models.outbox import OutboxMessageModel
from novel_chat.infrastructure.db.models.user import UserModel

__all__ = [
    "ConversationModel",
    "MessageModel",
    "OutboxMessageModel",
    "UserModel",
]
