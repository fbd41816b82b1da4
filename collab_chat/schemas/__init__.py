# User schemas
from .user import User, UserInput

# Chat Message schemas
from .message import ChatMessage, ChatMessageInput

# Chat Room schemas (1:1)
from .chat_room import ChatRoom, ChatRoomInput, ParticipantRef

# Notification schemas
from .notification import Notification

__all__ = [
    "User",
    "UserInput",
    "ChatMessage",
    "ChatMessageInput",
    "ChatRoom",
    "ChatRoomInput",
    "ParticipantRef",
    "Notification",
]
