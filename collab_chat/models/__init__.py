from .users import UserMapper
from .chat_rooms import ChatRoomMapper, ChatRoomResolver
from .messages import ChatMessageMapper

__all__ = [
    "UserMapper",
    "ChatRoomMapper",
    "ChatRoomResolver",
    "ChatMessageMapper",
]
