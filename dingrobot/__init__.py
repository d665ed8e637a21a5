from .client import DingRobot, Roboter, create_client
from .config import Config, load_config
from .errors import (
    DecodeError,
    DingRobotError,
    SerializationError,
    ServiceError,
    TransportError,
)
from .messages import (
    MESSAGE_TYPES,
    ActionCardMessage,
    AtParams,
    LinkMessage,
    MarkdownMessage,
    TextMessage,
    encode_message,
)
from .ratelimit import WindowRateLimiter

__version__ = "0.1.0"
__all__ = [
    "ActionCardMessage",
    "AtParams",
    "Config",
    "DecodeError",
    "DingRobot",
    "DingRobotError",
    "LinkMessage",
    "MESSAGE_TYPES",
    "MarkdownMessage",
    "Roboter",
    "SerializationError",
    "ServiceError",
    "TextMessage",
    "TransportError",
    "WindowRateLimiter",
    "create_client",
    "encode_message",
    "load_config",
]
