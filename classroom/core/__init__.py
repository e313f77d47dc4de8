__all__ = [
    "BootConfiguration",
    "di",
    "ClassroomContainer",
    "KeyProvider",
    "LoggingProvider",
    "Settings",
    "TimestampProvider",
]


from . import di
from .config import Settings
from .container import BootConfiguration, ClassroomContainer
from .provider import KeyProvider, LoggingProvider, TimestampProvider
