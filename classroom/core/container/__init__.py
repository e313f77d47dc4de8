__all__ = ["BootConfiguration", "ClassroomContainer", "StorageContainer"]

from .classroom import BootConfiguration, ClassroomContainer
from .storage import StorageContainer
