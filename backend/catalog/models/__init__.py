from .base import BaseModel
from .city import City
from .destination import Destination, DestinationImage, DestinationTag, DestinationType

__all__ = [
    "BaseModel",
    "City",
    "Destination",
    "DestinationImage",
    "DestinationTag",
    "DestinationType",
]
