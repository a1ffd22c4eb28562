from .user import User
from .measurement import Measurement

__all__ = [
    "User",
    "Measurement",
]
