# Package initialization
# Import all models to ensure relationships are properly established
from .doctor import Doctor
from .shift import Shift

__all__ = [
    "Doctor",
    "Shift",
]
