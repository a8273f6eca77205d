"""
Fulcrum dispatch - DispatchToken and the Route -> token resolver.
"""

from .token import DispatchToken
from .dispatcher import Dispatcher, to_class_name, to_method_name

__all__ = [
    "DispatchToken",
    "Dispatcher",
    "to_class_name",
    "to_method_name",
]
