"""Small stateful widgets shared by the modes."""

from .filter import Filter
from .output import Output
from .select import SelectMenu

__all__ = ["Filter", "Output", "SelectMenu"]
