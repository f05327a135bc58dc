"""Interactive session and its variable store."""

from .variables import VariableStore
from .interactive import InteractiveSession

__all__ = ['VariableStore', 'InteractiveSession']
