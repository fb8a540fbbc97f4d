from .protocol import Dispatcher
from .http import HttpDispatcher

__all__ = ["Dispatcher", "HttpDispatcher"]
