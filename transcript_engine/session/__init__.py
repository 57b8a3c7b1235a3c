"""Session state machine."""

from .machine import SessionController
from .state import SessionSnapshot, SessionState

__all__ = ["SessionController", "SessionSnapshot", "SessionState"]
