from .session import LocalAuth, Session, SessionStore

__all__ = ["LocalAuth", "Session", "SessionStore"]
