"""
Core services for the fasting tracker.

This package contains the session engine, gamification engine, durable stores,
effect dispatch and the composition root that wires them together.
"""

from .effects import Collaborators, EffectDispatcher, Result
from .gamification import CompletionReport, GamificationEngine
from .messages import MessageGenerator, MessageType
from .session_engine import SessionEngine
from .storage import JsonFileStore, MemoryStore, ProfileStore, SessionStore
from .ticker import SessionTicker
from .tracker import FastingTracker

__all__ = [
    "Collaborators",
    "CompletionReport",
    "EffectDispatcher",
    "FastingTracker",
    "GamificationEngine",
    "JsonFileStore",
    "MemoryStore",
    "MessageGenerator",
    "MessageType",
    "ProfileStore",
    "Result",
    "SessionEngine",
    "SessionStore",
    "SessionTicker",
]
