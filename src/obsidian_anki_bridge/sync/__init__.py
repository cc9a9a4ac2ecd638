"""Reconciliation of flashcards against Anki."""

from .engine import CardAction, SyncEngine
from .serial_queue import SerialTaskQueue, TaskOutcome

__all__ = ["CardAction", "SerialTaskQueue", "SyncEngine", "TaskOutcome"]
