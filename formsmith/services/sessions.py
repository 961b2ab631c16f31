"""In-memory sessions with caller-owned lifetimes.

A session holds the live state of one open draft or one respondent's answers.
Sessions are closed explicitly; a network completion that arrives after its
session was closed is dropped rather than applied.
"""

import logging
import threading
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Generic, TypeVar

from formsmith.exceptions import SessionNotFoundError
from formsmith.models.forms import FormDocument

log = logging.getLogger("formsmith.sessions")

S = TypeVar("S")


@dataclass
class Draft:
    form: FormDocument


@dataclass
class ResponseSession:
    form: FormDocument
    answers: dict[str, dict[str, str]] = field(default_factory=dict)


class SessionStore(Generic[S]):
    def __init__(self, label: str):
        self.label = label
        self._sessions: dict[str, S] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._sessions)

    def open(self, state: S) -> str:
        session_id = uuid.uuid4().hex
        with self._lock:
            self._sessions[session_id] = state
        return session_id

    def get(self, session_id: str) -> S:
        with self._lock:
            try:
                return self._sessions[session_id]
            except KeyError:
                raise SessionNotFoundError(f"No open {self.label} with id {session_id}") from None

    def is_open(self, session_id: str) -> bool:
        with self._lock:
            return session_id in self._sessions

    def update(self, session_id: str, fn: Callable[[S], S]) -> S:
        """Replace a session's state with fn(state) and return the new state."""
        with self._lock:
            if session_id not in self._sessions:
                raise SessionNotFoundError(f"No open {self.label} with id {session_id}")
            state = fn(self._sessions[session_id])
            self._sessions[session_id] = state
            return state

    def complete(self, session_id: str, fn: Callable[[S], S]) -> S | None:
        """Apply the result of a finished network call, unless the session is gone."""
        with self._lock:
            if session_id not in self._sessions:
                log.warning("Dropping late completion for closed %s %s", self.label, session_id)
                return None
            state = fn(self._sessions[session_id])
            self._sessions[session_id] = state
            return state

    def close(self, session_id: str) -> None:
        with self._lock:
            if self._sessions.pop(session_id, None) is None:
                raise SessionNotFoundError(f"No open {self.label} with id {session_id}")


@lru_cache
def get_draft_store() -> SessionStore[Draft]:
    return SessionStore("draft")


@lru_cache
def get_response_store() -> SessionStore[ResponseSession]:
    return SessionStore("response session")
