"""Live simulation sessions shared between the engine and remote viewers."""

import logging
import time
import uuid
from dataclasses import dataclass, field
from threading import Lock
from typing import Dict, List, Optional

from .simulation import Simulation, Snapshot, create_simulation, set_speed, toggle_pause, update_simulation

logger = logging.getLogger(__name__)

DEFAULT_IDLE_TIMEOUT = 60.0


class UnknownSessionError(KeyError):
    """Raised when a session id does not match a live session."""


@dataclass
class Session:
    id: str
    simulation: Simulation
    last_active: float
    run_id: Optional[int] = None
    lock: Lock = field(default_factory=Lock)

    def touch(self, now: Optional[float] = None) -> None:
        self.last_active = time.monotonic() if now is None else now


def _attach_recorder(session: Session, store) -> None:
    """Archive each finished generation and its champion; storage errors never stop the run."""
    simulation = session.simulation

    def record(result):
        if session.run_id is None:
            return
        try:
            generation_id = store.save_generation(session.run_id, result)
            champion = simulation.statistics.all_time_best
            if champion is not None:
                store.save_organism(session.run_id, generation_id, champion.toDict())
        except OSError:
            logger.exception("Failed to archive generation %s for run %s", result.get("generation"), session.run_id)

    simulation.add_generation_listener(record)


class SessionRegistry:
    """Owns running simulations keyed by session id and drops idle ones."""

    def __init__(self, idle_timeout: float = DEFAULT_IDLE_TIMEOUT):
        self.idle_timeout = idle_timeout
        self._sessions: Dict[str, Session] = {}
        self._lock = Lock()

    def __len__(self):
        with self._lock:
            return len(self._sessions)

    def __contains__(self, session_id):
        with self._lock:
            return session_id in self._sessions

    def start(self, config=None, name: Optional[str] = None, store=None) -> str:
        """Create a simulation and return its session id."""
        simulation = create_simulation(config)
        session = Session(uuid.uuid4().hex, simulation, time.monotonic())

        if store is not None:
            run_name = name or f"Simulation {session.id[:8]}"
            try:
                session.run_id = store.save_simulation(run_name, simulation.config.toDict())
            except OSError:
                logger.exception("Failed to archive new run %s", run_name)
            _attach_recorder(session, store)

        with self._lock:
            self._sessions[session.id] = session
        logger.info("Started session %s", session.id)
        return session.id

    def get(self, session_id: str) -> Session:
        with self._lock:
            session = self._sessions.get(session_id)
        if session is None:
            raise UnknownSessionError(session_id)
        return session

    def step(self, session_id: str) -> Snapshot:
        session = self.get(session_id)
        with session.lock:
            session.touch()
            return update_simulation(session.simulation)

    def snapshot(self, session_id: str) -> Snapshot:
        session = self.get(session_id)
        with session.lock:
            session.touch()
            return session.simulation.last_snapshot

    def toggle_pause(self, session_id: str, paused: bool) -> None:
        session = self.get(session_id)
        with session.lock:
            session.touch()
            toggle_pause(session.simulation, paused)

    def set_speed(self, session_id: str, speed: float) -> None:
        session = self.get(session_id)
        with session.lock:
            session.touch()
            set_speed(session.simulation, speed)

    def stop(self, session_id: str) -> None:
        with self._lock:
            session = self._sessions.pop(session_id, None)
        if session is None:
            raise UnknownSessionError(session_id)
        logger.info("Stopped session %s", session_id)

    def evict_idle(self, now: Optional[float] = None) -> List[str]:
        """Drop sessions with no activity inside the idle window; returns their ids."""
        current = time.monotonic() if now is None else now
        with self._lock:
            expired = [
                session_id
                for session_id, session in self._sessions.items()
                if current - session.last_active > self.idle_timeout
            ]
            for session_id in expired:
                del self._sessions[session_id]

        for session_id in expired:
            logger.info("Evicted idle session %s", session_id)
        return expired
