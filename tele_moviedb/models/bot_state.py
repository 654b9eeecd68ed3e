"""Bot runtime state (listing sessions and command metrics)."""

from __future__ import annotations

import logging
import secrets
import time
from collections import OrderedDict
from dataclasses import dataclass, field

from .list_session import ListKind, ListSession

logger = logging.getLogger(__name__)

MAX_LATENCY_SAMPLES = 200
_LIST_SESSION_TTL_S = 15 * 60
_LIST_SESSION_MAX = 200


@dataclass
class CommandMetrics:
    count: int = 0
    success: int = 0
    error: int = 0
    rate_limited: int = 0
    total_latency_s: float = 0.0
    max_latency_s: float = 0.0
    latencies_s: list[float] = field(default_factory=list)
    last_error: str | None = None
    last_run_ts: float | None = None


@dataclass
class BotState:
    """Per-application state: paged listings in flight and command metrics."""

    list_sessions: OrderedDict[str, ListSession] = field(default_factory=OrderedDict)
    command_metrics: dict[str, CommandMetrics] = field(default_factory=dict)
    pending_failures: dict[str, str] = field(default_factory=dict)

    def new_session_key(self) -> str:
        return secrets.token_urlsafe(8)

    def store_list_session(
        self,
        key: str,
        kind: ListKind,
        query: str | None,
        page: int,
        total_pages: int,
    ) -> ListSession:
        session = ListSession(
            updated_at=time.monotonic(),
            kind=kind,
            query=query,
            page=page,
            total_pages=total_pages,
        )
        self.list_sessions[key] = session
        self.list_sessions.move_to_end(key)
        self._prune_list_sessions()
        return session

    def get_list_session(self, key: str) -> ListSession | None:
        session = self.list_sessions.get(key)
        if not session:
            return None
        if (time.monotonic() - session.updated_at) > _LIST_SESSION_TTL_S:
            self.list_sessions.pop(key, None)
            return None
        return session

    def _prune_list_sessions(self) -> None:
        if not self.list_sessions:
            return
        now = time.monotonic()
        stale_keys = [
            key
            for key, session in self.list_sessions.items()
            if (now - session.updated_at) > _LIST_SESSION_TTL_S
        ]
        for key in stale_keys:
            self.list_sessions.pop(key, None)
        while len(self.list_sessions) > _LIST_SESSION_MAX:
            self.list_sessions.popitem(last=False)

    def metrics_for(self, name: str) -> CommandMetrics:
        return self.command_metrics.setdefault(name, CommandMetrics())

    def record_command(
        self, name: str, latency_s: float, ok: bool, error_msg: str | None
    ) -> None:
        metrics = self.metrics_for(name)
        metrics.count += 1
        metrics.last_run_ts = time.time()
        if ok:
            metrics.success += 1
        else:
            metrics.error += 1
            metrics.last_error = error_msg
        metrics.total_latency_s += latency_s
        metrics.max_latency_s = max(metrics.max_latency_s, latency_s)
        metrics.latencies_s.append(latency_s)
        if len(metrics.latencies_s) > MAX_LATENCY_SAMPLES:
            metrics.latencies_s.pop(0)

    def note_failure(self, name: str, error_msg: str) -> None:
        """Mark a command that handled its own error as failed."""
        self.pending_failures[name] = error_msg

    def pop_failure(self, name: str) -> str | None:
        return self.pending_failures.pop(name, None)

    def record_rate_limited(self, name: str) -> None:
        metrics = self.metrics_for(name)
        metrics.rate_limited += 1


BOT_STATE_KEY = "state"
