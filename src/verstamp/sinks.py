from __future__ import annotations

from typing import Callable

from . import events
from .util import log


Disconnect = Callable[[], None]


class BaseSink:
    def __init__(self):
        self._disconnects: list[Disconnect] = []

    def _connect(self, signal_name: str, receiver):
        sig = events.signal(signal_name)
        sig.connect(receiver)
        self._disconnects.append(lambda: sig.disconnect(receiver))

    def close(self):
        for disconnect in reversed(self._disconnects):
            disconnect()
        self._disconnects.clear()


class LogSink(BaseSink):
    """Renders update lifecycle events as debug log lines."""

    def install(self):
        self._connect(events.UPDATE_STARTED, self._on_update_started)
        self._connect(events.STATE_ENTERED, self._on_state_entered)
        self._connect(events.PHASE_FINISHED, self._on_phase_finished)
        self._connect(events.PHASE_FAILED, self._on_phase_failed)
        self._connect(events.UPDATE_FAILED, self._on_update_failed)
        self._connect(events.UPDATE_FINISHED, self._on_update_finished)
        return self

    def _on_update_started(self, _sender, **kw):
        log.debug(
            f"update.started {log.text(kw.get('owner'))}/{log.text(kw.get('repo'))}"
            f"@{log.text(kw.get('branch'))}:{log.text(kw.get('path'))}"
        )

    def _on_state_entered(self, _sender, **kw):
        log.debug(f"state -> {kw.get('state')}")

    def _on_phase_finished(self, _sender, **kw):
        log.debug(f"phase {kw.get('phase')} finished elapsed_ms={kw.get('elapsed_ms'):.1f}")

    def _on_phase_failed(self, _sender, **kw):
        log.debug(f"phase {kw.get('phase')} failed: {log.text(kw.get('error_type'))}")

    def _on_update_failed(self, _sender, **kw):
        log.debug(f"update.failed {kw.get('error_type')} in state {kw.get('state')}")

    def _on_update_finished(self, _sender, **kw):
        log.debug(f"update.finished version={log.text(kw.get('version'))}")
