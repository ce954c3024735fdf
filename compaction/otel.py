"""Write compaction telemetry as OTLP-flavoured JSON lines."""
from __future__ import annotations

import json
import threading
from pathlib import Path
from typing import Iterable, List, Mapping, MutableMapping, Optional, TextIO

SCOPE_NAME = "conversation.compaction"


class OtelExporter:
    """Serialize events one per line to a text sink, a file, or memory."""

    def __init__(
        self,
        *,
        service_name: str = "conversation-compaction",
        sink: Optional[TextIO] = None,
        path: Optional[Path] = None,
        resource: Optional[Mapping[str, str]] = None,
    ) -> None:
        if sink is not None and path is not None:
            raise ValueError("provide either sink or path, not both")
        self._sink = sink
        self._path = path
        self._resource: MutableMapping[str, str] = {"service.name": service_name}
        if resource:
            self._resource.update({str(k): str(v) for k, v in resource.items()})
        self._lock = threading.Lock()
        self._buffer: List[str] = []

    def export(self, events: Iterable[Mapping[str, object]]) -> int:
        """Write each event as ``{"resource", "scope", "event"}``; return the count."""

        resource = dict(self._resource)
        lines = [
            json.dumps(
                {"resource": resource, "scope": {"name": SCOPE_NAME}, "event": dict(event)},
                ensure_ascii=False,
            )
            for event in events
        ]
        if not lines:
            return 0

        with self._lock:
            if self._sink is not None:
                self._sink.writelines(line + "\n" for line in lines)
                self._sink.flush()
            elif self._path is not None:
                self._path.parent.mkdir(parents=True, exist_ok=True)
                with self._path.open("a", encoding="utf-8") as fh:
                    fh.writelines(line + "\n" for line in lines)
            else:
                self._buffer.extend(lines)
        return len(lines)

    def buffered_payloads(self) -> List[str]:
        """Return payloads retained in memory when neither sink nor path is set."""

        with self._lock:
            return list(self._buffer)


__all__ = ["OtelExporter", "SCOPE_NAME"]
