"""Telemetry collector for compaction events."""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Dict, Iterable, List, Mapping, Optional, Protocol

if TYPE_CHECKING:  # pragma: no cover
    from .otel import OtelExporter


class TelemetrySink(Protocol):
    def send_event(
        self,
        name: str,
        properties: Mapping[str, str],
        measurements: Mapping[str, float],
    ) -> None: ...


@dataclass
class TelemetryEvent:
    name: str
    timestamp: datetime
    properties: Dict[str, str] = field(default_factory=dict)
    measurements: Dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, object]:
        return {
            "name": self.name,
            "timestamp": self.timestamp.isoformat(),
            "properties": dict(self.properties),
            "measurements": dict(self.measurements),
        }


@dataclass
class SessionTelemetry:
    counters: Dict[str, int] = field(default_factory=lambda: {
        "compact_events": 0,
        "summarizer_calls": 0,
        "compaction_failures": 0,
    })
    events: List[TelemetryEvent] = field(default_factory=list)
    _flushed: bool = False

    def incr(self, key: str, amount: int = 1) -> None:
        self.counters[key] = self.counters.get(key, 0) + amount

    def set(self, key: str, value: int) -> None:
        self.counters[key] = value

    def snapshot(self) -> Dict[str, int]:
        return dict(self.counters)

    def send_event(
        self,
        name: str,
        properties: Mapping[str, str],
        measurements: Mapping[str, float],
    ) -> None:
        self.events.append(
            TelemetryEvent(
                name=name,
                timestamp=datetime.now(),
                properties={str(k): str(v) for k, v in properties.items()},
                measurements={str(k): float(v) for k, v in measurements.items()},
            )
        )
        self.incr("summarizer_calls")
        if properties.get("outcome") == "success":
            self.incr("compact_events")
        else:
            self.incr("compaction_failures")

    def events_named(self, name: str) -> List[TelemetryEvent]:
        return [event for event in self.events if event.name == name]

    def last_event(self) -> Optional[TelemetryEvent]:
        return self.events[-1] if self.events else None

    def iter_otel_events(self) -> Iterable[Dict[str, object]]:
        """Yield OTEL-style event dictionaries for downstream exporters."""

        for event in self.events:
            attributes: Dict[str, object] = {
                f"compaction.{key}": value for key, value in event.properties.items()
            }
            attributes.update(
                {f"compaction.{key}": value for key, value in event.measurements.items()}
            )
            yield {
                "timestamp": event.timestamp.isoformat(),
                "name": event.name,
                "attributes": attributes,
            }

    def export_otel(self) -> str:
        records = list(self.iter_otel_events())
        return json.dumps({"events": records}, ensure_ascii=False, indent=2)

    def flush_to_otel(self, exporter: "OtelExporter") -> None:
        """Send recorded events to the provided OTEL exporter once."""
        if self._flushed:
            return
        exporter.export(self.iter_otel_events())
        self._flushed = True


__all__ = ["SessionTelemetry", "TelemetryEvent", "TelemetrySink"]
