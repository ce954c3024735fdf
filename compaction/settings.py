"""Session-level configuration for history compaction."""
from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Mapping, MutableMapping, Optional

DEFAULT_CONFIG_PATHS: tuple[Path, ...] = (
    Path.home() / ".agent" / "compaction.toml",
    Path.home() / ".config" / "compaction" / "config.toml",
)

CONFIG_ENV_VAR = "COMPACTION_SESSION_CONFIG"


@dataclass(frozen=True)
class ModelSettings:
    name: str = "claude-sonnet-4-5"
    context_tokens: int = 200_000
    guardrail_tokens: int = 20_000

    @property
    def window_tokens(self) -> int:
        return max(self.context_tokens - self.guardrail_tokens, 0)


@dataclass(frozen=True)
class CompactionSettings:
    auto: bool = True
    max_tool_result_length: int = 8_000
    summary_budget_tokens: int = 16_000
    max_output_tokens: int = 8_192
    enable_cache_breakpoints: bool = False


@dataclass(frozen=True)
class TelemetrySettings:
    """Telemetry/export configuration (OTEL)."""

    enable_export: bool = False
    export_path: Optional[Path] = None
    service_name: str = "conversation-compaction"


@dataclass(frozen=True)
class SessionSettings:
    model: ModelSettings = ModelSettings()
    compaction: CompactionSettings = CompactionSettings()
    telemetry: TelemetrySettings = TelemetrySettings()

    @property
    def input_budget_tokens(self) -> int:
        return self.model.window_tokens

    def update_with(self, **overrides: Any) -> "SessionSettings":
        """Return new settings with dotted overrides like 'compaction.auto'."""

        current: MutableMapping[str, Any] = {
            "model": self.model,
            "compaction": self.compaction,
            "telemetry": self.telemetry,
        }
        updated = dict(current)
        for dotted, raw_value in overrides.items():
            parts = dotted.split(".")
            if len(parts) != 2:
                raise KeyError(f"Override must be of the form group.field (got '{dotted}')")
            group, leaf = parts
            if group not in current:
                raise KeyError(f"Unknown settings group '{group}'")
            target = updated[group]
            if not hasattr(target, leaf):
                raise KeyError(f"Unknown field '{leaf}' for settings group '{group}'")
            cast_value = _cast_value(getattr(target, leaf), raw_value)
            updated[group] = replace(target, **{leaf: cast_value})
        return SessionSettings(**updated)


def load_session_settings(path: Optional[Path] = None) -> SessionSettings:
    """Load settings from *path*, ``$COMPACTION_SESSION_CONFIG`` or default locations."""

    config_data: Mapping[str, Any] = {}
    chosen_path: Optional[Path] = None

    if path is not None:
        chosen_path = path.expanduser().resolve()
    else:
        env_path = os.getenv(CONFIG_ENV_VAR)
        if env_path:
            candidate = Path(env_path).expanduser().resolve()
            chosen_path = candidate if candidate.exists() else None
        else:
            chosen_path = next((candidate for candidate in DEFAULT_CONFIG_PATHS if candidate.exists()), None)

    if chosen_path is not None:
        config_data = _loads(chosen_path)
    return _settings_from_mapping(config_data, base_dir=chosen_path.parent if chosen_path else None)


def _loads(path: Path) -> Mapping[str, Any]:
    with path.open("rb") as fh:
        return tomllib.load(fh)


def _settings_from_mapping(mapping: Mapping[str, Any], *, base_dir: Optional[Path]) -> SessionSettings:
    model = ModelSettings()
    model_section = _coerce_mapping(mapping.get("model"))
    if model_section:
        model = replace(
            model,
            name=str(model_section.get("name", model.name)),
            context_tokens=_positive_int(model_section, "context_tokens", model.context_tokens),
            guardrail_tokens=int(model_section.get("guardrail_tokens", model.guardrail_tokens)),
        )

    compaction = CompactionSettings()
    compaction_section = _coerce_mapping(mapping.get("compaction"))
    if compaction_section:
        compaction = replace(
            compaction,
            auto=bool(compaction_section.get("auto", compaction.auto)),
            max_tool_result_length=_positive_int(
                compaction_section, "max_tool_result_length", compaction.max_tool_result_length
            ),
            summary_budget_tokens=_positive_int(
                compaction_section, "summary_budget_tokens", compaction.summary_budget_tokens
            ),
            max_output_tokens=_positive_int(
                compaction_section, "max_output_tokens", compaction.max_output_tokens
            ),
            enable_cache_breakpoints=bool(
                compaction_section.get("enable_cache_breakpoints", compaction.enable_cache_breakpoints)
            ),
        )

    telemetry = TelemetrySettings()
    telemetry_section = _coerce_mapping(mapping.get("telemetry"))
    if telemetry_section:
        export_path_value = telemetry_section.get("export_path")
        export_path: Optional[Path]
        if export_path_value is None or str(export_path_value).strip() == "":
            export_path = None
        else:
            p = Path(str(export_path_value)).expanduser()
            if not p.is_absolute() and base_dir is not None:
                p = base_dir / p
            export_path = p.resolve()
        telemetry = replace(
            telemetry,
            enable_export=bool(telemetry_section.get("enable_export", telemetry.enable_export)),
            export_path=export_path,
            service_name=str(telemetry_section.get("service_name", telemetry.service_name)),
        )

    return SessionSettings(model=model, compaction=compaction, telemetry=telemetry)


def _positive_int(section: Mapping[str, Any], key: str, default: int) -> int:
    raw = section.get(key, default)
    try:
        value = int(raw)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{key} must be an integer") from exc
    if value <= 0:
        raise ValueError(f"{key} must be positive")
    return value


def _coerce_mapping(value: Any) -> Optional[Mapping[str, Any]]:
    return value if isinstance(value, Mapping) else None


def _cast_value(example: Any, raw: Any) -> Any:
    if isinstance(example, bool):
        if isinstance(raw, str):
            lowered = raw.strip().lower()
            if lowered in {"true", "1", "yes", "on"}:
                return True
            if lowered in {"false", "0", "no", "off"}:
                return False
        return bool(raw)
    if isinstance(example, int):
        return int(raw)
    if isinstance(example, Path) or (example is None and isinstance(raw, (str, Path))):
        return Path(raw).expanduser()
    return type(example)(raw) if type(example) is not type(raw) else raw


__all__ = [
    "CONFIG_ENV_VAR",
    "CompactionSettings",
    "ModelSettings",
    "SessionSettings",
    "TelemetrySettings",
    "load_session_settings",
]
