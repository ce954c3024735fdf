"""Command-line interface for compacting a saved conversation transcript."""
from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from rich.console import Console

from compaction import (
    CompactionResult,
    ConsoleProgress,
    ConversationCompactor,
    NullProgress,
    OtelExporter,
    SessionSettings,
    SessionTelemetry,
    load_session_settings,
)
from config import AnthropicConfig, load_anthropic_config
from conversation import dump_transcript, load_transcript
from errors import CompactionError
from llm import AnthropicChatEndpoint, ChatEndpoint
from tools import ToolSpec


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Summarize the history of a saved conversation")
    parser.add_argument("transcript", type=Path, help="JSON transcript of the conversation to compact")
    parser.add_argument("--output", type=Path, help="Write the patched transcript to this path")
    parser.add_argument("--config", type=Path, help="Path to TOML config file with compaction settings")
    parser.add_argument("--tools", type=Path, help="JSON file listing tool definitions available to the conversation")
    parser.add_argument("--budget", type=int, default=None, help="Output token budget for the summary")
    parser.add_argument("--model", help="Model used to produce the summary")
    parser.add_argument(
        "--cache-breakpoints",
        dest="cache_breakpoints",
        action="store_const",
        const=True,
        help="Mark the newest tool result as a prompt cache breakpoint",
    )
    parser.set_defaults(cache_breakpoints=None)
    parser.add_argument("--json", action="store_true", help="Emit machine-readable JSON summary")
    parser.add_argument("--verbose", action="store_true", help="Print detailed progress information")
    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> int:
    args = parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    settings = _load_settings(args.config)
    if args.budget is not None:
        settings = settings.update_with(**{"compaction.summary_budget_tokens": args.budget})

    try:
        context = load_transcript(args.transcript)
    except (OSError, ValueError) as exc:
        print(f"Failed to load transcript {args.transcript}: {exc}", file=sys.stderr)
        return 2

    tools = _load_tools(args.tools) if args.tools else []
    anthropic_config = load_anthropic_config()
    endpoint = build_endpoint(anthropic_config, model=args.model)
    telemetry = SessionTelemetry()
    compactor = ConversationCompactor(settings, telemetry=telemetry)
    progress = ConsoleProgress(Console(stderr=True)) if args.verbose else NullProgress()

    try:
        result = asyncio.run(
            compactor.compact(
                context,
                endpoint,
                tools,
                enable_cache_breakpoints=args.cache_breakpoints,
                progress=progress,
            )
        )
    except CompactionError as exc:
        outcome = exc.outcome.tag if exc.outcome is not None else "not_attempted"
        if args.json:
            print(json.dumps({"outcome": outcome, "error": exc.message}, ensure_ascii=False, indent=2))
        else:
            print(f"Compaction failed ({outcome}): {exc.message}", file=sys.stderr)
        return 1
    finally:
        _export_telemetry(settings, telemetry)

    if args.output:
        dump_transcript(result.context, args.output)

    if args.json:
        print(_result_to_json(result, endpoint))
    else:
        print(result.metadata.text)
        if args.verbose:
            print(f"Summary attached to round {result.metadata.round_id}", file=sys.stderr)
    return 0


def build_endpoint(config: AnthropicConfig, *, model: Optional[str] = None) -> ChatEndpoint:
    summary_model, max_tokens = config.summary_request(model)
    return AnthropicChatEndpoint(summary_model, max_tokens=max_tokens)


def _load_settings(config_path: Optional[Path]) -> SessionSettings:
    try:
        return load_session_settings(config_path)
    except (OSError, ValueError) as exc:
        raise SystemExit(f"Failed to load config {config_path}: {exc}")


def _load_tools(path: Path) -> List[ToolSpec]:
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise SystemExit(f"Failed to load tools {path}: {exc}")
    if not isinstance(raw, list):
        raise SystemExit(f"Tools file {path} must contain a JSON list")
    return [
        ToolSpec(
            name=str(item.get("name", "")),
            description=str(item.get("description", "")),
            input_schema=item.get("input_schema") or {},
        )
        for item in raw
        if isinstance(item, dict)
    ]


def _export_telemetry(settings: SessionSettings, telemetry: SessionTelemetry) -> None:
    if not settings.telemetry.enable_export or settings.telemetry.export_path is None:
        return
    exporter = OtelExporter(
        service_name=settings.telemetry.service_name,
        path=settings.telemetry.export_path,
    )
    telemetry.flush_to_otel(exporter)


def _result_to_json(result: CompactionResult, endpoint: ChatEndpoint) -> str:
    payload: Dict[str, Any] = {
        "outcome": result.outcome.tag,
        "summary": result.metadata.text,
        "round_id": result.metadata.round_id,
        "request_id": result.outcome.request_id,
        "model": endpoint.model,
    }
    return json.dumps(payload, ensure_ascii=False, indent=2)


if __name__ == "__main__":
    raise SystemExit(main())
