"""Deterministic renderers for prompt payloads."""
from __future__ import annotations

from typing import TYPE_CHECKING, List

if TYPE_CHECKING:  # pragma: no cover
    from compaction.notebook import NotebookDocument


def render_code_block(path: str, content: str, *, lang: str = "") -> str:
    fence = f"```{lang}".rstrip()
    return f"{path}\n{fence}\n{content}\n```"


def render_tag(name: str, body: str) -> str:
    return f"<{name}>\n{body.strip()}\n</{name}>"


def truncate_text(text: str, max_length: int) -> str:
    """Keep the head and tail of *text* when it exceeds *max_length* characters."""

    if max_length <= 0 or len(text) <= max_length:
        return text
    omitted = len(text) - max_length
    head = text[: max_length // 2]
    tail = text[len(text) - (max_length - len(head)):]
    return f"{head}\n...[{omitted} characters truncated]...\n{tail}"


def render_notebook(notebook: NotebookDocument, *, max_output_length: int = 2_000) -> str:
    parts: List[str] = [f"Notebook: {notebook.uri}"]
    for index, cell in enumerate(notebook.cells, start=1):
        lang = cell.language if cell.kind == "code" else "markdown"
        parts.append(render_code_block(f"Cell {index} ({cell.kind})", cell.source, lang=lang))
        if cell.outputs:
            output = truncate_text("\n".join(cell.outputs), max_output_length)
            parts.append(render_tag("output", output))
    return "\n\n".join(parts)


__all__ = ["render_code_block", "render_notebook", "render_tag", "truncate_text"]
