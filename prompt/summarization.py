"""Instruction text for the conversation summarization request."""
from __future__ import annotations

SUMMARY_INSTRUCTIONS = """\
Your task is to write a detailed summary of the conversation so far. The summary \
replaces the conversation history, so it must contain everything needed to \
continue the work without rereading it.

Before the summary, think through the conversation inside <analysis> tags:
1. Walk through the conversation in order and note each phase.
2. List every explicit user request and goal.
3. Record technical decisions, files, functions and code changes.
4. Note what is finished and what is still pending.
5. Describe the most recent agent actions and tool results in detail.

Then write the summary inside <summary> tags with these sections:
1. Conversation Overview: objectives, session context, how intent evolved.
2. Technical Foundation: technologies, frameworks and constraints in play.
3. Codebase Status: each relevant file with purpose, current state and key code.
4. Problem Resolution: issues hit, fixes applied, open debugging threads.
5. Progress Tracking: completed, partially complete and validated work.
6. Active Work State: what was being worked on right before this summary.
7. Recent Operations: the last tool calls, their results (trimmed) and why they ran.
8. Continuation Plan: pending tasks and the immediate next step, quoting the user \
where it matters.

Be precise: use exact file names, identifiers and commands.\
"""

SUMMARY_REQUEST = """\
Summarize the conversation history so far, paying special attention to the most \
recent agent commands and tool results that led to this summarization. Use the \
structure from the system message and include important tool calls and their \
results in the matching sections.\
"""

NOTEBOOK_PREAMBLE = "This is the current state of the notebook that you have been working on:"


__all__ = ["NOTEBOOK_PREAMBLE", "SUMMARY_INSTRUCTIONS", "SUMMARY_REQUEST"]
