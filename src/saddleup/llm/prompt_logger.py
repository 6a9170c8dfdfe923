"""
SaddleUp - Prompt Logger.

Writes every model call (messages plus reply or error) to a markdown file
under prompt_logs/<session>/, numbered in call order. Off by default;
turned on with SADDLEUP_LOG_PROMPTS=1 or the --log-prompts CLI flag.
"""

import os
from datetime import datetime
from pathlib import Path

LOG_PROMPTS = os.getenv("SADDLEUP_LOG_PROMPTS", "0") == "1"
LOG_DIR = Path("prompt_logs")

_session_started: datetime | None = None
_calls: int = 0


def enable_prompt_logging(enabled: bool = True) -> None:
    """Turn prompt logging on or off for the rest of the process."""
    global LOG_PROMPTS
    LOG_PROMPTS = enabled


def _session_dir() -> Path:
    global _session_started
    if _session_started is None:
        _session_started = datetime.now()
    path = LOG_DIR / _session_started.strftime("%Y%m%d_%H%M%S")
    path.mkdir(parents=True, exist_ok=True)
    return path


def _render(
    task: str,
    model: str,
    messages: list[dict[str, str]],
    response: str | None,
    error: str | None,
) -> str:
    lines = [
        f"# {task} call",
        "",
        f"- time: {datetime.now().isoformat(timespec='seconds')}",
        f"- model: {model}",
        f"- messages: {len(messages)}",
        "",
    ]
    for msg in messages:
        lines += [f"## {msg['role']}", "", "```", msg["content"], "```", ""]

    if error:
        lines += ["## error", "", error]
    else:
        lines += ["## reply", "", "```", response or "", "```"]
    return "\n".join(lines) + "\n"


def log_prompt(
    *,
    task: str,
    model: str,
    messages: list[dict[str, str]],
    response: str | None = None,
    error: str | None = None,
) -> Path | None:
    """
    Record one model call.

    Returns:
        The file written, or None when logging is off
    """
    if not LOG_PROMPTS:
        return None

    global _calls
    _calls += 1

    path = _session_dir() / f"{_calls:02d}_{task}.md"
    path.write_text(_render(task, model, messages, response, error), encoding="utf-8")
    return path


def get_session_log_dir() -> Path | None:
    """Directory for this session's logs, or None when logging is off."""
    return _session_dir() if LOG_PROMPTS else None


def reset_session() -> None:
    """Start a new log session with the call counter at zero."""
    global _session_started, _calls
    _session_started = None
    _calls = 0
