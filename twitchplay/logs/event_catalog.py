"""Loader for the event text catalog (``event_templates.json``).

The JSON maps ``domain -> action -> template``. Non-string entries are
ignored, and an unreadable file degrades to a single ``("app", "load_error")``
entry so logging keeps working with derived messages.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from pathlib import Path

TEMPLATES_PATH = Path(__file__).with_name("event_templates.json")
LOAD_ERROR_KEY = ("app", "load_error")

EVENT_TEMPLATES: dict[tuple[str, str], str] = {}


def _flatten(raw: object) -> dict[tuple[str, str], str]:
    if not isinstance(raw, Mapping):
        return {}
    return {
        (domain, action): template
        for domain, actions in raw.items()
        if isinstance(domain, str) and isinstance(actions, Mapping)
        for action, template in actions.items()
        if isinstance(action, str) and isinstance(template, str)
    }


def _load_event_templates(path: Path | None = None) -> dict[tuple[str, str], str]:
    try:
        raw = json.loads((path or TEMPLATES_PATH).read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {LOAD_ERROR_KEY: "Event templates file missing"}
    except (OSError, ValueError) as e:
        return {LOAD_ERROR_KEY: f"Failed to load event templates: {e}"[:200]}
    return _flatten(raw)


def reload_event_templates(path: Path | None = None) -> None:
    global EVENT_TEMPLATES  # noqa: PLW0603
    EVENT_TEMPLATES = _load_event_templates(path)


def missing_templates(events: Iterable[tuple[str, str]]) -> list[tuple[str, str]]:
    """Return the ``(domain, action)`` pairs without a template, sorted."""
    return sorted(set(events) - EVENT_TEMPLATES.keys())


reload_event_templates()

__all__ = ["EVENT_TEMPLATES", "missing_templates", "reload_event_templates"]
