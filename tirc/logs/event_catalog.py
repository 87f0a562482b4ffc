"""Event template catalog loader.

Templates live in ``event_templates.json`` next to this module, shaped as
``{"domain": {"action": "template"}}``. ``TIRC_EVENT_TEMPLATES`` may point at
an alternative file.
"""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

EVENT_TEMPLATES: dict[tuple[str, str], str] = {}
_JSON_FILENAME = "event_templates.json"


def _templates_path() -> Path:
    override = os.environ.get("TIRC_EVENT_TEMPLATES")
    if override:
        return Path(override)
    return Path(__file__).with_name(_JSON_FILENAME)


def _flatten(raw: Mapping[str, Any]) -> dict[tuple[str, str], str]:
    templates: dict[tuple[str, str], str] = {}
    for domain, actions in raw.items():
        if not isinstance(domain, str) or not isinstance(actions, Mapping):
            continue
        for action, template in actions.items():
            if isinstance(action, str) and isinstance(template, str):
                templates[(domain, action)] = template
    return templates


def load_event_templates(path: Path | None = None) -> dict[tuple[str, str], str]:
    """Read and flatten the template file.

    A missing or unreadable file yields a single ``("app", "load_error")``
    entry so the failure shows up in the first log line that uses it.
    """
    path = path or _templates_path()
    try:
        with path.open("r", encoding="utf-8") as f:
            raw: Any = json.load(f)
    except FileNotFoundError:
        return {("app", "load_error"): f"Event templates file missing: {path}"}
    except (OSError, json.JSONDecodeError) as e:
        return {("app", "load_error"): f"Failed to load event templates: {e}"[:200]}
    if not isinstance(raw, Mapping):
        return {("app", "load_error"): "Event templates file is not an object"}
    return _flatten(raw)


def reload_event_templates() -> None:
    # Mutate in place so modules holding a reference see the new catalog.
    templates = load_event_templates()
    EVENT_TEMPLATES.clear()
    EVENT_TEMPLATES.update(templates)


reload_event_templates()

__all__ = ["EVENT_TEMPLATES", "load_event_templates", "reload_event_templates"]
