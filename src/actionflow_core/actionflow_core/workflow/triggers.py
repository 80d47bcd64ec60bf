# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Normalization of the workflow ``on`` field.

``on`` may be written as a single event name, a list of event names and
single-key event mappings, or a mapping from event name to configuration.
:func:`parse_triggers` turns any of those into a flat list of
:class:`ParsedTrigger` records and :func:`triggers_to_on` turns such a list
back into the most compact shape that can express it.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, List

from .rules import ACTIVITY_TYPES

SCHEDULE = "schedule"
DEFAULT_CRON = "0 0 * * *"

# Events that accept a ``types`` activity filter.
TRIGGERS_WITH_TYPES: FrozenSet[str] = frozenset(ACTIVITY_TYPES)


@dataclass
class ParsedTrigger:
    """One entry of ``on``: an event name plus its raw configuration mapping."""

    event: str
    config: Dict[str, Any] = field(default_factory=dict)


def trigger_supports_types(event: str) -> bool:
    return event in TRIGGERS_WITH_TYPES


def _config(value: Any) -> Dict[str, Any]:
    return dict(value) if isinstance(value, dict) else {}


def _expand(event: str, value: Any) -> List[ParsedTrigger]:
    """Expand one ``event: value`` pair; schedules yield one trigger per cron record."""
    if event == SCHEDULE and isinstance(value, list):
        result = []
        for item in value:
            if isinstance(item, dict) and "cron" in item:
                result.append(ParsedTrigger(SCHEDULE, {"cron": item["cron"]}))
            else:
                result.append(ParsedTrigger(SCHEDULE, {}))
        return result
    return [ParsedTrigger(str(event), _config(value))]


def parse_triggers(on: Any) -> List[ParsedTrigger]:
    """Flatten any of the three ``on`` shapes into trigger records.

    Never raises; unrecognized shapes produce an empty list.
    """
    if not on:
        return []

    if isinstance(on, str):
        return [ParsedTrigger(on)]

    if isinstance(on, list):
        result: List[ParsedTrigger] = []
        for item in on:
            if isinstance(item, str):
                result.append(ParsedTrigger(item))
            elif isinstance(item, dict):
                for event, value in item.items():
                    result.extend(_expand(event, value))
        return result

    if isinstance(on, dict):
        result = []
        for event, value in on.items():
            result.extend(_expand(event, value))
        return result

    return []


def _schedule_entry(schedules: List[ParsedTrigger]) -> Dict[str, Any]:
    return {SCHEDULE: [{"cron": t.config.get("cron") or DEFAULT_CRON} for t in schedules]}


def _compact(trigger: ParsedTrigger) -> Any:
    if not trigger.config:
        return trigger.event
    return {trigger.event: dict(trigger.config)}


def triggers_to_on(triggers: List[ParsedTrigger]) -> Any:
    """Rebuild an ``on`` value from trigger records, preferring the most compact shape.

    - no triggers: ``{}``
    - one non-schedule trigger: ``"push"`` or ``{"push": {...}}``
    - one non-schedule trigger plus schedules: a mapping
    - several non-schedule triggers: a list, with the merged schedules
      appended as one ``{"schedule": [...]}`` element
    - only schedules: ``{"schedule": [...]}``
    """
    if not triggers:
        return {}

    schedules = [t for t in triggers if t.event == SCHEDULE]
    others = [t for t in triggers if t.event != SCHEDULE]

    if len(others) > 1:
        entries: List[Any] = [_compact(t) for t in others]
        if schedules:
            entries.append(_schedule_entry(schedules))
        return entries

    if len(others) == 1:
        only = others[0]
        if not schedules:
            return _compact(only)
        result: Dict[str, Any] = {only.event: dict(only.config)}
        result.update(_schedule_entry(schedules))
        return result

    return _schedule_entry(schedules)


def _joined(config: Dict[str, Any], key: str) -> str:
    values = config.get(key)
    if not values:
        return ""
    if not isinstance(values, list):
        values = [values]
    return ", ".join(str(v) for v in values)


def format_trigger(trigger: ParsedTrigger) -> str:
    """Long display form, e.g. ``push • branches: main • paths: src/**``."""
    parts = [trigger.event]
    for key in ("branches", "tags", "paths", "types"):
        joined = _joined(trigger.config, key)
        if joined:
            parts.append(f"{key}: {joined}")
    if trigger.event == SCHEDULE and trigger.config.get("cron"):
        parts.append(f"cron: {trigger.config['cron']}")
    return " • ".join(parts)


def trigger_label(trigger: ParsedTrigger) -> str:
    """Short display form, e.g. ``push (main)``."""
    for key in ("branches", "tags"):
        joined = _joined(trigger.config, key)
        if joined:
            return f"{trigger.event} ({joined})"
    if trigger.event == SCHEDULE and trigger.config.get("cron"):
        return f"{trigger.event} ({trigger.config['cron']})"
    return trigger.event
