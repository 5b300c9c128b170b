# fs_core/common/events.py
from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, Callable, Dict, List

from django.db import transaction

logger = logging.getLogger(__name__)

Handler = Callable[[Dict[str, Any]], None]

_registry: Dict[str, List[Handler]] = defaultdict(list)


def subscribe(event_name: str):
    """
    Decorator to register an event handler.
    Usage:
        @subscribe("case_billing.discount_requested")
        def handler(payload): ...
    """
    def _decorator(fn: Handler) -> Handler:
        if fn not in _registry[event_name]:
            _registry[event_name].append(fn)
        return fn
    return _decorator


def publish(event_name: str, payload: Dict[str, Any]) -> None:
    """
    Publish an event to in-process subscribers.
    Keep payloads ID-based (str/primitive values) to avoid cross-app imports.
    Handler errors propagate to the caller.
    """
    for handler in list(_registry.get(event_name, [])):
        handler(payload)


def publish_best_effort(event_name: str, payload: Dict[str, Any]) -> bool:
    """
    Publish, but never raise: every handler failure is logged and swallowed.
    Returns False if any handler failed.
    """
    ok = True
    for handler in list(_registry.get(event_name, [])):
        try:
            handler(payload)
        except Exception:
            ok = False
            logger.exception("Event handler %s failed for %s", getattr(handler, "__name__", handler), event_name)
    return ok


def publish_on_commit(event_name: str, payload: Dict[str, Any]) -> None:
    """
    Fire-and-forget: deliver after the surrounding transaction commits.
    Nothing the subscribers do can roll back or fail the triggering write.
    """
    transaction.on_commit(lambda: publish_best_effort(event_name, payload))
