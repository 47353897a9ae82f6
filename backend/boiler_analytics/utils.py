"""
Shared utility functions for the boiler analytics backend.

  - sanitize_for_json: numpy → native Python conversion
  - to_camel: snake_case → camelCase field names
  - result_to_dict: analytics dataclass → API dict with stable camelCase keys
"""

import dataclasses
import enum
import math
from datetime import datetime
from typing import Any

import numpy as np


# ─── JSON serialization ────────────────────────────────────────────

def sanitize_for_json(obj: Any) -> Any:
    """Recursively convert numpy types to native Python for JSON."""
    if isinstance(obj, dict):
        return {k: sanitize_for_json(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [sanitize_for_json(item) for item in obj]
    if isinstance(obj, (np.integer,)):
        return int(obj)
    if isinstance(obj, (np.floating,)):
        val = float(obj)
        return None if (math.isnan(val) or math.isinf(val)) else val
    if isinstance(obj, np.bool_):
        return bool(obj)
    if isinstance(obj, np.ndarray):
        return sanitize_for_json(obj.tolist())
    if isinstance(obj, float) and (math.isnan(obj) or math.isinf(obj)):
        return None
    return obj


# ─── Result helpers ─────────────────────────────────────────────────

def to_camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(word.capitalize() for word in rest)


def result_to_dict(obj: Any) -> Any:
    """
    Convert analytics results to plain JSON-ready structures.

    Field names become the camelCase names the dashboard and report export
    read (``failureProbability``, ``lossDriver``, ``actionRequired``, ...).
    """
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {
            to_camel(f.name): result_to_dict(getattr(obj, f.name))
            for f in dataclasses.fields(obj)
        }
    if isinstance(obj, enum.Enum):
        return obj.value
    if isinstance(obj, datetime):
        return obj.isoformat()
    if isinstance(obj, dict):
        return {k: result_to_dict(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [result_to_dict(item) for item in obj]
    return sanitize_for_json(obj)
