"""JSON pretty-printing for API results."""
from __future__ import annotations
from typing import Any, Optional, TextIO
import json
import sys


def to_json(data: Any) -> str:
    """Render a decoded API result as indented, key-sorted JSON."""
    return json.dumps(data, ensure_ascii=False, indent=2, sort_keys=True)


def print_json(data: Any, stream: Optional[TextIO] = None) -> None:
    """Write `to_json(data)` followed by a newline. `None` results print nothing."""
    if data is None:
        return
    out = stream or sys.stdout
    out.write(to_json(data) + "\n")
