import json
from typing import Any


def pretty_json(data: Any) -> str:
    try:
        return json.dumps(data, indent=2, ensure_ascii=False)
    except (TypeError, ValueError):
        return json.dumps({"unserializable": str(data)}, indent=2)


def summarize(result: list, head: int = 5) -> str:
    """Short form of a generated sequence for log lines."""
    if len(result) <= head:
        return ", ".join(result)
    return ", ".join(result[:head]) + f", ... ({len(result)} items)"
