"""Response envelope helpers."""
from typing import Any


def success_response(data: Any = None, message: str | None = None, **extra: Any) -> dict:
    """Build ``{success: true, message?, data}``."""
    body: dict[str, Any] = {"success": True}
    if message is not None:
        body["message"] = message
    body["data"] = data
    body.update(extra)
    return body
