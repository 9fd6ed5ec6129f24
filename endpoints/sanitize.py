from __future__ import annotations

import re
from typing import Any

_SCRIPT_BLOCK = re.compile(r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.IGNORECASE)
_IFRAME_BLOCK = re.compile(r"<iframe\b[^<]*(?:(?!</iframe>)<[^<]*)*</iframe>", re.IGNORECASE)
_JS_SCHEME = re.compile(r"javascript:", re.IGNORECASE)
_INLINE_HANDLER = re.compile(r"on\w+\s*=", re.IGNORECASE)


def sanitize_string(value: str) -> str:
    """Strip script/iframe blocks, javascript: URLs and inline on*= handlers."""
    value = _SCRIPT_BLOCK.sub("", value)
    value = _IFRAME_BLOCK.sub("", value)
    value = _JS_SCHEME.sub("", value)
    value = _INLINE_HANDLER.sub("", value)
    return value.strip()


def sanitize_payload(value: Any) -> Any:
    if isinstance(value, str):
        return sanitize_string(value)
    if isinstance(value, list):
        return [sanitize_payload(v) for v in value]
    if isinstance(value, dict):
        return {k: sanitize_payload(v) for k, v in value.items()}
    return value
