"""
Turns the raw text reply of the vision model into a list of event records.

The model is told to answer with a bare JSON array but sometimes wraps it in a
```json fence. Only that fixed fence pattern is removed; anything else that is
not a JSON array is reported back with the original reply attached.
"""

import json
import re
from typing import Any, List, Optional

FENCE_PATTERN = re.compile(r"```json\n?|\n?```")


class ModelReplyError(Exception):
    def __init__(self, message: str, raw_text: str, reason: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.raw_text = raw_text
        self.reason = reason


class ParseError(ModelReplyError):
    """The reply is not valid JSON."""

    def __init__(self, reason: str, raw_text: str):
        super().__init__("Could not parse AI response", raw_text, reason=reason)


class FormatError(ModelReplyError):
    """The reply is valid JSON but not an array."""

    def __init__(self, raw_text: str):
        super().__init__("Invalid response format", raw_text)


def strip_code_fences(text: str) -> str:
    return FENCE_PATTERN.sub("", text).strip()


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Invalid JSON constant: {name}")


def parse_model_reply(content: str) -> List[Any]:
    candidate = strip_code_fences(content)
    try:
        # NaN and Infinity are not JSON
        data = json.loads(candidate, parse_constant=_reject_constant)
    except ValueError as e:
        raise ParseError(str(e), content) from e

    if not isinstance(data, list):
        raise FormatError(content)

    # records are returned untouched, field formats are not checked
    return data
