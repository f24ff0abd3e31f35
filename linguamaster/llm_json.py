"""Pull a JSON value out of a chat reply that may wrap it in prose or fences."""

from __future__ import annotations

import json
import re
from typing import Any, Iterator, Optional

_FENCE = re.compile(r"```[\w-]*\s*\n(.*?)\n?\s*```", re.DOTALL)
_decoder = json.JSONDecoder()


def _candidates(text: str) -> Iterator[str]:
    yield text
    yield from (match.group(1) for match in _FENCE.finditer(text))


def parse_json_payload(text: str) -> Optional[Any]:
    """Return the first JSON object or array found in ``text``, else ``None``.

    Fenced blocks are tried after the bare reply. Within each candidate the
    first position that decodes as an object or array wins, so trailing
    commentary is ignored.
    """

    if not text or not text.strip():
        return None
    for candidate in _candidates(text.strip()):
        for match in re.finditer(r"[\[{]", candidate):
            try:
                value, _ = _decoder.raw_decode(candidate, match.start())
            except json.JSONDecodeError:
                continue
            return value
    return None


__all__ = ["parse_json_payload"]
