"""
Urban Dictionary lookups for the `dict` command.

The HTTP call is blocking (requests), so it runs in a worker thread. Any
failure is turned into a chat-friendly string; a lookup never raises.
"""

from __future__ import annotations

import asyncio
import json
import random
from typing import Any, Awaitable, Callable, Optional, Sequence
from urllib.parse import urlencode

import requests

from utils.errors import log_error
from utils.text import first_line, truncate_at_word

DEFINE_URL = "https://api.urbandictionary.com/v0/define"

# Whole reply ("term: definition ...") stays within this many characters
MAX_REPLY_CHARS = 400

HTTP_TIMEOUT_S = 10
LOOKUP_TIMEOUT_S = 15

HttpGet = Callable[[str], Awaitable[bytes]]


async def http_get(url: str) -> bytes:
    """Default HTTP capability: GET `url` in a thread and return the body."""
    def _get() -> bytes:
        resp = requests.get(url, timeout=HTTP_TIMEOUT_S)
        resp.raise_for_status()
        return resp.content

    return await asyncio.to_thread(_get)


def pick_weighted(scores: Sequence[int], rng: random.Random) -> int:
    """Index chosen with probability proportional to its score.

    All-zero (or negative) scores fall back to a uniform choice.
    """
    weights = [max(0, int(s)) for s in scores]
    total = sum(weights)
    if total <= 0:
        return rng.randrange(len(weights))
    pick = rng.uniform(0, total)
    for i, w in enumerate(weights):
        if pick < w:
            return i
        pick -= w
    # uniform() may return `total` itself
    return max(i for i, w in enumerate(weights) if w > 0)


def format_definition(term: str, definition: str) -> str:
    text = first_line(definition)
    budget = MAX_REPLY_CHARS - len(term) - len(": ")
    reply = f"{term}: {truncate_at_word(text, budget)}"
    if len(reply) > MAX_REPLY_CHARS:
        # The term alone eats the budget
        return truncate_at_word(f"{term}: {text}", MAX_REPLY_CHARS)
    return reply


class UrbanDictionary:
    """Thin wrapper around the define endpoint."""

    def __init__(self, get: Optional[HttpGet] = None, rng: Optional[random.Random] = None):
        self._get = get or http_get
        self._rng = rng or random.Random()

    def url_for(self, term: str) -> str:
        return f"{DEFINE_URL}?{urlencode({'term': term})}"

    def choose(self, term: str, entries: Sequence[dict[str, Any]]) -> str:
        if not entries:
            return f"no results for '{term}'"
        if len(entries) == 1:
            chosen = entries[0]
        else:
            idx = pick_weighted([e.get("thumbs_up", 0) for e in entries], self._rng)
            chosen = entries[idx]
        return format_definition(term, str(chosen.get("definition", "")))

    async def lookup(self, term: str) -> str:
        try:
            body = await asyncio.wait_for(self._get(self.url_for(term)), timeout=LOOKUP_TIMEOUT_S)
            payload = json.loads(body)
            entries = payload["list"]
            if not isinstance(entries, list):
                raise ValueError("'list' is not an array")
            return self.choose(term, entries)
        except asyncio.TimeoutError:
            return "something went wrong: lookup timed out"
        except (requests.RequestException, OSError, ValueError, KeyError, TypeError, AttributeError) as e:
            log_error(f"[Dict] Lookup for {term!r} failed", e)
            return f"something went wrong: {e}"
