from __future__ import annotations

"""Lightweight HTTP client util for outbound JSON calls.

Uses stdlib urllib; the only outbound dependency is the identity service, so
a single POST helper is enough. One attempt per call: callers decide what a
failure means.
"""
import http.client
import json
import urllib.request
import urllib.error
from typing import Any, Dict


class HttpError(Exception):
    pass


def post_json(url: str, payload: Dict[str, Any], *, timeout: float = 5.0) -> Any:
    """POST `payload` as JSON and return the decoded JSON response.

    Raises HttpError for transport failures, timeouts, any status other than
    200 and bodies that are not valid JSON.
    """
    body = json.dumps(payload).encode("utf-8")
    req = urllib.request.Request(
        url,
        data=body,
        method="POST",
        headers={"Content-Type": "application/json", "Accept": "application/json"},
    )
    try:
        with urllib.request.urlopen(req, timeout=timeout) as resp:  # nosec B310
            if resp.status != 200:
                raise HttpError(f"HTTP {resp.status} for {url}")
            data = resp.read()
            return json.loads(data.decode("utf-8"))
    except (
        urllib.error.URLError,
        TimeoutError,
        OSError,
        http.client.HTTPException,
        ValueError,
    ) as e:  # ValueError for JSON / UTF-8 decode
        raise HttpError(f"Failed to POST JSON to {url}: {e}") from e
