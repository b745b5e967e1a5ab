from __future__ import annotations
import hashlib
import json


def request_cache_key(source: str, endpoint: str, params: dict) -> str:
    # sort_keys makes the key independent of option insertion order.
    raw = json.dumps({"endpoint": endpoint, "params": params}, sort_keys=True, default=str)
    return f"{source}:{hashlib.sha256(raw.encode('utf-8')).hexdigest()}"
