import hashlib
import json

from pydantic import BaseModel


def model_hash(model: BaseModel) -> str:
    """Stable digest of a model; equal models always give the same key"""
    payload = model.model_dump(mode="json", by_alias=True)
    s = json.dumps(payload, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(s.encode()).hexdigest()
