from __future__ import annotations
from jobhub.models.api_cache import ApiCacheEntry
from jobhub.models.job import Job
from jobhub.models.setting import Setting

__all__ = ["ApiCacheEntry", "Job", "Setting"]
