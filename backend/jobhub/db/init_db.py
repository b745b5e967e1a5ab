from __future__ import annotations
from sqlalchemy.engine import Engine

from jobhub.db.database import Base, engine as default_engine
from jobhub.models import api_cache, job, setting  # noqa: F401


def init_db(bind: Engine | None = None) -> None:
    Base.metadata.create_all(bind=bind or default_engine)
