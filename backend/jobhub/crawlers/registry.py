from __future__ import annotations
from jobhub.crawlers.adapters.adzuna import AdzunaAdapter
from jobhub.crawlers.adapters.indeed import IndeedAdapter
from jobhub.crawlers.adapters.linkedin import LinkedInAdapter
from jobhub.crawlers.adapters.reed import ReedAdapter
from jobhub.crawlers.adapters.remoteok import RemoteOKAdapter

ADAPTERS = {
    "linkedin": LinkedInAdapter,
    "indeed": IndeedAdapter,
    "adzuna": AdzunaAdapter,
    "reed": ReedAdapter,
    "remoteok": RemoteOKAdapter,
}
