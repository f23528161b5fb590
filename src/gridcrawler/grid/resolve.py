from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Mapping, Optional, Set

from gridcrawler.errors import UnknownIdentifier
from gridcrawler.plan.types import PathGroup
from gridcrawler.utils.logger import get_logger

LOG = get_logger("grid")


def resolve(
    grid: Mapping[str, str],
    sample_ids: Iterable[str],
    *,
    logger: Optional[logging.Logger] = None,
) -> List[PathGroup]:
    """
    Collapse requested sample IDs onto the variant files that hold them.

    Groups come out in the order their path was first seen; IDs within a
    group keep request order. A repeated ID is only counted once. Raises
    UnknownIdentifier on the first ID missing from the grid (an empty
    path counts as missing), before any group is returned.
    """
    log = logger or LOG
    by_path: Dict[str, List[str]] = {}
    found: List[str] = []
    seen: Set[str] = set()
    for sid in sample_ids:
        if sid in seen:
            log.warning("Sample_id %s requested more than once; using it once", sid)
            continue
        path = grid.get(sid)
        if not path:
            raise UnknownIdentifier(sid)
        by_path.setdefault(path, []).append(sid)
        found.append(sid)
        seen.add(sid)

    if found:
        log.info("Found sample_id(s): %s in grid", ", ".join(found))
    return [PathGroup(path=p, sample_ids=tuple(ids)) for p, ids in by_path.items()]
