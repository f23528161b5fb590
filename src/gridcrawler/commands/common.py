from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from gridcrawler.errors import ExternalToolUnavailable, InvalidOption
from gridcrawler.utils.logger import get_logger
from gridcrawler.utils.runner import can_run, program_version

LOG = get_logger("common")

M = TypeVar("M", bound=BaseModel)


def validated(model: Type[M], **values: Any) -> M:
    """Build a pydantic model, turning ValidationError into InvalidOption."""
    try:
        return model(**values)
    except ValidationError as e:
        msgs = "; ".join(f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors())
        raise InvalidOption(msgs) from e


def check_programs(programs: Iterable[str], *, logger: Optional[logging.Logger] = None) -> Dict[str, Optional[str]]:
    """Fail on the first program missing from PATH; log the version of the rest."""
    log = logger or LOG
    versions: Dict[str, Optional[str]] = {}
    for program in programs:
        if not can_run(program):
            raise ExternalToolUnavailable(program)
        log.info("Program check: %s installed", program)
        version = program_version(program, logger=log)
        if version:
            log.info("Version: %s %s", program, version)
        versions[program] = version
    return versions
