"""Step tagging for multi-step sync operations."""

import logging
from contextlib import contextmanager
from typing import Iterator

from ..core.errors import CRLSyncError

logger = logging.getLogger(__name__)


@contextmanager
def step(name: str) -> Iterator[None]:
    """Tag any CRLSyncError raised inside the block with the step name.

    An error already tagged by an inner step keeps its original tag.
    """
    try:
        yield
    except CRLSyncError as e:
        if e.step is None:
            e.step = name
        logger.debug("Step %s failed: %s", name, e)
        raise
