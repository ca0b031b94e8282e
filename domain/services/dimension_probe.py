from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence

from domain.models import ImageDimensions, MediaItem, ProbedItem
from domain.ports.probe import ImageProbe

logger = logging.getLogger(__name__)

DEFAULT_FALLBACK_DIMENSIONS = ImageDimensions(400.0, 400.0, fallback=True)


async def probe_items(
    probe: ImageProbe,
    items: Sequence[MediaItem],
    fallback: ImageDimensions = DEFAULT_FALLBACK_DIMENSIONS,
) -> list[ProbedItem]:
    """Probe every item concurrently; a failed probe yields ``fallback``."""
    results = await asyncio.gather(
        *(probe.probe(item.path) for item in items), return_exceptions=True
    )
    probed: list[ProbedItem] = []
    for item, result in zip(items, results):
        if isinstance(result, Exception):
            logger.warning("Dimension probe failed for %s: %s", item.path, result)
            probed.append(ProbedItem(item=item, dimensions=fallback))
        elif isinstance(result, BaseException):
            raise result
        else:
            probed.append(ProbedItem(item=item, dimensions=result))
    return probed
