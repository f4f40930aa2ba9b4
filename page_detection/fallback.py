"""
Ordered fallback producers
"""

import logging
from typing import Any, Callable, List, Optional, Tuple

logger = logging.getLogger(__name__)


class FallbackChain:
    """
    Try named producers in order until one returns something other than None.

    Example:
        chain = FallbackChain([
            ('full_resolution', detect_full),
            ('half_resolution', detect_half),
            ('default', make_default),
        ])
        corners = chain.run(image)
    """

    def __init__(self, producers: List[Tuple[str, Callable[..., Optional[Any]]]]):
        self.producers = list(producers)
        self.last_producer: Optional[str] = None

    def run(self, *args, **kwargs) -> Optional[Any]:
        self.last_producer = None
        for name, producer in self.producers:
            result = producer(*args, **kwargs)
            if result is not None:
                self.last_producer = name
                logger.debug("Fallback chain answered by %s", name)
                return result
            logger.debug("Producer %s returned nothing", name)
        return None
