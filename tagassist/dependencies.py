"""
FastAPI dependencies.

The TaggingService is a process-wide component created on first use.
Tests replace it through app.dependency_overrides[get_tagging_service].
"""

import logging
import threading
from typing import Optional

from tagassist.services.tagging_service import TaggingService, create_tagging_service

logger = logging.getLogger(__name__)

_tagging_service: Optional[TaggingService] = None
_service_lock = threading.Lock()


def get_tagging_service() -> TaggingService:
    """Return the shared TaggingService, creating it from settings if needed."""
    global _tagging_service

    if _tagging_service is not None:
        return _tagging_service

    with _service_lock:
        if _tagging_service is None:
            _tagging_service = create_tagging_service()
            logger.info("TaggingService initialized")

    return _tagging_service
