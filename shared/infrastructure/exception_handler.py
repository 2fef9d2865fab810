"""DRF exception handler that renders domain errors.

Domain exceptions carry an ``http_status`` and a stable ``code``. Client
errors (4xx) become ``{"detail", "code"}`` responses; anything mapped
to a 5xx is left to Django so it reaches the error reporting pipeline.
"""

from __future__ import annotations

import logging

from rest_framework.response import Response  # type: ignore
from rest_framework.views import exception_handler  # type: ignore

logger = logging.getLogger(__name__)


def domain_exception_handler(exc, context):  # type: ignore
    response = exception_handler(exc, context)
    if response is not None:
        return response

    status_code = getattr(exc, "http_status", None)
    if status_code is None:
        return None

    if status_code >= 500:
        view = context.get("view")
        logger.critical(
            "Unhandled domain failure in %s: %s",
            view.__class__.__name__ if view else "unknown view",
            exc,
        )
        return None

    return Response({"detail": str(exc), "code": exc.code}, status=status_code)
