"""
Translation of service-layer errors into HTTP errors.
"""

from fastapi import HTTPException, status


def http_error(exc: ValueError, default_status: int = status.HTTP_400_BAD_REQUEST) -> HTTPException:
    """Map a service ``ValueError`` to 404 when it reports a missing record, else ``default_status``."""
    detail = str(exc)
    if "not found" in detail.lower():
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=detail)
    return HTTPException(status_code=default_status, detail=detail)
