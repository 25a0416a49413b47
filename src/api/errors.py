"""Mapping of domain errors to RFC 7807 HTTP responses."""

from fastapi import HTTPException, Request

from src.domain.exceptions import ChestAppError


def problem(exc: ChestAppError, request: Request) -> HTTPException:
    """Build the HTTPException for a domain error.

    The body is the error's RFC 7807 dict with ``instance`` set to the
    request URL.
    """
    detail = exc.to_rfc7807_dict()
    detail["instance"] = str(request.url)
    return HTTPException(status_code=exc.status_code, detail=detail)
