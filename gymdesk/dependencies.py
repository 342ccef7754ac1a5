from typing import Annotated, Protocol

from fastapi import Depends, HTTPException, Request

from gymdesk.auth import SessionResolver
from gymdesk.errors import STATUS_CODES, FailureKind
from gymdesk.store import DomainStore


def get_store(request: Request) -> DomainStore:
    return request.app.state.store


def get_resolver(request: Request) -> SessionResolver:
    return request.app.state.resolver


StoreDep = Annotated[DomainStore, Depends(get_store)]
ResolverDep = Annotated[SessionResolver, Depends(get_resolver)]


class _ReportsFailures(Protocol):
    last_failure: FailureKind | None
    last_error: str


def failure(source: _ReportsFailures) -> HTTPException:
    """Translate the last failed store/login result into the matching HTTP error."""
    status_code = STATUS_CODES.get(source.last_failure, 400) if source.last_failure else 400
    return HTTPException(status_code=status_code, detail=source.last_error or "Request failed")
