"""Starlette integration: run the cross-site contact merge for authenticated requests."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from sqlalchemy.exc import SQLAlchemyError
from starlette.concurrency import run_in_threadpool
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from contactmerge.adapters.cookies import CookieContactPersistentStorage
from contactmerge.adapters.processing import HeaderProcessingChecker
from contactmerge.adapters.sqlalchemy.unit_of_work import SqlAlchemyContactUnitOfWork
from contactmerge.app import build_contact_manager, track_visit
from contactmerge.config import ContactManagerConfig
from contactmerge.domain.errors import IdentityMergeError
from contactmerge.domain.request_context import (
    CookieOptions,
    MergeRequestContext,
    PendingCookies,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from starlette.requests import Request
    from starlette.responses import Response
    from starlette.types import ASGIApp

    from contactmerge.app import UnitOfWorkFactory
    from contactmerge.config import MergeMiddlewareConfig

log = getLogger(__name__)

SECONDS_PER_DAY = 24 * 60 * 60


def authenticated_user_name(request: Request) -> str | None:
    """Return the principal name set by Starlette's AuthenticationMiddleware, if any."""
    if "user" not in request.scope:
        return None
    user = request.user
    if not getattr(user, "is_authenticated", False):
        return None
    name = getattr(user, "display_name", "")
    return name or None


def apply_pending_cookies(response: Response, pending: PendingCookies) -> None:
    for cookie in pending:
        options = cookie.options
        response.set_cookie(
            key=cookie.name,
            value=cookie.value,
            max_age=options.max_age,
            expires=options.expires,
            path=options.path,
            domain=options.domain,
            secure=options.secure,
            httponly=options.httponly,
            samesite=options.samesite,
        )


class ContactMergeMiddleware(BaseHTTPMiddleware):
    """Merge the visitor's tracked contact into the signed-in user's contact.

    Runs the synchronous merge gate in a worker thread inside one unit of work per
    request and applies the resulting cookie writes to the response. When the merge
    or the store fails, the unit of work is rolled back and no cookies are written;
    the request continues unless ``config.raise_errors`` is set.
    """

    def __init__(
        self,
        app: ASGIApp,
        *,
        config: MergeMiddlewareConfig,
        manager_config: ContactManagerConfig | None = None,
        unit_of_work_factory: UnitOfWorkFactory | None = None,
        reset_predicate: Callable[[Request], bool] | None = None,
        track_page_visits: bool = False,
    ) -> None:
        super().__init__(app)
        self.config = config
        self.manager_config = manager_config or ContactManagerConfig()
        self.unit_of_work_factory = unit_of_work_factory or SqlAlchemyContactUnitOfWork
        self.reset_predicate = reset_predicate
        self.track_page_visits = track_page_visits

    def cookie_options(self) -> CookieOptions:
        return CookieOptions(
            domain=self.config.cookie_domain,
            path=self.config.cookie_path,
            max_age=self.config.cookie_max_age_days * SECONDS_PER_DAY,
            secure=self.config.cookie_secure,
            httponly=True,
            samesite=self.config.cookie_samesite,
        )

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        pending = PendingCookies()
        user_name = authenticated_user_name(request)

        if user_name is not None or self.track_page_visits:
            try:
                await run_in_threadpool(self._process, request, pending, user_name)
            except (IdentityMergeError, SQLAlchemyError) as exc:
                # The unit of work rolled back; cookies pointing at its rows must not leak.
                pending.clear()
                if self.config.raise_errors:
                    raise
                log.warning(
                    "Continuing request without contact merge: user_name=%s, path=%s, error=%s",
                    user_name,
                    request.url.path,
                    exc,
                )

        response = await call_next(request)
        apply_pending_cookies(response, pending)
        return response

    def _process(self, request: Request, pending: PendingCookies, user_name: str | None) -> None:
        checker = HeaderProcessingChecker(
            request.headers,
            tracking_enabled=self.config.tracking_enabled,
            honor_do_not_track=self.config.honor_do_not_track,
        )
        reset = bool(self.reset_predicate and self.reset_predicate(request))

        with self.unit_of_work_factory() as uow:
            storage = CookieContactPersistentStorage(
                contacts=uow.repositories.contacts,
                request_cookies=request.cookies,
                response_cookies=pending,
                cookie_name=self.manager_config.reference_cookie_name,
                cookie_options=self.cookie_options,
            )

            if self.track_page_visits and checker.can_process_contact():
                track_visit(
                    uow,
                    storage,
                    url=str(request.url),
                    site_name=self.config.site_name,
                )

            if user_name is not None:
                manager = build_contact_manager(
                    uow,
                    persistent_storage=lambda: storage,
                    processing_checker=lambda: checker,
                    config=self.manager_config,
                )
                context = MergeRequestContext(
                    cookies=request.cookies,
                    user_name=user_name,
                    response_cookies=pending,
                )
                manager.contingent_merge(context, self.config.site_name, reset, self.cookie_options)

            uow.commit()
