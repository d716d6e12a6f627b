"""
FastAPI application exposing scheduling and calendar lookups.

Handlers stay thin: they parse timestamps, call the ``MeetingScheduler`` and
format times in the configured display timezone.
"""

import logging
import re
from typing import Optional

import pendulum
from fastapi import FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pendulum import DateTime

from .. import __version__
from ..adapters.calendar_store import CalendarStore, InMemoryCalendarStore
from ..config import AppConfig
from ..domain.exceptions import (
    InvalidRequestError,
    NoAvailableSlotError,
    SchedulingContractError,
    SlotBookerError,
)
from ..domain.models import Booking, Event, SearchWindow
from ..domain.slot_finder import SlotFinder
from ..domain.slot_scorer import SlotScorer
from ..services.meeting_scheduler import DEFAULT_MEETING_TITLE, MeetingScheduler
from .schemas import (
    CalendarResponse,
    ErrorResponse,
    EventResponse,
    MeetingResponse,
    ScheduleRequest,
)

logger = logging.getLogger(__name__)

RFC3339_PATTERN = re.compile(
    r"^\d{4}-\d{2}-\d{2}[Tt]\d{2}:\d{2}:\d{2}(\.\d+)?([Zz]|[+-]\d{2}:\d{2})$"
)


def parse_timestamp(value: Optional[str], field: str) -> DateTime:
    """
    Parse an RFC 3339 timestamp supplied by a client.

    Raises:
        InvalidRequestError: If the value is missing or not a date-time
    """
    if value is None or not value.strip():
        raise InvalidRequestError(f"{field} is required")

    value = value.strip()
    if not RFC3339_PATTERN.match(value):
        raise InvalidRequestError(f"Invalid {field} date format")

    try:
        parsed = pendulum.parse(value)
    except (ValueError, TypeError) as exc:
        raise InvalidRequestError(f"Invalid {field} date format") from exc

    if not isinstance(parsed, DateTime):
        raise InvalidRequestError(f"Invalid {field} date format")

    return parsed


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


def _format(dt: DateTime, timezone: str) -> str:
    return dt.in_timezone(timezone).isoformat()


def _meeting_body(booking: Booking, timezone: str) -> dict:
    return MeetingResponse(
        meeting_id=booking.meeting_id,
        title=booking.title,
        participant_ids=booking.participants,
        start_time=_format(booking.slot.start, timezone),
        end_time=_format(booking.slot.end, timezone),
    ).model_dump(by_alias=True)


def _event_body(event: Event, timezone: str) -> EventResponse:
    return EventResponse(
        id=event.id,
        title=event.title,
        user_id=event.participant_id,
        start_time=_format(event.start, timezone),
        end_time=_format(event.end, timezone),
    )


def build_scheduler(config: AppConfig, store: CalendarStore) -> MeetingScheduler:
    return MeetingScheduler(
        store=store,
        slot_finder=SlotFinder(policy=config.scheduling.to_policy()),
        slot_scorer=SlotScorer(weights=config.scoring.to_weights()),
    )


def create_app(
    config: Optional[AppConfig] = None,
    store: Optional[CalendarStore] = None,
) -> FastAPI:
    """
    Build the API application.

    Args:
        config: Application configuration, defaults to built-in values
        store: Calendar store, defaults to an in-memory store seeded from config
    """
    config = config or AppConfig()
    if store is None:
        store = InMemoryCalendarStore(config.build_seed_events())

    scheduler = build_scheduler(config, store)
    display_tz = config.display_timezone

    app = FastAPI(title="slotbooker", version=__version__)
    app.state.config = config
    app.state.store = store
    app.state.scheduler = scheduler

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = exc.errors()
        if errors:
            location = ".".join(str(part) for part in errors[0].get("loc", ()) if part != "body")
            detail = errors[0].get("msg", "invalid value")
            message = f"Invalid request: {location}: {detail}" if location else f"Invalid request: {detail}"
        else:
            message = "Invalid request"
        logger.debug("Rejected %s %s: %s", request.method, request.url.path, message)
        return _error(400, message)

    @app.exception_handler(InvalidRequestError)
    async def handle_invalid_request(request: Request, exc: InvalidRequestError) -> JSONResponse:
        logger.debug("Rejected %s %s: %s", request.method, request.url.path, exc)
        return _error(400, str(exc))

    @app.exception_handler(NoAvailableSlotError)
    async def handle_no_slot(request: Request, exc: NoAvailableSlotError) -> JSONResponse:
        return _error(409, str(exc))

    @app.exception_handler(SchedulingContractError)
    async def handle_contract_error(request: Request, exc: SchedulingContractError) -> JSONResponse:
        logger.error("Scheduling contract violated: %s", exc)
        return _error(500, "Internal scheduling error")

    @app.exception_handler(SlotBookerError)
    async def handle_app_error(request: Request, exc: SlotBookerError) -> JSONResponse:
        logger.error("Unhandled application error: %s", exc)
        return _error(500, str(exc))

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok", "version": __version__}

    @app.post("/schedule", status_code=201)
    def schedule_meeting(body: ScheduleRequest) -> JSONResponse:
        window = SearchWindow(
            start=parse_timestamp(body.time_range.start, "start"),
            end=parse_timestamp(body.time_range.end, "end"),
        )

        booking = scheduler.schedule(
            participants=body.participant_ids,
            window=window,
            duration_minutes=body.duration_minutes,
            title=body.title or DEFAULT_MEETING_TITLE,
        )
        return JSONResponse(status_code=201, content=_meeting_body(booking, display_tz))

    @app.get("/users/{user_id}/calendar")
    def get_user_calendar(
        user_id: str,
        start: Optional[str] = Query(None),
        end: Optional[str] = Query(None),
    ) -> JSONResponse:
        if not user_id.strip():
            raise InvalidRequestError("userId is required")
        if not start or not end:
            raise InvalidRequestError("start and end query params are required")

        range_start = parse_timestamp(start, "start")
        range_end = parse_timestamp(end, "end")

        events = scheduler.calendar(user_id, range_start, range_end)
        body = CalendarResponse(
            user_id=user_id,
            start=_format(range_start, display_tz),
            end=_format(range_end, display_tz),
            events=[_event_body(event, display_tz) for event in events],
        )
        return JSONResponse(status_code=200, content=body.model_dump(by_alias=True))

    return app
