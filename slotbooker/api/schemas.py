"""
Request and response bodies for the HTTP API.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TimeRangeBody(BaseModel):
    start: str
    end: str


class ScheduleRequest(BaseModel):
    """Body of ``POST /schedule``."""
    model_config = ConfigDict(populate_by_name=True)

    participant_ids: List[str] = Field(alias="participantIds", min_length=1)
    duration_minutes: int = Field(alias="durationMinutes", gt=0)
    time_range: TimeRangeBody = Field(alias="timeRange")
    title: Optional[str] = None

    @field_validator("participant_ids")
    @classmethod
    def validate_participant_ids(cls, value: List[str]) -> List[str]:
        if any(not participant.strip() for participant in value):
            raise ValueError("participantIds must not contain empty ids")
        return value


class MeetingResponse(BaseModel):
    meeting_id: str = Field(serialization_alias="meetingId")
    title: str
    participant_ids: List[str] = Field(serialization_alias="participantIds")
    start_time: str = Field(serialization_alias="startTime")
    end_time: str = Field(serialization_alias="endTime")


class EventResponse(BaseModel):
    id: str
    title: str
    user_id: str = Field(serialization_alias="userId")
    start_time: str = Field(serialization_alias="startTime")
    end_time: str = Field(serialization_alias="endTime")


class CalendarResponse(BaseModel):
    user_id: str = Field(serialization_alias="userId")
    start: str
    end: str
    events: List[EventResponse]


class ErrorResponse(BaseModel):
    error: str
