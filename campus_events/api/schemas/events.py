"""Event and approval schemas."""

import datetime as dt
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel

from campus_events.core.approval.states import ApprovalDecision, EventStatus


class EventCreate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    date: Optional[dt.date] = None
    start_time: Optional[dt.time] = None
    end_time: Optional[dt.time] = None
    venue: Optional[str] = None
    category: Optional[str] = None
    budget: Optional[float] = None
    expected_attendees: Optional[int] = None
    requirements: Optional[str] = None


class EventUpdate(EventCreate):
    pass


class EventResponse(BaseModel):
    id: UUID
    title: str
    description: str
    date: dt.date
    start_time: dt.time
    end_time: dt.time
    venue: str
    category: str
    budget: Optional[float]
    expected_attendees: Optional[int]
    requirements: Optional[str]
    submitted_by: Optional[UUID]
    status: str
    created_at: dt.datetime
    updated_at: dt.datetime

    class Config:
        from_attributes = True


class ApprovalResponse(BaseModel):
    id: UUID
    event_id: UUID
    reviewed_by: Optional[UUID]
    role: str
    status: str
    comment: Optional[str]
    reviewed_at: dt.datetime

    class Config:
        from_attributes = True


class EventDetailResponse(EventResponse):
    approvals: List[ApprovalResponse] = []


class EventStatsResponse(BaseModel):
    total: int
    approved: int
    pending: int


class ReviewRequest(BaseModel):
    decision: ApprovalDecision
    comment: Optional[str] = None
    expected_status: Optional[EventStatus] = None


class ApprovalStatsResponse(BaseModel):
    approved: int
    rejected: int
    pending: int
