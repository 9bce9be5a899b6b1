# src/rubin_market/api/v1/endpoints/reports.py
"""Report filing and moderator review endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, status

from rubin_market.api.v1.dependencies import CurrentUserDep, ReportServiceDep
from rubin_market.models import Report
from rubin_market.schemas.report import (
    ChatLogEntryResponse,
    ReportCreate,
    ReportDetailResponse,
    ReportResolve,
    ReportResponse,
)

router = APIRouter(prefix="/reports", tags=["reports"])


def _serialize_report(report: Report) -> dict[str, Any]:
    """Serialize a Report without exposing the encrypted snapshot."""
    return {
        "id": report.id,
        "reporter_id": report.reporter_id,
        "target_type": report.target_type,
        "target_id": report.target_id,
        "reason": report.reason,
        "status": report.status,
        "has_chat_log": report.encrypted_chat_log is not None,
        "moderator_id": report.moderator_id,
        "resolution": report.resolution,
        "created_at": report.created_at,
        "resolved_at": report.resolved_at,
    }


@router.post("", response_model=ReportResponse, status_code=status.HTTP_201_CREATED)
async def create_report(
    payload: ReportCreate,
    current_user: CurrentUserDep,
    reports: ReportServiceDep,
) -> ReportResponse:
    """File a report against a listing or a user."""
    report = reports.create_report(
        current_user.id,
        payload.target_type,
        payload.target_id,
        payload.reason,
        chat_room_id=payload.chat_room_id,
    )
    return ReportResponse(**_serialize_report(report))


@router.get("/mine", response_model=list[ReportResponse])
async def list_my_reports(
    current_user: CurrentUserDep,
    reports: ReportServiceDep,
) -> list[ReportResponse]:
    """List reports filed by the caller."""
    return [
        ReportResponse(**_serialize_report(report))
        for report in reports.list_my_reports(current_user.id)
    ]


@router.get("/queue", response_model=list[ReportResponse])
async def get_report_queue(
    current_user: CurrentUserDep,
    reports: ReportServiceDep,
) -> list[ReportResponse]:
    """List pending reports, newest first. Moderators only."""
    return [
        ReportResponse(**_serialize_report(report))
        for report in reports.get_queue(current_user.id)
    ]


@router.get("/{report_id}", response_model=ReportDetailResponse)
async def get_report(
    report_id: str,
    current_user: CurrentUserDep,
    reports: ReportServiceDep,
) -> ReportDetailResponse:
    """Get a report with its chat snapshot while pending. Moderators only."""
    view = reports.get_report(current_user.id, report_id)
    chat_log = (
        [ChatLogEntryResponse.model_validate(entry) for entry in view.chat_log]
        if view.chat_log is not None
        else None
    )
    return ReportDetailResponse(**_serialize_report(view.report), chat_log=chat_log)


@router.post("/{report_id}/resolve", response_model=ReportResponse)
async def resolve_report(
    report_id: str,
    payload: ReportResolve,
    current_user: CurrentUserDep,
    reports: ReportServiceDep,
) -> ReportResponse:
    """Apply a moderator action and close the report. Moderators only."""
    report = reports.resolve_report(
        current_user.id,
        report_id,
        payload.action,
        resolution=payload.resolution,
    )
    return ReportResponse(**_serialize_report(report))
