# src/rubin_market/services/reports.py
"""Reports against listings and users, with encrypted chat snapshots."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass

from sqlalchemy import exc as sa_exc
from sqlalchemy import update
from sqlalchemy.orm import Session

from rubin_market.core.errors import (
    BadRequestError,
    ConflictError,
    FormatError,
    IntegrityError,
    NotFoundError,
)
from rubin_market.core.settings import settings
from rubin_market.db.time import utcnow
from rubin_market.models import ChatRoom, Listing, Report, User
from rubin_market.models.listing import LISTING_STATUS_DELETED
from rubin_market.models.notification import NOTIFICATION_REPORT_ACTION
from rubin_market.models.report import (
    ACTION_BAN_USER,
    ACTION_DISMISS,
    ACTION_REMOVE_LISTING,
    REPORT_REASONS,
    REPORT_STATUS_DISMISSED,
    REPORT_STATUS_PENDING,
    REPORT_STATUS_RESOLVED,
    TARGET_LISTING,
    TARGET_USER,
)
from rubin_market.services.cipher import CipherService
from rubin_market.services.message_store import MessageStore
from rubin_market.services.moderation import require_active_user, require_moderator
from rubin_market.services.notifications import Notifier
from rubin_market.utils.ids import new_id

logger = logging.getLogger(__name__)

TARGET_TYPES = (TARGET_LISTING, TARGET_USER)
RESOLUTION_ACTIONS = (ACTION_DISMISS, ACTION_REMOVE_LISTING, ACTION_BAN_USER)


@dataclass
class ChatLogEntry:
    """One message of a report snapshot."""

    sender_id: str
    content: str
    created_at: str


@dataclass
class ReportView:
    """A report as shown to moderators, with its snapshot decrypted if visible."""

    report: Report
    chat_log: list[ChatLogEntry] | None


class ReportService:
    """Filing, reviewing and resolving reports."""

    def __init__(
        self,
        db: Session,
        cipher: CipherService,
        notifier: Notifier,
        snapshot_size: int | None = None,
    ) -> None:
        self.db = db
        self.cipher = cipher
        self.notifier = notifier
        self.messages = MessageStore(db, cipher)
        self.snapshot_size = snapshot_size or settings.chat_snapshot_size

    def create_report(
        self,
        reporter_id: str,
        target_type: str,
        target_id: str,
        reason: str,
        chat_room_id: str | None = None,
    ) -> Report:
        """File a report, capturing a chat snapshot when a room is given.

        The snapshot is only taken if the reporter participates in the room.

        Raises:
            AuthorizationError: If the reporter is banned
            NotFoundError: If the reporter or target does not exist
            BadRequestError: If the target type or reason is unknown
            ConflictError: If the reporter already has a pending report on the target
        """
        require_active_user(self.db, reporter_id)
        if target_type not in TARGET_TYPES:
            raise BadRequestError(f"Unknown target type: {target_type}")
        if reason not in REPORT_REASONS:
            raise BadRequestError(f"Unknown report reason: {reason}")
        self._ensure_target_exists(target_type, target_id)

        if self._pending_report(reporter_id, target_type, target_id) is not None:
            raise ConflictError("Report already submitted")

        encrypted_chat_log = None
        if chat_room_id:
            encrypted_chat_log = self._capture_snapshot(chat_room_id, reporter_id)

        report = Report(
            id=new_id(),
            reporter_id=reporter_id,
            target_type=target_type,
            target_id=target_id,
            reason=reason,
            encrypted_chat_log=encrypted_chat_log,
            status=REPORT_STATUS_PENDING,
        )
        self.db.add(report)
        try:
            self.db.commit()
        except sa_exc.IntegrityError as err:
            # The partial unique index caught a concurrent duplicate.
            self.db.rollback()
            raise ConflictError("Report already submitted") from err
        self.db.refresh(report)

        logger.info(
            "Report %s filed against %s %s (snapshot=%s)",
            report.id,
            target_type,
            target_id,
            encrypted_chat_log is not None,
        )
        return report

    def list_my_reports(self, reporter_id: str) -> list[Report]:
        """Return reports filed by the caller, newest first."""
        return (
            self.db.query(Report)
            .filter(Report.reporter_id == reporter_id)
            .order_by(Report.created_at.desc())
            .all()
        )

    def get_queue(self, moderator_id: str) -> list[Report]:
        """Return pending reports, newest first."""
        require_moderator(self.db, moderator_id)
        return (
            self.db.query(Report)
            .filter(Report.status == REPORT_STATUS_PENDING)
            .order_by(Report.created_at.desc())
            .all()
        )

    def get_report(self, moderator_id: str, report_id: str) -> ReportView:
        """Return a report with its snapshot decrypted while the case is open.

        A snapshot that cannot be decrypted or parsed is reported as ``None``
        rather than failing the request.
        """
        require_moderator(self.db, moderator_id)
        report = self._load_report(report_id)

        chat_log = None
        if report.encrypted_chat_log and self._snapshot_visible(report):
            try:
                chat_log = self._open_snapshot(report.encrypted_chat_log)
            except (FormatError, IntegrityError, ValueError, KeyError, TypeError) as err:
                logger.warning("Snapshot of report %s could not be opened: %s", report.id, err)
                chat_log = None

        return ReportView(report=report, chat_log=chat_log)

    def resolve_report(
        self,
        moderator_id: str,
        report_id: str,
        action: str,
        resolution: str | None = None,
    ) -> Report:
        """Apply a moderator action and close the report.

        The side effect is applied before the status flip, in the same
        transaction. The flip only matches a still-pending row, so a
        concurrent resolution rolls this one back.

        Raises:
            AuthorizationError: If the caller is not a moderator
            NotFoundError: If the report does not exist
            BadRequestError: If the report is no longer pending or the action is unknown
        """
        require_moderator(self.db, moderator_id)
        report = self._load_report(report_id)
        if report.status != REPORT_STATUS_PENDING:
            raise BadRequestError("Report already resolved")
        if action not in RESOLUTION_ACTIONS:
            raise BadRequestError(f"Unknown action: {action}")

        if action == ACTION_REMOVE_LISTING and report.target_type == TARGET_LISTING:
            self.db.execute(
                update(Listing)
                .where(Listing.id == report.target_id)
                .values(status=LISTING_STATUS_DELETED)
            )
        elif action == ACTION_BAN_USER:
            banned_user_id = self._ban_target(report)
            if banned_user_id is not None:
                self.db.execute(
                    update(User).where(User.id == banned_user_id).values(is_banned=True)
                )

        new_status = REPORT_STATUS_DISMISSED if action == ACTION_DISMISS else REPORT_STATUS_RESOLVED
        flipped = self.db.execute(
            update(Report)
            .where(Report.id == report_id, Report.status == REPORT_STATUS_PENDING)
            .values(
                status=new_status,
                moderator_id=moderator_id,
                resolution=resolution or action,
                resolved_at=utcnow(),
            )
        )
        if flipped.rowcount != 1:
            self.db.rollback()
            raise BadRequestError("Report already resolved")

        self.notifier.queue(
            report.reporter_id,
            NOTIFICATION_REPORT_ACTION,
            {"report_id": report_id, "action": action, "status": new_status},
        )
        self.db.commit()
        self.db.refresh(report)
        logger.info("Report %s %s by moderator %s (%s)", report_id, new_status, moderator_id, action)
        return report

    def _snapshot_visible(self, report: Report) -> bool:
        if report.status == REPORT_STATUS_PENDING:
            return True
        return settings.snapshot_visible_after_resolution

    def _capture_snapshot(self, chat_room_id: str, reporter_id: str) -> str | None:
        room = self.db.get(ChatRoom, chat_room_id)
        if room is None or not room.has_participant(reporter_id):
            logger.info("No snapshot for room %s: reporter is not a participant", chat_room_id)
            return None

        entries = [
            {
                "sender_id": message.sender_id,
                "content": message.content,
                "created_at": message.created_at.isoformat(),
            }
            for message in self.messages.recent(chat_room_id, self.snapshot_size)
        ]
        return self.cipher.encrypt(json.dumps(entries, ensure_ascii=False))

    def _open_snapshot(self, blob: str) -> list[ChatLogEntry]:
        raw = json.loads(self.cipher.decrypt(blob))
        if not isinstance(raw, list):
            raise ValueError("Snapshot is not a list of messages")
        return [
            ChatLogEntry(
                sender_id=str(entry["sender_id"]),
                content=str(entry["content"]),
                created_at=str(entry["created_at"]),
            )
            for entry in raw
        ]

    def _ban_target(self, report: Report) -> str | None:
        if report.target_type == TARGET_USER:
            return report.target_id
        listing = self.db.get(Listing, report.target_id)
        return listing.seller_id if listing is not None else None

    def _ensure_target_exists(self, target_type: str, target_id: str) -> None:
        model = Listing if target_type == TARGET_LISTING else User
        if self.db.get(model, target_id) is None:
            raise NotFoundError("Target not found")

    def _pending_report(self, reporter_id: str, target_type: str, target_id: str) -> Report | None:
        return (
            self.db.query(Report)
            .filter(
                Report.reporter_id == reporter_id,
                Report.target_type == target_type,
                Report.target_id == target_id,
                Report.status == REPORT_STATUS_PENDING,
            )
            .first()
        )

    def _load_report(self, report_id: str) -> Report:
        report = self.db.get(Report, report_id)
        if report is None:
            raise NotFoundError("Report not found")
        return report
