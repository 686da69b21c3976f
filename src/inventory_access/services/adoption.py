"""
inventory_access.services.adoption

Ownership adoption for orphaned inventory records.

Responsibilities:
- Let an authenticated member claim a record whose owner is NULL.
- Gate adoption on session state and role before touching the store.
- Report every outcome to the notification sink; never retry.
- Describe a record's current owner for the UI badge.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

from inventory_access.auth.errors import AdoptionConflict, DataStoreError, RecordNotFound
from inventory_access.auth.models import SessionStatus
from inventory_access.auth.roles import Role, satisfies
from inventory_access.auth.session import SessionManager
from inventory_access.db.models import RecordType
from inventory_access.db.store import DataStore
from inventory_access.observability.logging import get_logger
from inventory_access.services import notifications
from inventory_access.services.notifications import NotificationSink

log = get_logger(__name__)

# Label used in user-facing messages.
_LABELS: dict[RecordType, str] = {
    RecordType.equipment: "equipment",
    RecordType.inventory_movements: "movement",
    RecordType.maintenance_records: "maintenance record",
    RecordType.orders: "order",
    RecordType.order_batches: "order batch",
    RecordType.suppliers: "supplier",
    RecordType.readers: "reader",
}


class AdoptionOutcome(enum.StrEnum):
    adopted = "adopted"
    unauthenticated = "unauthenticated"
    forbidden = "forbidden"
    conflict = "conflict"
    not_found = "not_found"
    failed = "failed"


@dataclass(frozen=True, slots=True)
class AdoptionResult:
    outcome: AdoptionOutcome
    record_type: RecordType
    record_id: str
    message: str
    owner_id: str | None = None

    @property
    def ok(self) -> bool:
        return self.outcome is AdoptionOutcome.adopted


@dataclass(frozen=True, slots=True)
class OwnerInfo:
    owner_id: str | None
    owner_name: str | None
    is_orphaned: bool


class OwnershipAdoption:
    """
    Adoption for one record type. The store's `conditional_adopt` is the only
    write; it must refuse rows whose owner is no longer NULL.
    """

    required_role = Role.membro

    def __init__(
        self,
        *,
        record_type: RecordType,
        store: DataStore,
        session: SessionManager,
        notifier: NotificationSink,
    ) -> None:
        self.record_type = record_type
        self._store = store
        self._session = session
        self._notifier = notifier
        self._label = _LABELS.get(record_type, "record")

    async def adopt(self, record_id: str) -> AdoptionResult:
        state = self._session.state
        subject_id = state.subject_id
        if state.status is not SessionStatus.authenticated or subject_id is None:
            return self._finish(
                AdoptionOutcome.unauthenticated, record_id, "Sign in to adopt records."
            )

        profile = state.profile or await self._session.refresh_profile()
        if profile is None or not satisfies(profile.role, self.required_role):
            return self._finish(
                AdoptionOutcome.forbidden,
                record_id,
                "Only members can adopt orphaned records.",
                subject_id=subject_id,
            )

        try:
            await self._store.conditional_adopt(self.record_type, record_id, subject_id)
        except AdoptionConflict:
            return self._finish(
                AdoptionOutcome.conflict,
                record_id,
                f"This {self._label} was already adopted by someone else.",
                subject_id=subject_id,
            )
        except RecordNotFound:
            return self._finish(
                AdoptionOutcome.not_found,
                record_id,
                f"This {self._label} no longer exists.",
                subject_id=subject_id,
            )
        except DataStoreError as e:
            log.warning(
                "adoption_write_failed",
                record_type=self.record_type.value,
                record_id=record_id,
                error=e.message,
            )
            return self._finish(
                AdoptionOutcome.failed,
                record_id,
                f"Could not adopt this {self._label}.",
                subject_id=subject_id,
            )

        return self._finish(
            AdoptionOutcome.adopted,
            record_id,
            f"You are now responsible for this {self._label}.",
            subject_id=subject_id,
            owner_id=subject_id,
        )

    async def describe_owner(self, record_id: str) -> OwnerInfo:
        owner_id = await self._store.record_owner(self.record_type, record_id)
        if owner_id is None:
            return OwnerInfo(owner_id=None, owner_name=None, is_orphaned=True)
        name = await self._store.owner_name(owner_id)
        return OwnerInfo(owner_id=owner_id, owner_name=name or "Unknown user", is_orphaned=False)

    def _finish(
        self,
        outcome: AdoptionOutcome,
        record_id: str,
        message: str,
        *,
        subject_id: str | None = None,
        owner_id: str | None = None,
    ) -> AdoptionResult:
        log.info(
            "adoption_result",
            outcome=outcome.value,
            record_type=self.record_type.value,
            record_id=record_id,
            subject_id=subject_id,
        )
        if outcome is AdoptionOutcome.adopted:
            self._notifier.notify(notifications.success("Record adopted", message))
        else:
            self._notifier.notify(notifications.error("Adoption failed", message))
        return AdoptionResult(
            outcome=outcome,
            record_type=self.record_type,
            record_id=record_id,
            message=message,
            owner_id=owner_id,
        )


class AdoptionRegistry:
    """
    One `OwnershipAdoption` per record type, built once at startup.
    """

    def __init__(
        self,
        *,
        store: DataStore,
        session: SessionManager,
        notifier: NotificationSink,
    ) -> None:
        self._by_type = {
            rt: OwnershipAdoption(record_type=rt, store=store, session=session, notifier=notifier)
            for rt in RecordType
        }

    def for_type(self, record_type: RecordType) -> OwnershipAdoption:
        return self._by_type[record_type]

    async def adopt(self, record_type: RecordType, record_id: str) -> AdoptionResult:
        return await self.for_type(record_type).adopt(record_id)


# --- Module Notes -----------------------------------------------------------
# Callers refresh their record lists after a successful adoption; this service
# does not hold record data.
