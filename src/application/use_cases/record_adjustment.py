"""Adjustment use cases: income, expense and contra transfers between parties."""

from dataclasses import dataclass
from datetime import date

from src.application.dto.presenters import adjustment_response
from src.application.dto.requests import CreateAdjustmentRequest
from src.application.dto.responses import AdjustmentResponse, DeleteAdjustmentResponse
from src.config import get_logger
from src.core.entities.adjustment import Adjustment
from src.core.entities.amounts import is_positive_finite, round_money
from src.core.exceptions import AdjustmentNotFoundError, PartyNotFoundError, ValidationError
from src.core.interfaces.adjustment_store import IAdjustmentStore
from src.core.interfaces.directory import IDirectory
from src.core.services import posting

logger = get_logger(__name__)


class RecordAdjustmentUseCase:
    """
    Record an adjustment and post it to the party ledger.

    The source party gets a credit row and the destination party a debit
    row for the full amount. Either side may be omitted, not both.
    """

    def __init__(
        self,
        adjustment_store: IAdjustmentStore | None = None,
        directory: IDirectory | None = None,
    ):
        self._adjustment_store = adjustment_store
        self._directory = directory

    async def _get_adjustment_store(self) -> IAdjustmentStore:
        if self._adjustment_store is None:
            from src.infrastructure.storage.sqlite import get_adjustment_store

            self._adjustment_store = await get_adjustment_store()
        return self._adjustment_store

    async def _get_directory(self) -> IDirectory:
        if self._directory is None:
            from src.infrastructure.storage.sqlite import get_directory

            self._directory = await get_directory()
        return self._directory

    async def execute(self, tenant_id: str, request: CreateAdjustmentRequest) -> Adjustment:
        """
        Raises:
            ValidationError: If the amount is not a positive finite number,
                no party is given, or both sides name the same party.
            PartyNotFoundError: If a named party does not exist for the tenant.
        """
        if not is_positive_finite(request.amount):
            raise ValidationError("amount", "must be a finite number > 0", request.amount)
        if request.from_party_id is None and request.to_party_id is None:
            raise ValidationError("to_party_id", "from_party_id or to_party_id is required")
        if request.from_party_id == request.to_party_id:
            raise ValidationError("to_party_id", "must differ from from_party_id", request.to_party_id)

        adjustment = Adjustment(
            tenant_id=tenant_id,
            txn_type=request.txn_type,
            adjustment_date=request.adjustment_date or date.today(),
            amount=round_money(request.amount),
            from_party_id=request.from_party_id,
            to_party_id=request.to_party_id,
            reference=request.reference,
            category=request.category,
            note=request.note,
        )

        directory = await self._get_directory()
        for party_id in adjustment.party_ids:
            if await directory.get_party(tenant_id, party_id) is None:
                raise PartyNotFoundError(party_id)

        store = await self._get_adjustment_store()
        saved = await store.create_adjustment(adjustment, posting.adjustment_entries(adjustment))
        logger.info(
            "record_adjustment_complete",
            tenant_id=tenant_id,
            adjustment_id=saved.id,
            txn_type=saved.txn_type.value,
            amount=saved.amount,
        )
        return saved

    def to_response(self, adjustment: Adjustment) -> AdjustmentResponse:
        return adjustment_response(adjustment)


@dataclass
class DeleteAdjustmentResult:
    """Result of deleting an adjustment."""

    adjustment: Adjustment


class DeleteAdjustmentUseCase:
    """Delete an adjustment, posting reversal rows for its ledger effect."""

    def __init__(self, adjustment_store: IAdjustmentStore | None = None):
        self._adjustment_store = adjustment_store

    async def _get_adjustment_store(self) -> IAdjustmentStore:
        if self._adjustment_store is None:
            from src.infrastructure.storage.sqlite import get_adjustment_store

            self._adjustment_store = await get_adjustment_store()
        return self._adjustment_store

    async def execute(self, tenant_id: str, adjustment_id: int) -> DeleteAdjustmentResult:
        store = await self._get_adjustment_store()
        adjustment = await store.get_adjustment(tenant_id, adjustment_id)
        if adjustment is None:
            raise AdjustmentNotFoundError(adjustment_id)

        await store.delete_adjustment(adjustment, posting.adjustment_reversal_entries(adjustment))
        logger.info("delete_adjustment_complete", tenant_id=tenant_id, adjustment_id=adjustment_id)
        return DeleteAdjustmentResult(adjustment=adjustment)

    def to_response(self, result: DeleteAdjustmentResult) -> DeleteAdjustmentResponse:
        return DeleteAdjustmentResponse(adjustment_id=result.adjustment.id)  # type: ignore[arg-type]
