# partnerhub/modules/orders/service.py
from typing import Optional, List
from fastapi import Depends
from pydantic import BaseModel
from datetime import datetime, timezone
from motor.motor_asyncio import AsyncIOMotorClientSession

from partnerhub.db.mongo_client import AsyncIOMotorDatabase, get_database, run_in_transaction
from partnerhub.db.schemas.common_schemas import ActionResult
from partnerhub.db.schemas.enquiry_schemas import EnquiryCreate, EnquiryDoc, EnquiryStatus
from partnerhub.db.schemas.ledger_schemas import PayableStatus, ReceivableStatus
from partnerhub.modules.orders.repository import (
    EnquiryRepository, CatalogRepository, PartnerRepository, CustomerRepository,
)
from partnerhub.modules.orders.commission import CommissionResult, resolve_commission
from partnerhub.modules.orders.exceptions import (
    OrdersError, InvalidEnquiryIdError, EnquiryNotFoundError, CatalogNotFoundError,
    PartnerUserNotFoundError, MissingPartnerProfileIdError, PartnerProfileNotFoundError,
    EnquiryStateConflictError,
)
from partnerhub.modules.wallet.repository import LedgerRepository
from partnerhub.services.audit_service import AuditService
from partnerhub.services.codes import new_enquiry_code, new_customer_code
from partnerhub.core.logging_setup import logger

GENERIC_FAILURE = "An unexpected error occurred."

class SettlementOutcome(BaseModel):
    """What a settlement attempt did. `processed` is False for the already-settled no-op."""
    enquiry_id: str
    processed: bool
    previous_status: EnquiryStatus
    commission: Optional[CommissionResult] = None
    payable_id: Optional[str] = None
    receivable_id: Optional[str] = None
    customer_created: bool = False

class OrderService:
    """Service layer for enquiry intake and enquiry settlement."""
    def __init__(
        self,
        enquiry_repo: EnquiryRepository = Depends(),
        catalog_repo: CatalogRepository = Depends(),
        partner_repo: PartnerRepository = Depends(),
        customer_repo: CustomerRepository = Depends(),
        ledger_repo: LedgerRepository = Depends(),
        audit_service: AuditService = Depends(),
        db: AsyncIOMotorDatabase = Depends(get_database), # For transactions
    ):
        self.enquiry_repo = enquiry_repo
        self.catalog_repo = catalog_repo
        self.partner_repo = partner_repo
        self.customer_repo = customer_repo
        self.ledger_repo = ledger_repo
        self.audit_service = audit_service
        self.db_client = db.client

    # --- Intake ---
    async def submit_enquiry(self, enquiry_in: EnquiryCreate) -> EnquiryDoc:
        log = logger.bind(catalog_id=enquiry_in.catalog_id, submitter_id=enquiry_in.submitted_by.id)
        catalog = await self.catalog_repo.get_by_id(enquiry_in.catalog_id)
        if not catalog:
            log.warning("Enquiry submitted for unknown catalog.")
            raise CatalogNotFoundError(enquiry_in.catalog_id, "The selected catalog does not exist.")

        enquiry_data = enquiry_in.model_dump()
        enquiry_data.update(
            enquiry_code=new_enquiry_code(),
            seller_id=catalog.seller_id,
            created_at=datetime.now(timezone.utc),
            status=EnquiryStatus.NEW.value,
        )
        enquiry = await self.enquiry_repo.create_enquiry(enquiry_data)
        log.info(f"Enquiry {enquiry.enquiry_code} submitted.")
        return enquiry

    async def get_enquiry(self, enquiry_id: str) -> EnquiryDoc:
        enquiry = await self.enquiry_repo.get_by_id(enquiry_id)
        if not enquiry:
            raise EnquiryNotFoundError(enquiry_id)
        return enquiry

    async def list_enquiries(self, partner_id: Optional[str] = None, seller_id: Optional[str] = None) -> List[EnquiryDoc]:
        return await self.enquiry_repo.list_enquiries(partner_id=partner_id, seller_id=seller_id)

    # --- Settlement ---
    async def confirm_enquiry(self, enquiry_id: str, actor_id: str = "system") -> ActionResult:
        """Settles an enquiry and reports the outcome without raising."""
        log = logger.bind(enquiry_id=enquiry_id, actor_id=actor_id)
        try:
            outcome = await self.settle_enquiry(enquiry_id)
        except OrdersError as e:
            log.warning(f"Enquiry settlement rejected: {e}")
            return ActionResult(success=False, error=str(e))
        except Exception as e:
            log.exception("Unexpected error confirming enquiry.")
            return ActionResult(success=False, error=str(e) or GENERIC_FAILURE)

        if not outcome.processed:
            return ActionResult(success=True, message=f"Enquiry is already {outcome.previous_status.value}; nothing to process.")

        await self.audit_service.log_event(
            actor_id=actor_id, action="confirm_enquiry", entity_type="enquiry", entity_id=enquiry_id,
            details={
                "commission": outcome.commission.amount if outcome.commission else 0,
                "commission_rule": outcome.commission.rule.value if outcome.commission else None,
                "payable_id": outcome.payable_id,
                "receivable_id": outcome.receivable_id,
                "customer_created": outcome.customer_created,
            },
        )
        return ActionResult(success=True, message="Enquiry confirmed and ledger entries created successfully.")

    async def settle_enquiry(self, enquiry_id: str) -> SettlementOutcome:
        """
        Atomically settles an enquiry that is still `New`:
        1. Reads enquiry, catalog, partner user and partner profile.
        2. Resolves the commission.
        3. Writes payable (if commission > 0), receivable, wallet revenue, customer (if new).
        4. Moves the enquiry to `Contacted`.
        Any other status is a no-op. Any error aborts the transaction with nothing written.
        """
        if not enquiry_id or not enquiry_id.strip():
            raise InvalidEnquiryIdError()

        logger.bind(enquiry_id=enquiry_id).info("Starting enquiry settlement transaction.")
        outcome = await run_in_transaction(
            self.db_client, lambda session: self._settle_in_transaction(enquiry_id, session)
        )
        if outcome.processed:
            logger.bind(enquiry_id=enquiry_id).success(
                f"Enquiry settled. Commission={outcome.commission.amount if outcome.commission else 0}, "
                f"Payable={outcome.payable_id}, Receivable={outcome.receivable_id}"
            )
        return outcome

    async def _settle_in_transaction(self, enquiry_id: str, session: AsyncIOMotorClientSession) -> SettlementOutcome:
        log = logger.bind(enquiry_id=enquiry_id)

        # --- 1. Reads: all of them happen before any write ---
        enquiry = await self.enquiry_repo.get_by_id(enquiry_id, session=session)
        if not enquiry:
            raise EnquiryNotFoundError(enquiry_id)

        if enquiry.status is not EnquiryStatus.NEW:
            log.info(f"Enquiry already {enquiry.status.value}; skipping settlement.")
            return SettlementOutcome(enquiry_id=enquiry_id, processed=False, previous_status=enquiry.status)

        catalog = await self.catalog_repo.get_by_id(enquiry.catalog_id, session=session)
        if not catalog:
            raise CatalogNotFoundError(enquiry.catalog_id)

        partner = await self.partner_repo.get_user(enquiry.submitted_by.id, session=session)
        if not partner:
            raise PartnerUserNotFoundError(enquiry.submitted_by.id)
        if not partner.partner_profile_id:
            raise MissingPartnerProfileIdError(partner.id)

        profile = await self.partner_repo.get_profile(partner.partner_profile_id, session=session)
        if not profile:
            raise PartnerProfileNotFoundError(partner.partner_profile_id)

        # --- 2. Commission ---
        commission = resolve_commission(catalog, profile.partner_category)
        log.debug(f"Commission resolved: {commission.amount} via {commission.rule.value}")

        partner_ref = partner.partner_code or partner.id
        today = datetime.now(timezone.utc).date().isoformat()

        # --- 3. Writes ---
        payable_id = None
        if commission.amount > 0:
            payable_id = await self.ledger_repo.insert_payable({
                "date": today,
                "recipient_name": partner.name,
                "recipient_id": partner_ref,
                "payable_amount": commission.amount,
                "status": PayableStatus.PENDING.value,
                "description": f"Commission for '{catalog.title}'",
                "seller_id": catalog.seller_id,
                "enquiry_id": enquiry_id,
            }, session=session)

        receivable_id = await self.ledger_repo.insert_receivable({
            "date": today,
            "partner_name": partner.name,
            "partner_id": partner_ref,
            "customer_name": enquiry.customer_name,
            "customer_email": enquiry.customer_email,
            "customer_phone": enquiry.customer_phone,
            "total_amount": catalog.selling_price,
            "pending_amount": catalog.selling_price,
            "status": ReceivableStatus.PENDING.value,
            "description": f"Sale of '{catalog.title}'",
            "seller_id": catalog.seller_id,
            "enquiry_id": enquiry_id,
        }, session=session)

        # Revenue is recognised at sale time; the balance moves only when money does
        await self.ledger_repo.increment_wallet(revenue=catalog.selling_price, session=session)

        customer_created = await self.customer_repo.create_if_absent({
            "customer_code": new_customer_code(),
            "name": enquiry.customer_name,
            "email": enquiry.customer_email,
            "phone": enquiry.customer_phone,
            "pincode": enquiry.customer_pincode,
            "created_by": enquiry.submitted_by.id,
            "created_at": datetime.now(timezone.utc),
            "seller_id": catalog.seller_id,
        }, session=session)

        # --- 4. Status ---
        if not await self.enquiry_repo.advance_status(enquiry_id, EnquiryStatus.NEW, EnquiryStatus.CONTACTED, session=session):
            raise EnquiryStateConflictError(enquiry_id)

        return SettlementOutcome(
            enquiry_id=enquiry_id,
            processed=True,
            previous_status=enquiry.status,
            commission=commission,
            payable_id=payable_id,
            receivable_id=receivable_id,
            customer_created=customer_created,
        )
