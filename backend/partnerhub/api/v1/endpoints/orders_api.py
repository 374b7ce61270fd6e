# partnerhub/api/v1/endpoints/orders_api.py
# REST endpoints for enquiry intake and settlement (back-office UI actions)

from fastapi import APIRouter, Depends, Request, status, Query, Path as FastApiPath
from typing import Annotated, List, Optional
from partnerhub.modules.orders.service import OrderService
from partnerhub.db.schemas.enquiry_schemas import EnquiryCreate, EnquiryDoc
from partnerhub.db.schemas.common_schemas import ActionResult
from partnerhub.core.config import settings
from partnerhub.core.logging_setup import logger
from partnerhub.core.rate_limit import limiter

router = APIRouter()

OrderServiceDep = Annotated[OrderService, Depends()]

@router.post(
    "/enquiries",
    response_model=EnquiryDoc,
    status_code=status.HTTP_201_CREATED,
    summary="Submit Enquiry",
)
@limiter.limit(settings.ENQUIRY_SUBMIT_RATE_LIMIT)
async def submit_enquiry(request: Request, enquiry_in: EnquiryCreate, order_service: OrderServiceDep):
    """Public enquiry form: records a customer lead against a catalog item."""
    logger.bind(catalog_id=enquiry_in.catalog_id).info("Request to submit enquiry.")
    return await order_service.submit_enquiry(enquiry_in)

@router.get("/enquiries", response_model=List[EnquiryDoc], summary="List Enquiries")
async def list_enquiries(
    order_service: OrderServiceDep,
    partner_id: Annotated[Optional[str], Query(description="Filter by submitting partner user ID")] = None,
    seller_id: Annotated[Optional[str], Query(description="Filter by seller ID")] = None,
):
    return await order_service.list_enquiries(partner_id=partner_id, seller_id=seller_id)

@router.get("/enquiries/{enquiry_id}", response_model=EnquiryDoc, summary="Get Enquiry by ID")
async def get_enquiry(
    enquiry_id: Annotated[str, FastApiPath(description="The ID of the enquiry document")],
    order_service: OrderServiceDep,
):
    return await order_service.get_enquiry(enquiry_id)

@router.post(
    "/enquiries/{enquiry_id}/confirm",
    response_model=ActionResult,
    summary="Confirm Enquiry",
    description="Settles a New enquiry: commission payable, sale receivable, wallet revenue and customer record. "
                "Always answers 200; `success` and `error` carry the outcome.",
)
async def confirm_enquiry(
    enquiry_id: Annotated[str, FastApiPath(description="The ID of the enquiry document")],
    order_service: OrderServiceDep,
    actor_id: Annotated[str, Query(description="ID of the back-office user confirming")] = "system",
):
    logger.bind(enquiry_id=enquiry_id, actor_id=actor_id).info("Request to confirm enquiry.")
    return await order_service.confirm_enquiry(enquiry_id, actor_id=actor_id)
