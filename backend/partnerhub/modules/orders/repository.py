# partnerhub/modules/orders/repository.py
# Repositories for enquiries and the documents settlement reads (catalogs, partners, customers)

from typing import Optional, List, Dict, Any, Type, TypeVar
from fastapi import Depends
from motor.motor_asyncio import AsyncIOMotorCollection, AsyncIOMotorClientSession
from pydantic import BaseModel, ValidationError
from partnerhub.core.logging_setup import logger
from partnerhub.core.exceptions import RepositoryError, translate_db_errors
from partnerhub.db.mongo_client import (
    AsyncIOMotorDatabase, get_database, ENQUIRIES, CATALOGS, USERS, PARTNER_PROFILES, CUSTOMERS,
)
from partnerhub.db.schemas.enquiry_schemas import EnquiryDoc, EnquiryStatus
from partnerhub.db.schemas.catalog_schemas import CatalogDoc
from partnerhub.db.schemas.partner_schemas import UserDoc, PartnerProfileDoc
from partnerhub.services.codes import new_document_id

M = TypeVar("M", bound=BaseModel)

def map_doc(model: Type[M], doc: Optional[Dict[str, Any]]) -> Optional[M]:
    """Maps a MongoDB document to its Pydantic model."""
    if doc is None:
        return None
    try:
        return model.model_validate(doc)
    except ValidationError as e:
        logger.error(f"Failed to map document to {model.__name__}: id={doc.get('_id')}, error={e}")
        raise RepositoryError(f"Malformed {model.__name__} document '{doc.get('_id')}'.") from e

class EnquiryRepository:
    """Repository for Enquiry data operations."""
    _collection: AsyncIOMotorCollection

    def __init__(self, db: AsyncIOMotorDatabase = Depends(get_database)):
        self._collection = db[ENQUIRIES]

    async def create_enquiry(self, enquiry_data: Dict[str, Any]) -> EnquiryDoc:
        log = logger.bind(collection=ENQUIRIES, action="create")
        enquiry_data.setdefault("_id", new_document_id())
        with translate_db_errors("creating enquiry", collection=ENQUIRIES):
            await self._collection.insert_one(enquiry_data)
        log.info(f"Enquiry document created with ID: {enquiry_data['_id']}")
        return map_doc(EnquiryDoc, enquiry_data)

    async def get_by_id(self, enquiry_id: str, session: Optional[AsyncIOMotorClientSession] = None) -> Optional[EnquiryDoc]:
        with translate_db_errors("fetching enquiry", session, enquiry_id=enquiry_id):
            doc = await self._collection.find_one({"_id": enquiry_id}, session=session)
        return map_doc(EnquiryDoc, doc)

    async def list_enquiries(self, partner_id: Optional[str] = None, seller_id: Optional[str] = None) -> List[EnquiryDoc]:
        """Lists enquiries newest first, optionally filtered by submitter or seller."""
        query: Dict[str, Any] = {}
        if partner_id: query["submitted_by.id"] = partner_id
        if seller_id: query["seller_id"] = seller_id

        logger.bind(collection=ENQUIRIES, filter=query).debug("Listing enquiries.")
        with translate_db_errors("listing enquiries", collection=ENQUIRIES):
            docs = await self._collection.find(query).sort("created_at", -1).to_list(length=None)
        return [map_doc(EnquiryDoc, doc) for doc in docs]

    async def advance_status(
        self,
        enquiry_id: str,
        expected: EnquiryStatus,
        new_status: EnquiryStatus,
        session: Optional[AsyncIOMotorClientSession] = None,
    ) -> bool:
        """Moves the enquiry to `new_status` only if it is still in `expected`."""
        with translate_db_errors("updating enquiry status", session, enquiry_id=enquiry_id):
            result = await self._collection.update_one(
                {"_id": enquiry_id, "status": expected.value},
                {"$set": {"status": new_status.value}},
                session=session,
            )
        return result.modified_count == 1

class CatalogRepository:
    _collection: AsyncIOMotorCollection

    def __init__(self, db: AsyncIOMotorDatabase = Depends(get_database)):
        self._collection = db[CATALOGS]

    async def get_by_id(self, catalog_id: str, session: Optional[AsyncIOMotorClientSession] = None) -> Optional[CatalogDoc]:
        with translate_db_errors("fetching catalog", session, catalog_id=catalog_id):
            doc = await self._collection.find_one({"_id": catalog_id}, session=session)
        return map_doc(CatalogDoc, doc)

class PartnerRepository:
    """Read access to partner user accounts and their profiles."""

    def __init__(self, db: AsyncIOMotorDatabase = Depends(get_database)):
        self._users = db[USERS]
        self._profiles = db[PARTNER_PROFILES]

    async def get_user(self, user_id: str, session: Optional[AsyncIOMotorClientSession] = None) -> Optional[UserDoc]:
        with translate_db_errors("fetching user", session, user_id=user_id):
            doc = await self._users.find_one({"_id": user_id}, session=session)
        return map_doc(UserDoc, doc)

    async def get_profile(self, profile_id: str, session: Optional[AsyncIOMotorClientSession] = None) -> Optional[PartnerProfileDoc]:
        with translate_db_errors("fetching partner profile", session, profile_id=profile_id):
            doc = await self._profiles.find_one({"_id": profile_id}, session=session)
        return map_doc(PartnerProfileDoc, doc)

class CustomerRepository:
    _collection: AsyncIOMotorCollection

    def __init__(self, db: AsyncIOMotorDatabase = Depends(get_database)):
        self._collection = db[CUSTOMERS]

    async def create_if_absent(self, customer_data: Dict[str, Any], session: Optional[AsyncIOMotorClientSession] = None) -> bool:
        """Inserts the customer unless one with the same email exists. Returns True if inserted.

        Relies on the unique index on `email`; a concurrent insert of the same
        email turns into a write conflict instead of a second record.
        """
        email = customer_data["email"]
        on_insert = {k: v for k, v in customer_data.items() if k != "email"}
        on_insert.setdefault("_id", new_document_id())
        with translate_db_errors("upserting customer", session, email=email):
            result = await self._collection.update_one(
                {"email": email},
                {"$setOnInsert": on_insert},
                upsert=True,
                session=session,
            )
        return result.upserted_id is not None
