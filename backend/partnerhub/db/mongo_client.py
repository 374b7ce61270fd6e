# partnerhub/db/mongo_client.py
from typing import Awaitable, Callable, TypeVar
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorClientSession, AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING
from partnerhub.core.config import settings
from partnerhub.core.logging_setup import logger

# Collection names shared by repositories and index setup
ENQUIRIES = "enquiries"
CATALOGS = "catalogs"
USERS = "users"
PARTNER_PROFILES = "partnerProfiles"
CUSTOMERS = "customers"
PAYABLES = "payables"
RECEIVABLES = "receivables"
PAYMENT_HISTORY = "paymentHistory"
WALLET = "wallet"

T = TypeVar("T")

_mongo_client: AsyncIOMotorClient | None = None
_mongo_db: AsyncIOMotorDatabase | None = None

async def connect_to_mongo():
    """Establishes connection to MongoDB using settings."""
    global _mongo_client, _mongo_db
    if _mongo_client is not None and _mongo_db is not None:
        logger.debug("MongoDB connection already established.")
        return
    try:
        mongo_uri = settings.MONGODB_URI
        db_name = settings.MONGO_DB_NAME

        if not db_name:
            logger.critical("FATAL: MONGO_DB_NAME could not be determined.")
            raise RuntimeError("MONGO_DB_NAME must be set or derivable from MONGODB_URI.")

        host = mongo_uri.split('@')[-1] if '@' in mongo_uri else mongo_uri.split('//')[-1]
        logger.info(f"Connecting to MongoDB: {host.split('/')[0]} / DB: {db_name}")

        _mongo_client = AsyncIOMotorClient(
            mongo_uri,
            serverSelectionTimeoutMS=5000,
            uuidRepresentation='standard',
        )
        _mongo_db = _mongo_client[db_name]
        await _mongo_client.admin.command('ping')
        logger.success(f"Connected to MongoDB database '{db_name}' successfully.")

    except Exception as e:
        logger.critical(f"FATAL: Failed to connect to MongoDB: {e}")
        _mongo_client = None
        _mongo_db = None
        raise RuntimeError(f"Failed to connect to MongoDB: {e}") from e

async def close_mongo_connection():
    """Closes the MongoDB client connection."""
    global _mongo_client, _mongo_db
    if _mongo_client:
        logger.info("Closing MongoDB connection...")
        try:
            _mongo_client.close()
            logger.info("MongoDB connection closed.")
        except Exception as e:
            logger.error(f"Error closing MongoDB connection: {e}")
        finally:
            _mongo_client = None
            _mongo_db = None

def get_database() -> AsyncIOMotorDatabase:
    """Provides the singleton database instance. Raises RuntimeError if not connected."""
    if _mongo_db is None:
        logger.error("Database instance is not available.")
        raise RuntimeError("Database not connected. Ensure connect_to_mongo() was called successfully.")
    return _mongo_db

async def run_in_transaction(client: AsyncIOMotorClient, callback: Callable[[AsyncIOMotorClientSession], Awaitable[T]]) -> T:
    """Runs `callback(session)` in a multi-document transaction.

    The driver commits atomically and re-runs the callback on transient
    errors (write conflicts), so the callback must do its reads again on
    every attempt. Any other exception aborts with no writes applied.
    """
    async with await client.start_session() as session:
        return await session.with_transaction(callback)

async def ensure_indexes(db: AsyncIOMotorDatabase):
    """Creates the indexes the services rely on."""
    logger.info("Ensuring database indexes...")
    # Enquiries
    await db[ENQUIRIES].create_index("submitted_by.id")
    await db[ENQUIRIES].create_index("seller_id", sparse=True)
    await db[ENQUIRIES].create_index([("created_at", DESCENDING)])
    # Customers: unique email is what makes settlement-time dedup race free
    await db[CUSTOMERS].create_index([("email", ASCENDING)], unique=True)
    # Ledger
    await db[PAYABLES].create_index("status")
    await db[PAYABLES].create_index("recipient_id")
    await db[RECEIVABLES].create_index([("partner_id", ASCENDING), ("status", ASCENDING)])
    # Audit Logs
    if settings.AUDIT_LOG_ENABLED:
        audit = db[settings.AUDIT_LOG_MONGO_COLLECTION]
        await audit.create_index("timestamp")
        await audit.create_index("actor_id")
        await audit.create_index("action")
    logger.info("Database indexes checked/created.")
