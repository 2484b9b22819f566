from motor.motor_asyncio import AsyncIOMotorClient
from app.core.config import settings
import logging

logger = logging.getLogger(__name__)

class Database:
    client: AsyncIOMotorClient = None
    db = None

db = Database()

async def connect_to_mongo():
    """Connect to MongoDB."""
    try:
        logger.info("Connecting to MongoDB...")
        db.client = AsyncIOMotorClient(settings.MONGO_URI)
        db.db = db.client[settings.DB_NAME]
        logger.info("Connected to MongoDB.")

        # Create indexes for collections
        await create_indexes()

    except Exception as e:
        logger.error(f"Could not connect to MongoDB: {e}")
        raise e

async def close_mongo_connection():
    """Close MongoDB connection."""
    if db.client:
        logger.info("Closing MongoDB connection...")
        db.client.close()
        logger.info("MongoDB connection closed.")

async def get_database():
    """Get MongoDB database instance."""
    return db.db

async def create_indexes():
    """Create indexes for collections."""
    try:
        # Users collection indexes
        await db.db.users.create_index("email", unique=True)

        # Studios collection indexes
        await db.db.studios.create_index("slug", unique=True)
        await db.db.studios.create_index("ownerId", unique=True)
        await db.db.studios.create_index([("verified", 1), ("rating", -1)])

        # Artists collection indexes
        await db.db.artists.create_index("studioId")

        # Bookings collection indexes
        await db.db.bookings.create_index("customerId")
        await db.db.bookings.create_index([("studioId", 1), ("status", 1)])
        await db.db.bookings.create_index([("artistId", 1), ("date", 1)])

        # Reviews collection indexes
        await db.db.reviews.create_index("studioId")
        await db.db.reviews.create_index("bookingId", unique=True)

        # Conversations collection indexes
        await db.db.conversations.create_index(
            [("customerId", 1), ("studioId", 1)],
            unique=True
        )
        await db.db.conversations.create_index("updatedAt")

        # Messages collection indexes
        await db.db.messages.create_index([("conversationId", 1), ("createdAt", 1)])

        # Contact requests collection indexes
        await db.db.contact_requests.create_index([("studioId", 1), ("createdAt", -1)])

        logger.info("MongoDB indexes created successfully.")
    except Exception as e:
        logger.error(f"Failed to create MongoDB indexes: {e}")
