from motor.motor_asyncio import AsyncIOMotorClient

from app.config import Settings

# ==============================
# MongoDB Connection
# ==============================

USERS = "users"
DELIVERIES = "deliveries"
SELLERS = "sellers"


class Database:
    """Owns the motor client. The client connects lazily on first operation."""

    def __init__(self, settings: Settings):
        self.client = AsyncIOMotorClient(settings.mongo_uri)
        self.db = self.client[settings.mongo_db_name]

    def get_db(self):
        return self.db

    def close(self) -> None:
        self.client.close()


# ==============================
# DOCUMENT SHAPES
# ==============================

"""
users:       name, email, passwordHash, role, resetOtp?, otpExpire?, createdAt
deliveries:  name, email, passwordHash, phone, isAvailable, createdAt
sellers:     userId, name, email, restaurantName, station, isActive, isApproved, createdAt

Emails are stored lower-cased and trimmed; each collection has a unique email index.
A user carries at most one outstanding reset ticket (resetOtp + otpExpire).
"""
