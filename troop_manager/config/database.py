# troop_manager/config/database.py
from pymongo import ASCENDING, MongoClient
from pymongo.database import Database
from pymongo.errors import ConnectionFailure, ServerSelectionTimeoutError
from loguru import logger

from .settings import settings

USERS = "users"
TROOPS = "troops"
USER_TROOP_ROLES = "user_troop_roles"
SCOUTS = "scouts"
RANK_ADVANCEMENTS = "rank_advancements"
MERIT_BADGES = "merit_badges"
SCOUT_MERIT_BADGES = "scout_merit_badges"

DEFAULT_MERIT_BADGES = [
    {"name": "Camping", "description": "Learn outdoor camping skills", "category": "Outdoor"},
    {"name": "First Aid", "description": "Learn basic first aid and emergency response", "category": "Safety"},
    {"name": "Swimming", "description": "Learn swimming and water safety", "category": "Sports"},
    {"name": "Cooking", "description": "Learn cooking and meal preparation", "category": "Life Skills"},
    {"name": "Citizenship in the Community", "description": "Learn about civic responsibility", "category": "Citizenship"},
    {"name": "Environmental Science", "description": "Learn about environmental conservation", "category": "Science"},
    {"name": "Personal Fitness", "description": "Learn about physical fitness and health", "category": "Health"},
    {"name": "Communication", "description": "Learn effective communication skills", "category": "Life Skills"},
    {"name": "Family Life", "description": "Learn about family relationships and responsibilities", "category": "Life Skills"},
    {"name": "Personal Management", "description": "Learn personal financial management", "category": "Life Skills"},
]


class DatabaseConnection:
    """MongoDB connection manager"""

    def __init__(self):
        self._client = None
        self._db = None

    def connect(self):
        """Establish database connection"""
        try:
            self._client = MongoClient(
                settings.MONGODB_URI,
                serverSelectionTimeoutMS=settings.MONGODB_TIMEOUT_MS,
                connectTimeoutMS=settings.MONGODB_TIMEOUT_MS,
                maxPoolSize=50,
                minPoolSize=5,
                uuidRepresentation="standard"
            )

            self._client.admin.command('ping')
            self._db = self._client[settings.DATABASE_NAME]

            logger.info(f"Connected to MongoDB: {settings.DATABASE_NAME}")
            return True

        except (ConnectionFailure, ServerSelectionTimeoutError) as e:
            logger.error(f"Failed to connect to MongoDB: {e}")
            return False

    def disconnect(self):
        """Close database connection"""
        if self._client is not None:
            self._client.close()
            self._client = None
            self._db = None
            logger.info("Disconnected from MongoDB")

    def get_database(self) -> Database:
        """Get database instance"""
        if self._db is None and not self.connect():
            raise RuntimeError("Database connection unavailable")
        return self._db

    def health_check(self) -> bool:
        """Check database health"""
        try:
            if self._client is None:
                return False
            self._client.admin.command('ping')
            return True
        except Exception as e:
            logger.warning(f"MongoDB health check failed: {e}")
            return False


def ensure_indexes(db: Database) -> None:
    """Create the unique indexes the services rely on"""
    db[USERS].create_index([("id", ASCENDING)], unique=True)
    db[USERS].create_index([("email", ASCENDING)], unique=True)
    db[USERS].create_index([("provider", ASCENDING), ("provider_id", ASCENDING)])
    db[TROOPS].create_index([("id", ASCENDING)], unique=True)
    db[USER_TROOP_ROLES].create_index(
        [("user_id", ASCENDING), ("troop_id", ASCENDING), ("role", ASCENDING)],
        unique=True
    )
    db[SCOUTS].create_index([("id", ASCENDING)], unique=True)
    db[SCOUTS].create_index([("troop_id", ASCENDING)])
    db[RANK_ADVANCEMENTS].create_index([("scout_id", ASCENDING)])
    db[MERIT_BADGES].create_index([("name", ASCENDING)], unique=True)
    db[SCOUT_MERIT_BADGES].create_index(
        [("scout_id", ASCENDING), ("badge_id", ASCENDING)],
        unique=True
    )
    logger.info("MongoDB indexes ensured")


# Global connection
db_connection = DatabaseConnection()

def get_database() -> Database:
    """Dependency to get database instance"""
    return db_connection.get_database()