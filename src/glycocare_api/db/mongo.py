"""MongoDB connection management using Motor async driver."""

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase


class MongoDB:
    """
    Process-wide MongoDB client holder.

    One connection pool is opened at startup and shared by every request.
    """

    client: AsyncIOMotorClient | None = None
    _db_name: str = "glycocare_db"

    @classmethod
    def connect(
        cls, uri: str, db_name: str = "glycocare_db", timeout_ms: int = 5000
    ) -> None:
        """
        Open the client. Motor connects lazily on the first operation.

        Args:
            uri: MongoDB connection URI
            db_name: Default database name
            timeout_ms: Server selection timeout in milliseconds
        """
        cls.client = AsyncIOMotorClient(
            uri, tz_aware=True, serverSelectionTimeoutMS=timeout_ms
        )
        cls._db_name = db_name

    @classmethod
    def close(cls) -> None:
        """Close MongoDB connection."""
        if cls.client is not None:
            cls.client.close()
            cls.client = None

    @classmethod
    def get_database(cls, name: str | None = None) -> AsyncIOMotorDatabase:
        """
        Get a database instance.

        Raises:
            RuntimeError: If MongoDB is not connected
        """
        if cls.client is None:
            raise RuntimeError("MongoDB not connected. Call MongoDB.connect() first.")
        return cls.client[name or cls._db_name]

    @classmethod
    def is_connected(cls) -> bool:
        """Check if a client has been opened."""
        return cls.client is not None
