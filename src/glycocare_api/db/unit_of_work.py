"""Unit of Work pattern for managing repository access."""

from motor.motor_asyncio import AsyncIOMotorDatabase

from .repositories import MealRepository, ProfileRepository, VitalsRepository


class UnitOfWork:
    """
    Groups repository access and provides a single injection point for services.

    Usage:
        uow = UnitOfWork(db)
        profile = await uow.profiles.get_profile(user_id)
        await uow.meals.append(record)
    """

    def __init__(self, db: AsyncIOMotorDatabase):
        """
        Initialize Unit of Work with database instance.

        Args:
            db: Motor database instance
        """
        self._db = db
        self._profiles: ProfileRepository | None = None
        self._meals: MealRepository | None = None
        self._vitals: VitalsRepository | None = None

    @property
    def profiles(self) -> ProfileRepository:
        """Profiles repository (lazy loaded)."""
        if self._profiles is None:
            self._profiles = ProfileRepository(self._db["users"])
        return self._profiles

    @property
    def meals(self) -> MealRepository:
        """Meals repository (lazy loaded)."""
        if self._meals is None:
            self._meals = MealRepository(self._db["meals"])
        return self._meals

    @property
    def vitals(self) -> VitalsRepository:
        """Vitals repository (lazy loaded)."""
        if self._vitals is None:
            self._vitals = VitalsRepository(self._db["vitals"])
        return self._vitals
