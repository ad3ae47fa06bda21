"""Profile service for the single local user."""

import logging
from dataclasses import dataclass, field, replace
from uuid import uuid4

from pantry_coach.domain.models import OperationResult
from pantry_coach.domain.profile import DietaryGoal, DietType, UserProfile
from pantry_coach.services.storage import (
    PROFILE_KEY,
    KeyValueStore,
    StorageError,
    decode_profile,
    encode_profile,
)

_logger = logging.getLogger(__name__)


@dataclass
class ProfileService:
    """Loads, saves, and updates the user profile."""

    store: KeyValueStore
    last_error: str | None = field(default=None, init=False)

    def get_profile(self) -> UserProfile | None:
        """Return the stored profile, or None when absent or unreadable."""
        try:
            raw = self.store.load(PROFILE_KEY)
            profile = decode_profile(raw) if raw is not None else None
        except StorageError:
            _logger.exception("Failed to load profile")
            self.last_error = "Failed to load profile from storage"
            return None
        self.last_error = None
        return profile

    def has_profile(self) -> bool:
        """Return True when a readable profile exists."""
        return self.get_profile() is not None

    def save_profile(self, profile: UserProfile) -> OperationResult:
        """Persist a profile."""
        try:
            self.store.save(PROFILE_KEY, encode_profile(profile))
        except StorageError:
            _logger.exception("Failed to save profile")
            self.last_error = "Failed to save profile to storage"
            return OperationResult(success=False, message=self.last_error)
        self.last_error = None
        return OperationResult(success=True, count=1)

    def init_profile(
        self,
        diet_type: DietType,
        goals: tuple[DietaryGoal, ...] = ("weight-maintenance",),
    ) -> UserProfile:
        """Create and persist a fresh profile with default preferences."""
        profile = UserProfile(
            user_id=f"user_{uuid4().hex}",
            diet_type=diet_type,
            dietary_goals=tuple(goals),
        )
        self.save_profile(profile)
        return profile

    def update_profile(self, **changes: object) -> UserProfile | None:
        """Apply field changes to the stored profile; no-op without one."""
        current = self.get_profile()
        if current is None:
            return None
        updated = replace(current, **changes)
        self.save_profile(updated)
        return updated

    def clear_profile(self) -> OperationResult:
        """Remove the stored profile so the next run starts fresh."""
        try:
            self.store.remove(PROFILE_KEY)
        except StorageError:
            _logger.exception("Failed to clear profile")
            self.last_error = "Failed to clear profile from storage"
            return OperationResult(success=False, message=self.last_error)
        self.last_error = None
        return OperationResult(success=True)
