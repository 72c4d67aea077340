# 📄 File: gardenview/modules/garden_management/domain/repositories/garden_gateway.py
# 🧭 Purpose (Layman Explanation):
# Defines the contract for how garden data (plants, logs, garden areas, notebook,
# social feed, profile settings) is read from and written to the cloud database.
# 🧪 Purpose (Technical Summary):
# Gateway interface: one async method per (entity, operation) pair returning
# Result values. No retries and no business policy; failures carry the backend code.
# 🔗 Dependencies:
# Domain models, gardenview.shared.core.result, typing, abc
# 🔄 Connected Modules / Calls From:
# SupabaseGardenGateway (implementation), controller handlers, test fakes

from abc import ABC, abstractmethod
from typing import Any, Dict, List

from gardenview.shared.core.result import Result
from ..models import (
    GardenArea,
    LogEntry,
    NotebookEntry,
    Plant,
    SocialComment,
    SocialPost,
    SessionUser,
    UserProfile,
)


class GardenGateway(ABC):
    """
    Repository interface for the hosted garden backend.

    Implementation Notes:
    - Concrete implementations are in the infrastructure layer
    - Read methods return domain entities, not raw rows
    - Write methods take plain row dictionaries (snake_case column names)
    - Every method issues exactly one request and never retries
    - Failures are returned as Result.failure(BackendError) with the backend code;
      nothing is raised for backend-side errors
    """

    # ===== PLANTS =====

    @abstractmethod
    async def list_plants(self, owner_id: str) -> Result[List[Plant]]:
        """
        List the owner's plants with their embedded logs, newest first.

        Args:
            owner_id: Owner user ID

        Returns:
            Result with plants ordered by creation time descending
        """
        pass

    @abstractmethod
    async def insert_plant(self, row: Dict[str, Any]) -> Result[Plant]:
        """
        Insert a plant row.

        Args:
            row: Column values (owner_id, name, image_url, sequence_number, ...)

        Returns:
            Result with the persisted Plant
        """
        pass

    @abstractmethod
    async def update_plant(self, plant_id: str, patch: Dict[str, Any]) -> Result[None]:
        """Update columns of one plant."""
        pass

    @abstractmethod
    async def delete_plant(self, plant_id: str) -> Result[None]:
        """Delete one plant row."""
        pass

    # ===== LOGS =====

    @abstractmethod
    async def list_garden_logs(self, owner_id: str) -> Result[List[LogEntry]]:
        """
        List the owner's GARDEN-type logs, newest log date first.

        Plant logs arrive embedded in list_plants().
        """
        pass

    @abstractmethod
    async def insert_log(self, row: Dict[str, Any]) -> Result[LogEntry]:
        """Insert a plant or garden log row."""
        pass

    @abstractmethod
    async def update_log(self, log_id: str, patch: Dict[str, Any]) -> Result[None]:
        """Update columns of one log."""
        pass

    @abstractmethod
    async def delete_log(self, log_id: str) -> Result[None]:
        """Delete one log row."""
        pass

    # ===== GARDEN AREAS =====

    @abstractmethod
    async def list_gardens(self, owner_id: str) -> Result[List[GardenArea]]:
        """List the owner's garden areas."""
        pass

    @abstractmethod
    async def insert_garden(self, row: Dict[str, Any]) -> Result[GardenArea]:
        """Insert a garden area row."""
        pass

    @abstractmethod
    async def delete_garden(self, garden_id: str) -> Result[None]:
        """Delete one garden area row."""
        pass

    # ===== NOTEBOOK =====

    @abstractmethod
    async def list_notebook_entries(self, owner_id: str) -> Result[List[NotebookEntry]]:
        """List the owner's notebook notes and tasks."""
        pass

    @abstractmethod
    async def insert_notebook_entries(self, rows: List[Dict[str, Any]]) -> Result[List[NotebookEntry]]:
        """Insert one or more notebook rows in a single request."""
        pass

    @abstractmethod
    async def update_notebook_entry(self, entry_id: str, patch: Dict[str, Any]) -> Result[None]:
        """Update columns of one notebook entry."""
        pass

    @abstractmethod
    async def delete_notebook_entries(self, entry_ids: List[str]) -> Result[None]:
        """Delete several notebook rows by id in a single request."""
        pass

    # ===== SOCIAL =====

    @abstractmethod
    async def list_social_posts(self, offset: int, count: int, viewer_id: str) -> Result[List[SocialPost]]:
        """
        Read one page of the social feed, newest first.

        Args:
            offset: Index of the first post
            count: Page size
            viewer_id: Signed-in user, used to compute is_liked

        Returns:
            Result with up to ``count`` posts including likes and comments
        """
        pass

    @abstractmethod
    async def insert_social_post(self, row: Dict[str, Any]) -> Result[None]:
        """Share a moment to the social feed."""
        pass

    @abstractmethod
    async def insert_like(self, post_id: str, user_id: str) -> Result[None]:
        """Like a post."""
        pass

    @abstractmethod
    async def delete_like(self, post_id: str, user_id: str) -> Result[None]:
        """Remove the user's like from a post."""
        pass

    @abstractmethod
    async def insert_comment(self, post_id: str, user_id: str, text: str) -> Result[SocialComment]:
        """Comment on a post; returns the persisted comment with its author name."""
        pass

    # ===== PROFILE =====

    @abstractmethod
    async def get_profile(self, user_id: str) -> Result[UserProfile]:
        """
        Read the user's profile (approval status and remote settings).

        A missing row is a failure carrying NotFoundError.
        """
        pass

    @abstractmethod
    async def create_profile(self, user: SessionUser) -> Result[UserProfile]:
        """Create the pending profile for a signed-in user that has none yet."""
        pass

    @abstractmethod
    async def upsert_profile_settings(self, user_id: str, settings: Dict[str, Any]) -> Result[None]:
        """
        Write the full settings object (home location included) to the profile.

        Together with upsert_ai_usage, the only upserts in the gateway vocabulary.
        """
        pass

    @abstractmethod
    async def upsert_ai_usage(self, user_id: str, usage: Dict[str, Any]) -> Result[None]:
        """Write the user's AI usage for ``usage['day']`` (one row per user and day)."""
        pass
