# 📄 File: gardenview/modules/garden_management/infrastructure/database/supabase_gateway.py
# 🧭 Purpose (Layman Explanation):
# Does the actual reading and writing of plants, logs, garden areas, notes, social
# posts and profiles in the Supabase database.
#
# 🧪 Purpose (Technical Summary):
# Concrete GardenGateway on the supabase-py AsyncClient (PostgREST). One request
# per method, no retries. PostgREST errors become Result.failure(BackendError) with
# the Postgres/PostgREST code so callers can tell missing tables from outages.
#
# 🔗 Dependencies:
# - supabase: AsyncClient, PostgrestAPIError
# - gardenview.shared.config.supabase (client manager)
# - mappers.py (row <-> domain)
#
# 🔄 Connected Modules / Calls From:
# - GardenController composition
# - All controller handlers through the GardenGateway contract

"""
Supabase Garden Gateway

Tables:
- plants (embedded logs via ``logs(*)``)
- logs (PLANT and GARDEN journal entries)
- gardens
- notebook_entries
- social_posts, social_likes, social_comments
- profiles
- user_usage (daily AI usage per user)
"""

from typing import Any, Callable, Dict, List, Optional

from supabase import PostgrestAPIError

from gardenview.shared.config.supabase import SupabaseManager, get_supabase_manager
from gardenview.shared.core.exceptions import BackendError, GardenViewException, NotFoundError
from gardenview.shared.core.result import Result
from gardenview.shared.utils.logging import get_logger
from ...domain.models import (
    GardenArea,
    LogEntry,
    LogType,
    NotebookEntry,
    Plant,
    ProfileStatus,
    SessionUser,
    SocialComment,
    SocialPost,
    UserProfile,
)
from ...domain.repositories.garden_gateway import GardenGateway
from .mappers import (
    _row_to_comment,
    _row_to_garden,
    _row_to_log,
    _row_to_notebook_entry,
    _row_to_plant,
    _row_to_post,
    _row_to_profile,
)

logger = get_logger(__name__)

SOCIAL_FEED_SELECT = (
    "*, profiles(display_name), social_likes(user_id), "
    "social_comments(id, user_id, text, created_at, profiles(display_name))"
)


class SupabaseGardenGateway(GardenGateway):
    """
    Supabase implementation of the GardenGateway interface.
    """

    def __init__(self, manager: Optional[SupabaseManager] = None):
        self.manager = manager or get_supabase_manager()

    async def _execute(self, operation: str, table: str, build: Callable[[Any], Any]) -> Result[Any]:
        """
        Run one PostgREST request.

        Args:
            operation: Name used in logs and error details
            table: Table the request starts from
            build: Turns the table query builder into the final request

        Returns:
            Result with the response rows (None for an empty maybe-single read)
        """
        try:
            client = await self.manager.get_client()
            response = await build(client.table(table)).execute()
        except PostgrestAPIError as e:
            error = BackendError(
                e.message or f"{operation} failed",
                code=e.code,
                operation=operation,
                table=table,
            )
            if error.is_missing_schema:
                logger.warning(f"Table or column missing for {operation}: {e.message}", code=e.code)
            else:
                logger.error(f"Database error during {operation}: {e.message}", code=e.code, table=table)
            return Result.failure(error)
        except GardenViewException as e:
            logger.error(f"Backend unavailable for {operation}: {e.message}")
            return Result.failure(BackendError(e.message, operation=operation, table=table))
        except Exception as e:
            logger.error(f"Request failed during {operation}: {e}", table=table)
            return Result.failure(BackendError(f"{operation} failed: {e}", operation=operation, table=table))

        return Result.success(response.data if response is not None else None)

    @staticmethod
    def _first(rows: Any) -> Optional[Dict[str, Any]]:
        if isinstance(rows, list):
            return rows[0] if rows else None
        return rows

    def _single(self, result: Result[Any], mapper: Callable, operation: str, table: str) -> Result[Any]:
        if not result.ok:
            return result
        row = self._first(result.value)
        if row is None:
            return Result.failure(BackendError(f"{operation} returned no row", operation=operation, table=table))
        return Result.success(mapper(row))

    # ===== PLANTS =====

    async def list_plants(self, owner_id: str) -> Result[List[Plant]]:
        result = await self._execute(
            "list_plants", "plants",
            lambda q: q.select("*, logs(*)").eq("owner_id", owner_id).order("created_at", desc=True),
        )
        return result.map(lambda rows: [_row_to_plant(row) for row in rows or []])

    async def insert_plant(self, row: Dict[str, Any]) -> Result[Plant]:
        result = await self._execute("insert_plant", "plants", lambda q: q.insert(row))
        return self._single(result, _row_to_plant, "insert_plant", "plants")

    async def update_plant(self, plant_id: str, patch: Dict[str, Any]) -> Result[None]:
        result = await self._execute("update_plant", "plants", lambda q: q.update(patch).eq("id", plant_id))
        return result.map(lambda _: None)

    async def delete_plant(self, plant_id: str) -> Result[None]:
        result = await self._execute("delete_plant", "plants", lambda q: q.delete().eq("id", plant_id))
        return result.map(lambda _: None)

    # ===== LOGS =====

    async def list_garden_logs(self, owner_id: str) -> Result[List[LogEntry]]:
        result = await self._execute(
            "list_garden_logs", "logs",
            lambda q: q.select("*")
            .eq("owner_id", owner_id)
            .eq("type", LogType.GARDEN.value)
            .order("log_date", desc=True),
        )
        return result.map(lambda rows: [_row_to_log(row) for row in rows or []])

    async def insert_log(self, row: Dict[str, Any]) -> Result[LogEntry]:
        result = await self._execute("insert_log", "logs", lambda q: q.insert(row))
        return self._single(result, _row_to_log, "insert_log", "logs")

    async def update_log(self, log_id: str, patch: Dict[str, Any]) -> Result[None]:
        result = await self._execute("update_log", "logs", lambda q: q.update(patch).eq("id", log_id))
        return result.map(lambda _: None)

    async def delete_log(self, log_id: str) -> Result[None]:
        result = await self._execute("delete_log", "logs", lambda q: q.delete().eq("id", log_id))
        return result.map(lambda _: None)

    # ===== GARDEN AREAS =====

    async def list_gardens(self, owner_id: str) -> Result[List[GardenArea]]:
        result = await self._execute(
            "list_gardens", "gardens",
            lambda q: q.select("*").eq("owner_id", owner_id).order("created_at"),
        )
        return result.map(lambda rows: [_row_to_garden(row) for row in rows or []])

    async def insert_garden(self, row: Dict[str, Any]) -> Result[GardenArea]:
        result = await self._execute("insert_garden", "gardens", lambda q: q.insert(row))
        return self._single(result, _row_to_garden, "insert_garden", "gardens")

    async def delete_garden(self, garden_id: str) -> Result[None]:
        result = await self._execute("delete_garden", "gardens", lambda q: q.delete().eq("id", garden_id))
        return result.map(lambda _: None)

    # ===== NOTEBOOK =====

    async def list_notebook_entries(self, owner_id: str) -> Result[List[NotebookEntry]]:
        result = await self._execute(
            "list_notebook_entries", "notebook_entries",
            lambda q: q.select("*").eq("owner_id", owner_id),
        )
        return result.map(lambda rows: [_row_to_notebook_entry(row) for row in rows or []])

    async def insert_notebook_entries(self, rows: List[Dict[str, Any]]) -> Result[List[NotebookEntry]]:
        if not rows:
            return Result.success([])
        result = await self._execute("insert_notebook_entries", "notebook_entries", lambda q: q.insert(rows))
        return result.map(lambda data: [_row_to_notebook_entry(row) for row in data or []])

    async def update_notebook_entry(self, entry_id: str, patch: Dict[str, Any]) -> Result[None]:
        result = await self._execute(
            "update_notebook_entry", "notebook_entries",
            lambda q: q.update(patch).eq("id", entry_id),
        )
        return result.map(lambda _: None)

    async def delete_notebook_entries(self, entry_ids: List[str]) -> Result[None]:
        if not entry_ids:
            return Result.success()
        result = await self._execute(
            "delete_notebook_entries", "notebook_entries",
            lambda q: q.delete().in_("id", list(entry_ids)),
        )
        return result.map(lambda _: None)

    # ===== SOCIAL =====

    async def list_social_posts(self, offset: int, count: int, viewer_id: str) -> Result[List[SocialPost]]:
        result = await self._execute(
            "list_social_posts", "social_posts",
            lambda q: q.select(SOCIAL_FEED_SELECT)
            .order("created_at", desc=True)
            .range(offset, offset + count - 1),
        )
        return result.map(lambda rows: [_row_to_post(row, viewer_id) for row in rows or []])

    async def insert_social_post(self, row: Dict[str, Any]) -> Result[None]:
        result = await self._execute("insert_social_post", "social_posts", lambda q: q.insert(row))
        return result.map(lambda _: None)

    async def insert_like(self, post_id: str, user_id: str) -> Result[None]:
        result = await self._execute(
            "insert_like", "social_likes",
            lambda q: q.insert({"post_id": post_id, "user_id": user_id}),
        )
        return result.map(lambda _: None)

    async def delete_like(self, post_id: str, user_id: str) -> Result[None]:
        result = await self._execute(
            "delete_like", "social_likes",
            lambda q: q.delete().eq("post_id", post_id).eq("user_id", user_id),
        )
        return result.map(lambda _: None)

    async def insert_comment(self, post_id: str, user_id: str, text: str) -> Result[SocialComment]:
        # The inserted representation has no embedded profile; the caller fills in the author.
        result = await self._execute(
            "insert_comment", "social_comments",
            lambda q: q.insert({"post_id": post_id, "user_id": user_id, "text": text}),
        )
        return self._single(result, lambda row: _row_to_comment(row, post_id), "insert_comment", "social_comments")

    # ===== PROFILE =====

    async def get_profile(self, user_id: str) -> Result[UserProfile]:
        result = await self._execute(
            "get_profile", "profiles",
            lambda q: q.select("*").eq("id", user_id).maybe_single(),
        )
        if not result.ok:
            return result
        row = self._first(result.value)
        if row is None:
            return Result.failure(NotFoundError("Profile not found", resource_type="profile", resource_id=user_id))
        return Result.success(_row_to_profile(row))

    async def create_profile(self, user: SessionUser) -> Result[UserProfile]:
        display_name = (user.email or "").split("@")[0] or None
        row = {
            "id": user.id,
            "email": user.email,
            "display_name": display_name,
            "status": ProfileStatus.PENDING.value,
        }
        result = await self._execute("create_profile", "profiles", lambda q: q.insert(row))
        return self._single(result, _row_to_profile, "create_profile", "profiles")

    async def upsert_profile_settings(self, user_id: str, settings: Dict[str, Any]) -> Result[None]:
        result = await self._execute(
            "upsert_profile_settings", "profiles",
            lambda q: q.upsert({"id": user_id, "settings": settings}),
        )
        return result.map(lambda _: None)

    async def upsert_ai_usage(self, user_id: str, usage: Dict[str, Any]) -> Result[None]:
        row = {
            "user_id": user_id,
            "period": usage["day"],
            "score": usage["daily_score"],
            "requests": usage["requests"],
            "images_scanned": usage["images_scanned"],
        }
        result = await self._execute(
            "upsert_ai_usage", "user_usage",
            lambda q: q.upsert(row, on_conflict="user_id,period"),
        )
        return result.map(lambda _: None)
