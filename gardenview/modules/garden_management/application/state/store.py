# 📄 File: gardenview/modules/garden_management/application/state/store.py
# 🧭 Purpose (Layman Explanation):
# The app's memory of everything on screen: your plants, logs, garden areas, notes
# and feed posts, which one is selected, who is signed in and which tab is open.
#
# 🧪 Purpose (Technical Summary):
# Explicit in-memory state container with keyed entity collections, selections,
# session/UI flags and derived views. Mutated only by controller handlers; views
# read it. Enforces the pin cap and the archived filter, and counts image
# references for reference-aware deletion.
#
# 🔗 Dependencies:
# - Domain models (Plant, LogEntry, GardenArea, NotebookEntry, SocialPost, ...)
# - gardenview.shared.core.exceptions (NotFoundError)
#
# 🔄 Connected Modules / Calls From:
# - GardenController (owner) and its handlers (single writer)
# - ViewStateMachine (data requirements for navigation)

from datetime import timezone
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple

from pydantic import BaseModel

from gardenview.shared.core.exceptions import NotFoundError
from ...domain.models import (
    GardenArea,
    LogEntry,
    NotebookEntry,
    Plant,
    ProfileStatus,
    SessionUser,
    SocialPost,
    UserProfile,
    UserSettings,
    WeatherSnapshot,
)
from ...domain.models.plant import MAX_PINS_PER_AREA


class EntityKind(str, Enum):
    """Keyed collections held by the store"""
    PLANTS = "plants"
    GARDEN_LOGS = "garden_logs"
    GARDEN_AREAS = "garden_areas"
    NOTEBOOK = "notebook_entries"
    SOCIAL_POSTS = "social_posts"


class DashboardTab(str, Enum):
    PLANTS = "PLANTS"
    GARDEN_LOGS = "GARDEN_LOGS"
    GARDEN_VIEW = "GARDEN_VIEW"
    WORLD = "WORLD"
    NOTEBOOK = "NOTEBOOK"
    EXTRAS = "EXTRAS"


# Tab -> ModuleToggles attribute that must be on for the tab to show.
TAB_MODULES = {
    DashboardTab.GARDEN_LOGS: "garden_logs",
    DashboardTab.GARDEN_VIEW: "garden_view",
    DashboardTab.WORLD: "social",
    DashboardTab.NOTEBOOK: "notebook",
}


def _added_key(plant: Plant):
    added = plant.date_added
    if added is None:
        return 0.0
    if added.tzinfo is None:
        added = added.replace(tzinfo=timezone.utc)
    return added.timestamp()


class GardenStore:
    """
    Single source of truth for the signed-in session.

    Collections keep server order (insertion order of ``replace_all``); derived
    views apply their own sorting.
    """

    def __init__(self, max_pins_per_area: int = MAX_PINS_PER_AREA):
        self.max_pins_per_area = max_pins_per_area
        self._collections: Dict[EntityKind, Dict[str, BaseModel]] = {kind: {} for kind in EntityKind}
        self._reset_session_state()

    def _reset_session_state(self):
        # Selection
        self.selected_plant_id: Optional[str] = None
        self.selected_log_id: Optional[str] = None
        self.selected_garden_log_id: Optional[str] = None
        self.selected_area_id: Optional[str] = None
        self.selected_post_id: Optional[str] = None

        # Session
        self.session_user: Optional[SessionUser] = None
        self.profile: Optional[UserProfile] = None
        self.profile_status: Optional[ProfileStatus] = None
        self.settings: UserSettings = UserSettings()
        self.weather: Optional[WeatherSnapshot] = None
        self.setup_required = False

        # Feed pagination
        self.social_page = 0
        self.social_has_more = True

        # UI
        self.dashboard_tab = DashboardTab.PLANTS
        self.show_archived = False
        self.toast: Optional[str] = None
        self.chat_docked = False
        self.chat_width: Optional[int] = None

        # Busy flags
        self.is_loading = False
        self.is_validating_image = False

    # ===== COLLECTIONS =====

    def replace_all(self, kind: EntityKind, items: Iterable[BaseModel]) -> None:
        self._collections[kind] = {item.id: item for item in items}

    def upsert(self, kind: EntityKind, item: BaseModel) -> None:
        self._collections[kind][item.id] = item

    def remove(self, kind: EntityKind, item_id: str) -> Optional[BaseModel]:
        return self._collections[kind].pop(item_id, None)

    def get(self, kind: EntityKind, item_id: Optional[str]) -> Optional[BaseModel]:
        if item_id is None:
            return None
        return self._collections[kind].get(item_id)

    def items(self, kind: EntityKind) -> List[BaseModel]:
        return list(self._collections[kind].values())

    def clear(self) -> None:
        """Forget everything (sign-out)."""
        for kind in EntityKind:
            self._collections[kind] = {}
        self._reset_session_state()

    @property
    def plants(self) -> List[Plant]:
        return self.items(EntityKind.PLANTS)

    @property
    def garden_logs(self) -> List[LogEntry]:
        return self.items(EntityKind.GARDEN_LOGS)

    @property
    def garden_areas(self) -> List[GardenArea]:
        return self.items(EntityKind.GARDEN_AREAS)

    @property
    def notebook_entries(self) -> List[NotebookEntry]:
        return self.items(EntityKind.NOTEBOOK)

    @property
    def social_posts(self) -> List[SocialPost]:
        return self.items(EntityKind.SOCIAL_POSTS)

    def append_social_page(self, posts: List[SocialPost], page: int, reset: bool, page_size: int) -> None:
        """Store one feed page; page 0 with ``reset`` replaces the feed."""
        if reset:
            self.replace_all(EntityKind.SOCIAL_POSTS, posts)
        else:
            for post in posts:
                self.upsert(EntityKind.SOCIAL_POSTS, post)
        self.social_page = page
        self.social_has_more = len(posts) == page_size

    # ===== DERIVED VIEWS =====

    def dashboard_plants(self) -> List[Plant]:
        """Plants for the dashboard grid, newest first; archived ones only when requested."""
        plants = [plant for plant in self.plants if self.show_archived or plant.is_active]
        return sorted(plants, key=_added_key, reverse=True)

    def sorted_garden_logs(self) -> List[LogEntry]:
        return sorted(self.garden_logs, key=lambda log: log.log_date, reverse=True)

    def notebook_timeline(self) -> List[NotebookEntry]:
        """Notes and tasks in calendar order."""
        return sorted(self.notebook_entries, key=lambda entry: (entry.date, entry.title))

    def plants_in_area(self, area_id: str) -> List[Plant]:
        return [plant for plant in self.plants if plant.pins_in_area(area_id)]

    def selected_plant(self) -> Optional[Plant]:
        return self.get(EntityKind.PLANTS, self.selected_plant_id)

    def selected_log(self) -> Optional[LogEntry]:
        plant = self.selected_plant()
        if plant is None or self.selected_log_id is None:
            return None
        return plant.log_by_id(self.selected_log_id)

    def selected_garden_log(self) -> Optional[LogEntry]:
        return self.get(EntityKind.GARDEN_LOGS, self.selected_garden_log_id)

    def selected_area(self) -> Optional[GardenArea]:
        return self.get(EntityKind.GARDEN_AREAS, self.selected_area_id)

    def selected_post(self) -> Optional[SocialPost]:
        return self.get(EntityKind.SOCIAL_POSTS, self.selected_post_id)

    def find_plant_log(self, log_id: str) -> Tuple[Optional[Plant], Optional[LogEntry]]:
        """Locate a plant log and its owning plant."""
        for plant in self.plants:
            log = plant.log_by_id(log_id)
            if log is not None:
                return plant, log
        return None, None

    def _step_plant(self, step: int) -> Optional[str]:
        plants = self.dashboard_plants()
        if not plants:
            return None
        ids = [plant.id for plant in plants]
        if self.selected_plant_id not in ids:
            return ids[0]
        index = ids.index(self.selected_plant_id)
        return ids[(index + step) % len(ids)]

    def next_plant_id(self) -> Optional[str]:
        return self._step_plant(1)

    def previous_plant_id(self) -> Optional[str]:
        return self._step_plant(-1)

    def is_tab_visible(self, tab: DashboardTab) -> bool:
        module = TAB_MODULES.get(tab)
        return module is None or getattr(self.settings.modules, module)

    def effective_dashboard_tab(self) -> DashboardTab:
        """The open tab, or PLANTS when its module has been switched off."""
        if self.is_tab_visible(self.dashboard_tab):
            return self.dashboard_tab
        return DashboardTab.PLANTS

    # ===== INVARIANTS =====

    def _require_plant(self, plant_id: str) -> Plant:
        plant = self.get(EntityKind.PLANTS, plant_id)
        if plant is None:
            raise NotFoundError("Plant not found", resource_type="plant", resource_id=plant_id)
        return plant

    def place_pin(self, plant_id: str, area_id: str, x: float, y: float) -> Tuple[Plant, Plant]:
        """
        Add a pin to a plant in the store.

        Returns:
            (previous, updated) plants, so the caller can roll back

        Raises:
            NotFoundError: Unknown plant
            BusinessRuleViolationError: The area already holds the maximum pins
        """
        previous = self._require_plant(plant_id)
        updated = previous.with_pin(area_id, x, y, self.max_pins_per_area)
        self.upsert(EntityKind.PLANTS, updated)
        return previous, updated

    def remove_area_pins(self, plant_id: str, area_id: str) -> Tuple[Plant, Plant]:
        previous = self._require_plant(plant_id)
        updated = previous.without_area_pins(area_id)
        self.upsert(EntityKind.PLANTS, updated)
        return previous, updated

    def image_reference_count(self, ref: Optional[str]) -> int:
        """Number of entities whose stored image is ``ref``."""
        if not ref:
            return 0
        count = 0
        for plant in self.plants:
            count += sum(1 for image in plant.image_refs() if image == ref)
        for kind in (EntityKind.GARDEN_LOGS, EntityKind.GARDEN_AREAS, EntityKind.NOTEBOOK, EntityKind.SOCIAL_POSTS):
            count += sum(1 for item in self.items(kind) if getattr(item, "image_ref", None) == ref)
        return count


__all__ = ["DashboardTab", "EntityKind", "GardenStore", "TAB_MODULES"]
