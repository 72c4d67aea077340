# 📄 File: gardenview/modules/garden_management/application/navigation.py
# 🧭 Purpose (Layman Explanation):
# Decides which screen is showing and which screen you may go to next, so you never
# land on a plant page without a plant or on the dashboard before you are approved.
#
# 🧪 Purpose (Technical Summary):
# Explicit view-state machine: View and Intent enums, a (source, intent) -> target
# transition table, session gating, per-view data requirements checked against the
# GardenStore, and a bounded back stack. Illegal moves raise InvalidTransitionError
# and leave the state untouched.
#
# 🔗 Dependencies:
# - gardenview.shared.core.exceptions (InvalidTransitionError)
# - application.state.store (GardenStore, DashboardTab)
#
# 🔄 Connected Modules / Calls From:
# - GardenController (owner; handlers dispatch data intents after writes)
# - View layer (dispatches user intents)

from collections import deque
from enum import Enum
from typing import Callable, Deque, Dict, Iterable, Optional, Tuple, Union

from gardenview.shared.core.exceptions import InvalidTransitionError
from gardenview.shared.utils.logging import get_logger
from ..domain.models import ProfileStatus
from .state.store import DashboardTab, GardenStore

logger = get_logger(__name__)


class View(str, Enum):
    WELCOME = "WELCOME"
    WAITLIST = "WAITLIST"
    DASHBOARD = "DASHBOARD"
    SETTINGS = "SETTINGS"
    ADD_PLANT_PHOTO = "ADD_PLANT_PHOTO"
    ADD_PLANT_IDENTIFY = "ADD_PLANT_IDENTIFY"
    ADD_PLANT_RESULT = "ADD_PLANT_RESULT"
    ADD_PLANT_DETAILS = "ADD_PLANT_DETAILS"
    PLANT_DETAILS = "PLANT_DETAILS"
    LOG_FORM = "LOG_FORM"
    LOG_DETAILS = "LOG_DETAILS"
    GARDEN_LOG_DETAILS = "GARDEN_LOG_DETAILS"
    SOCIAL_POST_DETAILS = "SOCIAL_POST_DETAILS"
    PHOTO_COLLAGE = "PHOTO_COLLAGE"
    PLANT_ANALYSIS = "PLANT_ANALYSIS"
    PLANT_ADVICE = "PLANT_ADVICE"
    IDENTIFY_CAMERA = "IDENTIFY_CAMERA"
    PROFESSOR = "PROFESSOR"
    PRICING = "PRICING"
    WEATHER_DETAILS = "WEATHER_DETAILS"


class Intent(str, Enum):
    # User intents
    GO_DASHBOARD = "GO_DASHBOARD"
    BACK = "BACK"
    OPEN_SETTINGS = "OPEN_SETTINGS"
    OPEN_ADD_PLANT = "OPEN_ADD_PLANT"
    START_IDENTIFY = "START_IDENTIFY"
    SKIP_IDENTIFY = "SKIP_IDENTIFY"
    IDENTIFY_FOUND = "IDENTIFY_FOUND"
    IDENTIFY_FAILED = "IDENTIFY_FAILED"
    CONFIRM_SUGGESTION = "CONFIRM_SUGGESTION"
    EDIT_PLANT = "EDIT_PLANT"
    OPEN_PLANT_DETAILS = "OPEN_PLANT_DETAILS"
    OPEN_LOG_FORM = "OPEN_LOG_FORM"
    OPEN_LOG_DETAILS = "OPEN_LOG_DETAILS"
    OPEN_GARDEN_LOG_DETAILS = "OPEN_GARDEN_LOG_DETAILS"
    OPEN_POST_DETAILS = "OPEN_POST_DETAILS"
    OPEN_COLLAGE = "OPEN_COLLAGE"
    OPEN_ANALYSIS = "OPEN_ANALYSIS"
    OPEN_ADVICE = "OPEN_ADVICE"
    OPEN_IDENTIFY_CAMERA = "OPEN_IDENTIFY_CAMERA"
    OPEN_PROFESSOR = "OPEN_PROFESSOR"
    OPEN_PRICING = "OPEN_PRICING"
    OPEN_WEATHER_DETAILS = "OPEN_WEATHER_DETAILS"

    # Data intents (dispatched by handlers after a session change or a write)
    SIGNED_OUT = "SIGNED_OUT"
    PROFILE_PENDING = "PROFILE_PENDING"
    PROFILE_APPROVED = "PROFILE_APPROVED"
    PLANT_CREATED = "PLANT_CREATED"
    PLANT_UPDATED = "PLANT_UPDATED"
    PLANT_REMOVED = "PLANT_REMOVED"
    PLANT_ARCHIVED = "PLANT_ARCHIVED"
    LOG_SAVED = "LOG_SAVED"
    LOG_REMOVED = "LOG_REMOVED"
    GARDEN_LOG_SAVED = "GARDEN_LOG_SAVED"
    GARDEN_LOG_REMOVED = "GARDEN_LOG_REMOVED"


ANY = "*"
Source = Union[View, str]

SESSION_INTENTS = frozenset({Intent.SIGNED_OUT, Intent.PROFILE_PENDING, Intent.PROFILE_APPROVED})
DATA_INTENTS = frozenset({
    Intent.PLANT_CREATED,
    Intent.PLANT_UPDATED,
    Intent.PLANT_REMOVED,
    Intent.PLANT_ARCHIVED,
    Intent.LOG_SAVED,
    Intent.LOG_REMOVED,
    Intent.GARDEN_LOG_SAVED,
    Intent.GARDEN_LOG_REMOVED,
})

# Views reachable before approval.
SIGNED_OUT_VIEWS = frozenset({View.WELCOME})
PENDING_VIEWS = frozenset({View.WAITLIST, View.PRICING})

_PLANT_CONTEXT = (
    View.DASHBOARD,
    View.PLANT_DETAILS,
    View.LOG_FORM,
    View.LOG_DETAILS,
    View.PLANT_ANALYSIS,
    View.PROFESSOR,
    View.PHOTO_COLLAGE,
    View.IDENTIFY_CAMERA,
)


def _table(rules: Iterable[Tuple[Iterable[Source], Intent, View]]) -> Dict[Tuple[Source, Intent], View]:
    table = {}
    for sources, intent, target in rules:
        for source in sources:
            table[(source, intent)] = target
    return table


TRANSITIONS: Dict[Tuple[Source, Intent], View] = _table([
    ((ANY,), Intent.GO_DASHBOARD, View.DASHBOARD),
    ((ANY,), Intent.OPEN_SETTINGS, View.SETTINGS),

    # Add-plant wizard
    ((View.DASHBOARD,), Intent.OPEN_ADD_PLANT, View.ADD_PLANT_PHOTO),
    ((View.ADD_PLANT_PHOTO,), Intent.START_IDENTIFY, View.ADD_PLANT_IDENTIFY),
    ((View.ADD_PLANT_PHOTO,), Intent.SKIP_IDENTIFY, View.ADD_PLANT_DETAILS),
    ((View.ADD_PLANT_IDENTIFY,), Intent.IDENTIFY_FOUND, View.ADD_PLANT_RESULT),
    ((View.ADD_PLANT_IDENTIFY, View.ADD_PLANT_RESULT), Intent.IDENTIFY_FAILED, View.ADD_PLANT_DETAILS),
    ((View.ADD_PLANT_RESULT,), Intent.CONFIRM_SUGGESTION, View.ADD_PLANT_DETAILS),
    ((View.PLANT_DETAILS,), Intent.EDIT_PLANT, View.ADD_PLANT_DETAILS),

    # Plants and logs
    (_PLANT_CONTEXT, Intent.OPEN_PLANT_DETAILS, View.PLANT_DETAILS),
    ((View.DASHBOARD, View.PLANT_DETAILS, View.LOG_DETAILS, View.GARDEN_LOG_DETAILS),
     Intent.OPEN_LOG_FORM, View.LOG_FORM),
    ((View.PLANT_DETAILS,), Intent.OPEN_LOG_DETAILS, View.LOG_DETAILS),
    ((View.DASHBOARD,), Intent.OPEN_GARDEN_LOG_DETAILS, View.GARDEN_LOG_DETAILS),
    ((View.DASHBOARD,), Intent.OPEN_POST_DETAILS, View.SOCIAL_POST_DETAILS),

    # Tools
    ((View.DASHBOARD, View.PLANT_DETAILS), Intent.OPEN_COLLAGE, View.PHOTO_COLLAGE),
    ((View.DASHBOARD, View.PLANT_DETAILS), Intent.OPEN_ANALYSIS, View.PLANT_ANALYSIS),
    ((View.DASHBOARD,), Intent.OPEN_ADVICE, View.PLANT_ADVICE),
    ((View.DASHBOARD,), Intent.OPEN_IDENTIFY_CAMERA, View.IDENTIFY_CAMERA),
    ((View.DASHBOARD, View.PLANT_DETAILS), Intent.OPEN_PROFESSOR, View.PROFESSOR),
    ((View.DASHBOARD, View.SETTINGS, View.WAITLIST), Intent.OPEN_PRICING, View.PRICING),
    ((View.DASHBOARD,), Intent.OPEN_WEATHER_DETAILS, View.WEATHER_DETAILS),

    # Session
    ((ANY,), Intent.SIGNED_OUT, View.WELCOME),
    ((ANY,), Intent.PROFILE_PENDING, View.WAITLIST),
    ((ANY,), Intent.PROFILE_APPROVED, View.DASHBOARD),

    # Writes
    ((ANY,), Intent.PLANT_CREATED, View.DASHBOARD),
    ((ANY,), Intent.PLANT_UPDATED, View.PLANT_DETAILS),
    ((ANY,), Intent.PLANT_REMOVED, View.DASHBOARD),
    ((ANY,), Intent.PLANT_ARCHIVED, View.DASHBOARD),
    ((ANY,), Intent.LOG_SAVED, View.PLANT_DETAILS),
    ((ANY,), Intent.LOG_REMOVED, View.PLANT_DETAILS),
    ((ANY,), Intent.GARDEN_LOG_SAVED, View.DASHBOARD),
    ((ANY,), Intent.GARDEN_LOG_REMOVED, View.DASHBOARD),
])


# Progress screens that BACK never returns to
TRANSIENT_VIEWS = frozenset({View.ADD_PLANT_IDENTIFY})


def _needs_plant(store: GardenStore) -> Optional[str]:
    return None if store.selected_plant() else "no plant selected"


def _needs_log(store: GardenStore) -> Optional[str]:
    if store.selected_plant() is None:
        return "no plant selected"
    return None if store.selected_log() else "no log selected"


DATA_REQUIREMENTS: Dict[View, Callable[[GardenStore], Optional[str]]] = {
    View.PLANT_DETAILS: _needs_plant,
    View.LOG_DETAILS: _needs_log,
    View.GARDEN_LOG_DETAILS: lambda store: None if store.selected_garden_log() else "no garden log selected",
    View.SOCIAL_POST_DETAILS: lambda store: None if store.selected_post() else "no post selected",
    View.WEATHER_DETAILS: lambda store: None if store.settings.home_location else "no home location set",
}


class ViewStateMachine:
    """
    Current view plus back stack.

    User intents push the current view onto the history; data intents reset it
    so that BACK never returns to a submitted form.
    """

    def __init__(self, store: GardenStore, history_limit: int = 50, initial: View = View.WELCOME):
        self.store = store
        self.current = initial
        self.history: Deque[View] = deque(maxlen=history_limit)

    def _session_block(self, target: View) -> Optional[str]:
        if self.store.session_user is None:
            return None if target in SIGNED_OUT_VIEWS else "signed out"
        if self.store.profile_status != ProfileStatus.APPROVED:
            return None if target in PENDING_VIEWS else "account pending approval"
        if target in SIGNED_OUT_VIEWS or target == View.WAITLIST:
            return "already approved"
        return None

    def can_enter(self, target: View) -> bool:
        return self.check(target) is None

    def check(self, target: View) -> Optional[str]:
        """Reason ``target`` cannot be shown right now, or None."""
        reason = self._session_block(target)
        if reason:
            return reason
        requirement = DATA_REQUIREMENTS.get(target)
        return requirement(self.store) if requirement else None

    def resolve(self, intent: Intent) -> Optional[View]:
        return TRANSITIONS.get((self.current, intent)) or TRANSITIONS.get((ANY, intent))

    def _reject(self, intent: Intent, reason: str):
        logger.warning(
            f"Navigation rejected: {intent.value} from {self.current.value} ({reason})",
            intent=intent.value,
            view=self.current.value,
        )
        raise InvalidTransitionError(
            f"Cannot {intent.value} from {self.current.value}: {reason}",
            current_view=self.current.value,
            intent=intent.value,
            reason=reason,
        )

    def dispatch(self, intent: Intent) -> View:
        """
        Apply an intent.

        Returns:
            The new current view

        Raises:
            InvalidTransitionError: No transition, or the target is gated or
                missing its data; the state is unchanged
        """
        intent = Intent(intent)
        if intent == Intent.BACK:
            return self.back()

        if intent in SESSION_INTENTS:
            return self._dispatch_session(intent)

        target = self.resolve(intent)
        if target is None:
            self._reject(intent, "no transition")
        reason = self.check(target)
        if reason:
            self._reject(intent, reason)

        if intent in DATA_INTENTS:
            self.history.clear()
            if target != View.DASHBOARD:
                self.history.append(View.DASHBOARD)
        elif target != self.current and self.current not in TRANSIENT_VIEWS:
            self.history.append(self.current)

        logger.debug(f"Navigation {self.current.value} -> {target.value}", intent=intent.value)
        self.current = target
        return target

    def _dispatch_session(self, intent: Intent) -> View:
        target = TRANSITIONS[(ANY, intent)]
        if intent != Intent.SIGNED_OUT and self.store.session_user is None:
            self._reject(intent, "signed out")
        self.history.clear()
        self.current = target
        if target == View.DASHBOARD:
            self.store.dashboard_tab = self.store.effective_dashboard_tab()
        return target

    def back(self) -> View:
        """
        Return to the most recent history entry that can still be shown.

        With an empty history an approved user lands on the dashboard.
        """
        remaining = list(self.history)
        while remaining:
            previous = remaining.pop()
            if previous != self.current and self.can_enter(previous):
                self.history = deque(remaining, maxlen=self.history.maxlen)
                self.current = previous
                return previous

        if self.current != View.DASHBOARD and self.can_enter(View.DASHBOARD):
            self.history.clear()
            self.current = View.DASHBOARD
            return View.DASHBOARD
        self._reject(Intent.BACK, "nothing to go back to")

    def select_tab(self, tab: DashboardTab) -> DashboardTab:
        """Open a dashboard tab; tabs of disabled modules fall back to PLANTS."""
        self.store.dashboard_tab = DashboardTab(tab)
        self.store.dashboard_tab = self.store.effective_dashboard_tab()
        return self.store.dashboard_tab


__all__ = [
    "ANY",
    "DashboardTab",
    "DATA_REQUIREMENTS",
    "Intent",
    "TRANSIENT_VIEWS",
    "TRANSITIONS",
    "View",
    "ViewStateMachine",
]
