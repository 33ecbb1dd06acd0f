"""
Fleet status reporting for the parent dashboard.
"""

from typing import List

from ...core.logging import ProcessingTimer, get_logger
from .engine import AccessDecisionEngine
from .profile_store import ProfileSource
from .types import FleetEntry

logger = get_logger(__name__)


class FleetStatusReporter:
    """Evaluates every kid of a parent account against one shared instant."""

    def __init__(self, profiles: ProfileSource, engine: AccessDecisionEngine):
        self.profiles = profiles
        self.engine = engine

    def get_fleet_status(self, user_id: str) -> List[FleetEntry]:
        """One entry per kid profile, in profile insertion order.

        An account with no profiles yields an empty list.
        """
        profiles = self.profiles.list_profiles(user_id)
        if not profiles:
            return []

        with ProcessingTimer(logger, "fleet_status", user_id=user_id, kids=len(profiles)):
            now = self.engine.local_now_for(user_id)
            entries = [
                FleetEntry(
                    kid_profile_id=profile.id,
                    kid_name=profile.name,
                    decision=self.engine.evaluate(profile, now),
                )
                for profile in profiles
            ]
        return entries
