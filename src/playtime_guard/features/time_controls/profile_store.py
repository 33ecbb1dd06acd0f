"""
Kid profile repository.

JSON-file backed adapter for the profile-management collaborator. The engine
only sees the narrow ProfileSource protocol, so a product that keeps its
profiles elsewhere plugs in its own implementation.
"""

import fcntl
import logging
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Protocol, Tuple

from ...core.exceptions import KidProfileNotFoundError, StorageError
from ...core.persistence.base_manager import BaseDataManager
from ...core.persistence.json_manager import JSONRepository
from .profiles import KidProfile, ParentAccount

logger = logging.getLogger(__name__)

PROFILES_FILE = "profiles.json"
ACCOUNTS_FILE = "accounts.json"
LOCK_FILE = ".profiles.lock"


class ProfileSource(Protocol):
    """Read-only view of kid profiles consumed by the access engine."""

    def get_profile(self, kid_profile_id: str) -> KidProfile:
        """Return the profile or raise KidProfileNotFoundError."""
        ...

    def list_profiles(self, user_id: str) -> List[KidProfile]:
        """Profiles owned by ``user_id`` in insertion order."""
        ...

    def get_timezone(self, user_id: str) -> Optional[str]:
        """IANA zone configured for the account, if any."""
        ...


class KidProfileRepository(BaseDataManager):
    """Stores kid profiles and parent accounts as JSON documents.

    Several processes may share the files (the API server and the CLI).
    Reads reload a file whenever it changed on disk, and every mutation
    re-reads, modifies and writes through while holding an exclusive lock
    on ``.profiles.lock`` in the storage directory.
    """

    def __init__(self, storage_path: Path):
        super().__init__(storage_path, "KidProfileRepository")
        self.profiles: Dict[str, KidProfile] = {}
        self.accounts: Dict[str, ParentAccount] = {}
        self._lock = threading.RLock()
        self._signatures: Dict[str, Optional[Tuple[int, int, int]]] = {}

    async def _load_data(self) -> None:
        """Load data during initialization."""
        with self._lock:
            self._refresh(force=True)

    async def _save_data(self) -> None:
        """Nothing to flush: every mutation is written through."""
        pass

    @staticmethod
    def _signature(path: Path) -> Optional[Tuple[int, int, int]]:
        try:
            stat = path.stat()
        except FileNotFoundError:
            return None
        return (stat.st_ino, stat.st_mtime_ns, stat.st_size)

    def _refresh(self, force: bool = False) -> None:
        """Reload whichever files changed since they were last read.

        Raises StorageError if a file exists but cannot be parsed.
        """
        profiles_path = self.storage_path / PROFILES_FILE
        if force or self._changed(PROFILES_FILE):
            signature = self._signature(profiles_path)
            self.profiles = JSONRepository.load_json_objects(
                profiles_path, KidProfile.from_dict
            )
            self._signatures[PROFILES_FILE] = signature
            logger.debug(f"Loaded {len(self.profiles)} kid profiles")

        accounts_path = self.storage_path / ACCOUNTS_FILE
        if force or self._changed(ACCOUNTS_FILE):
            signature = self._signature(accounts_path)
            self.accounts = JSONRepository.load_json_objects(
                accounts_path, ParentAccount.from_dict
            )
            self._signatures[ACCOUNTS_FILE] = signature
            logger.debug(f"Loaded {len(self.accounts)} parent accounts")

    def _changed(self, name: str) -> bool:
        if name not in self._signatures:
            return True
        return self._signature(self.storage_path / name) != self._signatures[name]

    @contextmanager
    def _exclusive(self) -> Iterator[None]:
        """Hold the cross-process write lock around a fresh copy of the files."""
        with self._lock:
            self.ensure_storage_exists()
            with open(self.storage_path / LOCK_FILE, "a") as lock_file:
                fcntl.flock(lock_file.fileno(), fcntl.LOCK_EX)
                try:
                    self._refresh(force=True)
                    yield
                except BaseException:
                    # In-memory state may hold an unsaved change
                    self._signatures.clear()
                    raise
                finally:
                    fcntl.flock(lock_file.fileno(), fcntl.LOCK_UN)

    def _save_profiles(self) -> None:
        path = self.storage_path / PROFILES_FILE
        if not JSONRepository.save_json_objects(
            path, self.profiles, lambda profile: profile.to_dict()
        ):
            raise StorageError(
                "Failed to save kid profiles", component=self.manager_name
            )
        self._signatures[PROFILES_FILE] = self._signature(path)

    def _save_accounts(self) -> None:
        path = self.storage_path / ACCOUNTS_FILE
        if not JSONRepository.save_json_objects(
            path, self.accounts, lambda account: account.to_dict()
        ):
            raise StorageError(
                "Failed to save parent accounts", component=self.manager_name
            )
        self._signatures[ACCOUNTS_FILE] = self._signature(path)

    def _require(self, kid_profile_id: str) -> KidProfile:
        profile = self.profiles.get(kid_profile_id)
        if profile is None:
            raise KidProfileNotFoundError(kid_profile_id, component=self.manager_name)
        return profile

    # Profiles

    def save_profile(self, profile: KidProfile) -> KidProfile:
        """Create or replace a profile after validating it."""
        profile.validate()
        with self._exclusive():
            existing = self.profiles.get(profile.id)
            if existing is not None:
                profile.created_at = existing.created_at
                profile.update_last_updated()
            self.profiles[profile.id] = profile
            self._save_profiles()

        logger.info(f"Saved kid profile {profile.id} for user {profile.user_id}")
        return profile

    def find_profile(self, kid_profile_id: str) -> Optional[KidProfile]:
        with self._lock:
            self._refresh()
            return self.profiles.get(kid_profile_id)

    def get_profile(self, kid_profile_id: str) -> KidProfile:
        profile = self.find_profile(kid_profile_id)
        if profile is None:
            raise KidProfileNotFoundError(kid_profile_id, component=self.manager_name)
        return profile

    def list_profiles(self, user_id: str) -> List[KidProfile]:
        with self._lock:
            self._refresh()
            return [p for p in self.profiles.values() if p.user_id == user_id]

    def set_paused(self, kid_profile_id: str, paused: bool) -> KidProfile:
        """Toggle the parent lockout for a kid."""
        with self._exclusive():
            profile = self._require(kid_profile_id)
            profile.paused = paused
            profile.update_last_updated()
            self._save_profiles()

        logger.info(f"Set paused={paused} for kid profile {kid_profile_id}")
        return profile

    def delete_profile(self, kid_profile_id: str) -> None:
        with self._exclusive():
            self._require(kid_profile_id)
            del self.profiles[kid_profile_id]
            self._save_profiles()

        logger.info(f"Deleted kid profile {kid_profile_id}")

    # Accounts

    def set_account_timezone(self, user_id: str, timezone: Optional[str]) -> ParentAccount:
        account = ParentAccount(user_id=user_id, timezone=timezone)
        account.validate()
        with self._exclusive():
            self.accounts[user_id] = account
            self._save_accounts()

        logger.info(f"Set timezone for user {user_id} to {timezone}")
        return account

    def get_timezone(self, user_id: str) -> Optional[str]:
        with self._lock:
            self._refresh()
            account = self.accounts.get(user_id)
            return account.timezone if account else None
