"""Style profile storage: whole-document YAML files, one per user."""

import re
from pathlib import Path
from typing import Optional

import structlog
import yaml

from .models import StyleProfile, utc_now

logger = structlog.get_logger()

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9_.-]")


class ProfileStorage:
    """YAML-backed storage for a single style profile document."""

    def __init__(self, path: str | Path = "~/digitalme/profiles/default.yaml"):
        self.path = Path(path).expanduser()

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> Optional[StyleProfile]:
        """Load the stored profile, upgrading legacy documents on the way in."""
        if not self.path.exists():
            return None
        with open(self.path) as f:
            data = yaml.safe_load(f)
        if not data:
            return None
        if not isinstance(data, dict):
            raise ValueError(f"Profile document is not a mapping: {self.path}")
        return StyleProfile.model_validate(data)

    def save(self, profile: StyleProfile) -> StyleProfile:
        """Write the whole document and return the stored copy.

        The caller's model is left as-is; the stored copy gets a fresh
        ``lastUpdated`` stamp.
        """
        stored = profile.model_copy(update={"last_updated": utc_now()})
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w") as f:
            yaml.safe_dump(stored.to_document(), f, default_flow_style=False, sort_keys=False)
        logger.info("profile.saved", path=str(self.path), version=stored.version)
        return stored

    def reset(self) -> bool:
        """Delete the stored profile. Returns False when there was nothing to delete."""
        if not self.path.exists():
            return False
        self.path.unlink()
        logger.info("profile.reset", path=str(self.path))
        return True


class ProfileDirectory:
    """Maps user ids to per-user ``ProfileStorage`` files under one directory."""

    def __init__(self, root: str | Path = "~/digitalme/profiles"):
        self.root = Path(root).expanduser()

    def for_user(self, user_id: str) -> ProfileStorage:
        safe = _UNSAFE_CHARS.sub("_", user_id.strip()) or "default"
        return ProfileStorage(self.root / f"{safe}.yaml")

    def list_users(self) -> list[str]:
        if not self.root.exists():
            return []
        return sorted(p.stem for p in self.root.glob("*.yaml"))
