"""Durable JSON cache of the signed-in admin's session."""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError as PydanticValidationError

from monquest_cms.core.config import settings
from monquest_cms.schemas.schemas import CamelModel

logger = logging.getLogger("monquest.client.session")


class SessionRole(CamelModel):
    id: str
    name: str
    slug: str
    permissions: List[str]
    is_system: bool = False


class Session(CamelModel):
    """Client projection of the signed-in user and their role."""

    id: str
    email: Optional[str] = None
    name: str = ""
    role: SessionRole
    status: str = "ACTIVE"
    wallet_address: Optional[str] = None
    auth_method: str = "EMAIL"

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)


class SessionStore:
    """One JSON document on disk; corrupt documents clear themselves."""

    def __init__(self, path: Optional[str] = None):
        self.path = Path(os.path.expanduser(path or settings.SESSION_CACHE_PATH))

    def load(self) -> Optional[Session]:
        if not self.path.exists():
            return None
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
            return Session.model_validate(raw)
        except (OSError, ValueError, PydanticValidationError) as e:
            logger.warning("Discarding unreadable session cache %s: %s", self.path, e)
            self.clear()
            return None

    def save(self, session: Session) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=str(self.path.parent), prefix=".session-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(session.to_json())
            os.replace(tmp, self.path)
        except BaseException:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise

    def clear(self) -> None:
        try:
            self.path.unlink()
        except FileNotFoundError:
            pass
