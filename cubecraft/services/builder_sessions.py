"""
In-process registry of open cube builders.

The HTTP layer is stateless per request; a session id maps each client to
the CubeBuilder holding its cube, undo history and save state.
"""

import logging
import uuid
from collections import OrderedDict

from cubecraft.models.failure import NotFoundError
from cubecraft.services.cube_builder import CubeBuilder

logger = logging.getLogger(__name__)

MAX_OPEN_SESSIONS = 256


class BuilderSessions:
    """Open builders keyed by session id, oldest evicted first when full."""

    def __init__(self, max_sessions: int = MAX_OPEN_SESSIONS):
        self.max_sessions = max_sessions
        self._builders: OrderedDict[str, CubeBuilder] = OrderedDict()

    def open(self, builder: CubeBuilder) -> str:
        session_id = uuid.uuid4().hex
        self._builders[session_id] = builder
        while len(self._builders) > self.max_sessions:
            evicted_id, evicted = self._builders.popitem(last=False)
            evicted.close()
            logger.info("builder_session_evicted", extra={"session_id": evicted_id})
        return session_id

    def get(self, session_id: str) -> CubeBuilder:
        builder = self._builders.get(session_id)
        if builder is None:
            raise NotFoundError("session", session_id)
        self._builders.move_to_end(session_id)
        return builder

    def close(self, session_id: str) -> bool:
        builder = self._builders.pop(session_id, None)
        if builder is None:
            return False
        builder.close()
        return True

    def __len__(self) -> int:
        return len(self._builders)
