"""
Credential rotation for the AngelList API.

Each AngelList credential has its own hourly quota. When a search comes back
``over_limit`` the stage moves to the next credential and tries again. The
cursor is shared by every run on the same stage, so advancing it is guarded
by an asyncio.Lock and done compare-and-advance style: two runs that both saw
credential #0 fail move the cursor to #1 once, not to #2.
"""

import asyncio
import logging
from typing import List, Optional, Sequence, Tuple

from ..config.settings import Credential

logger = logging.getLogger(__name__)


class CredentialPool:
    """Ordered credentials with one active entry."""

    def __init__(self, credentials: Optional[Sequence[Credential]] = None, rotatable: bool = True):
        self._credentials: List[Credential] = list(credentials or [])
        # A single clientId/token pair is never rotated, even to itself
        self.rotatable = rotatable and len(self._credentials) > 1
        self._index = 0
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._credentials)

    @property
    def index(self) -> int:
        return self._index

    def current(self) -> Tuple[int, Optional[Credential]]:
        """Active (cursor, credential); credential is None for an empty pool."""
        if not self._credentials:
            return 0, None
        index = self._index
        return index, self._credentials[index]

    async def rotate(self, failed_index: int) -> Tuple[int, Optional[Credential]]:
        """
        Advance past `failed_index` (wrapping) and return the new active entry.

        If another run already moved the cursor off `failed_index`, the cursor
        is left where it is and the current entry is returned.
        """
        async with self._lock:
            if not self._credentials:
                return 0, None
            if self._index == failed_index:
                self._index = (self._index + 1) % len(self._credentials)
                logger.info(
                    f"Rotated AngelList credential {failed_index} -> {self._index} "
                    f"(client {self._credentials[self._index].client_id})"
                )
            return self._index, self._credentials[self._index]
