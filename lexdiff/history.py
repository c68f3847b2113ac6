from typing import List, Optional

import structlog

logger = structlog.get_logger(__name__)


class EditHistory:
    """
    Linear undo/redo timeline of full-document snapshots.

    Only free user edits are recorded. Replaying a snapshot through `undo`/`redo`
    must not be pushed back; the caller is responsible for not re-pushing it.
    Pushing after an undo prunes the redo branch.
    """

    def __init__(self, initial: str = ""):
        self.entries: List[str] = [initial]
        self.cursor = 0

    @property
    def current(self) -> str:
        return self.entries[self.cursor]

    @property
    def can_undo(self) -> bool:
        return self.cursor > 0

    @property
    def can_redo(self) -> bool:
        return self.cursor < len(self.entries) - 1

    def push(self, doc: str) -> bool:
        """Records a new snapshot. Returns False when `doc` equals the current one."""
        if doc == self.entries[self.cursor]:
            return False
        del self.entries[self.cursor + 1 :]
        self.entries.append(doc)
        self.cursor = len(self.entries) - 1
        logger.debug("History push", cursor=self.cursor, size=len(self.entries))
        return True

    def undo(self) -> Optional[str]:
        if not self.can_undo:
            return None
        self.cursor -= 1
        return self.entries[self.cursor]

    def redo(self) -> Optional[str]:
        if not self.can_redo:
            return None
        self.cursor += 1
        return self.entries[self.cursor]

