"""Statement-scoped buffering of grade row changes."""

from __future__ import annotations

import logging
import uuid
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, List, Optional

from sqlalchemy.orm import Session

from ..models import ChangeOperation, GradeChangeLog
from ..utils.datetime import utcnow

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GradeChange:
    """One captured grade row change. ``None`` grades mean absent/ungraded."""

    operation: ChangeOperation
    student_id: int
    course_id: int
    old_grade: Optional[str]
    new_grade: Optional[str]


class GradeChangeBuffer:
    """Ordered per-operation buffer flushed once to ``grade_change_log``."""

    def __init__(self) -> None:
        self.batch_id = uuid.uuid4().hex
        self._pending: List[GradeChange] = []
        self._flushed = False

    def __len__(self) -> int:
        return len(self._pending)

    @property
    def pending(self) -> tuple:
        return tuple(self._pending)

    def capture(
        self,
        operation: ChangeOperation,
        *,
        student_id: int,
        course_id: int,
        old_grade: Optional[str],
        new_grade: Optional[str],
    ) -> GradeChange:
        if self._flushed:
            raise RuntimeError("grade change buffer already flushed")
        change = GradeChange(operation, student_id, course_id, old_grade, new_grade)
        self._pending.append(change)
        return change

    def flush(self, session: Session) -> List[GradeChangeLog]:
        """Write every captured change in capture order and close the buffer."""

        captured_at = utcnow()
        rows = [
            GradeChangeLog(
                batch_id=self.batch_id,
                operation=change.operation,
                student_id=change.student_id,
                course_id=change.course_id,
                old_grade=change.old_grade,
                new_grade=change.new_grade,
                captured_at=captured_at,
            )
            for change in self._pending
        ]
        # add_all keeps list order, so autoincrement ids follow capture order
        session.add_all(rows)
        session.flush()
        self._flushed = True
        self._pending.clear()
        if rows:
            logger.info("flushed %d grade change(s) in batch %s", len(rows), self.batch_id)
        return rows


@contextmanager
def grade_change_batch(session: Session) -> Iterator[GradeChangeBuffer]:
    """Collect grade changes for the enclosed block and flush them on success.

    If the block raises, the buffer is dropped and nothing is written.
    """

    buffer = GradeChangeBuffer()
    yield buffer
    buffer.flush(session)
