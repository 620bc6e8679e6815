# aula/app/services/roster.py
"""
Roster store: create, list, replace and delete student records.

attendance and grades are kept as JSON text and handed back decoded. There
is intentionally no partial update: replace() writes every column.
"""
import json
import logging
from typing import Any, Dict, List

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from aula.app.core.exceptions import MissingSid, StudentConflict, StudentNotFound
from aula.app.models.student import Student
from aula.app.schemas.student import StudentIn

logger = logging.getLogger(__name__)


def encode_blob(value: Any) -> str:
    return json.dumps({} if value is None else value)


def decode_blob(raw) -> Any:
    """Decode a stored JSON blob; {} for missing, empty or corrupt text."""
    if not raw:
        return {}
    try:
        value = json.loads(raw)
    except (TypeError, ValueError):
        logger.warning("Discarding corrupt JSON blob: %.40r", raw)
        return {}
    return {} if value is None else value


def to_wire(student: Student) -> Dict[str, Any]:
    return {
        "sid": student.sid,
        "name": student.name,
        "id": student.student_id,
        "level": student.level,
        "email": student.email,
        "attendance": decode_blob(student.attendance),
        "grades": decode_blob(student.grades),
    }


def _columns(data: StudentIn) -> Dict[str, Any]:
    return {
        "name": data.name,
        "student_id": None if data.id is None else str(data.id),
        "level": data.level,
        "email": data.email,
        "attendance": encode_blob(data.attendance),
        "grades": encode_blob(data.grades),
    }


class RosterStore:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_students(self) -> List[Dict[str, Any]]:
        result = await self.db.execute(select(Student))
        return [to_wire(s) for s in result.scalars().all()]

    async def add(self, data: StudentIn) -> None:
        if not data.sid:
            raise MissingSid()

        existing = await self.db.get(Student, data.sid)
        if existing is not None:
            raise StudentConflict()

        self.db.add(Student(sid=data.sid, **_columns(data)))
        try:
            await self.db.commit()
        except IntegrityError as exc:
            await self.db.rollback()
            raise StudentConflict() from exc

    async def replace(self, sid: str, data: StudentIn) -> None:
        # The path sid wins; sid itself is never rewritten
        values = {getattr(Student, key): value for key, value in _columns(data).items()}
        result = await self.db.execute(
            update(Student).where(Student.sid == sid).values(values)
        )
        if result.rowcount == 0:
            await self.db.rollback()
            raise StudentNotFound()
        await self.db.commit()

    async def remove(self, sid: str) -> None:
        # Deleting a missing sid is not an error
        await self.db.execute(delete(Student).where(Student.sid == sid))
        await self.db.commit()
