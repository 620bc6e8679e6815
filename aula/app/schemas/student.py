# aula/app/schemas/student.py
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict


class StudentIn(BaseModel):
    """
    Body for add and replace.

    Nothing besides sid is checked. On replace every field is written, so a
    field the caller leaves out ends up null (or {} for the JSON blobs).
    """
    model_config = ConfigDict(extra="ignore")

    sid: Optional[str] = None
    name: Optional[str] = None
    # School-assigned code (studentId column); numeric codes are stored as text
    id: Optional[Union[str, int]] = None
    level: Optional[str] = None
    email: Optional[str] = None
    attendance: Any = None
    grades: Any = None


class StudentOut(BaseModel):
    sid: str
    name: Optional[str] = None
    id: Optional[str] = None
    level: Optional[str] = None
    email: Optional[str] = None
    attendance: Any = {}
    grades: Any = {}


class OkResponse(BaseModel):
    ok: int = 1
