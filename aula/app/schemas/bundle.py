# aula/app/schemas/bundle.py
"""
Schema for the per-user attendance/grade bundle.

The bundle lives in the browser under "userData-<username>" and is never
sent to the backend. Version 1 is the first explicit schema; bundles saved
before it have no "version" key and are migrated by services.bundle.load_bundle.
"""
from datetime import date
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

BUNDLE_VERSION = 1


class GradeEntry(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    nombre: str
    curso: str = ""
    p1: float
    p2: float
    p3: float
    # Regular final exam
    ex: float
    # Make-up exam; replaces ex in the average when present
    sup: Optional[float] = None
    promedio: float = 0.0


class AttendanceEntry(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    nombre: str
    materia: str = ""
    # ISO date, YYYY-MM-DD
    fecha: str
    asistencia: bool

    @field_validator("fecha")
    @classmethod
    def fecha_is_iso_date(cls, v: str) -> str:
        date.fromisoformat(v)
        return v


class UserBundle(BaseModel):
    version: int = BUNDLE_VERSION
    notas: List[GradeEntry] = Field(default_factory=list)
    registro: List[AttendanceEntry] = Field(default_factory=list)
    cursos: List[str] = Field(default_factory=list)
