# aula/app/services/bundle.py
"""
Rules for the per-user attendance/grade bundle.

The browser owns this data; the functions here are the single definition of
how it is read, migrated and updated. Every update returns a new UserBundle
and leaves the one passed in untouched.
"""
import json
import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Iterable, List, Optional

from pydantic import ValidationError as PydanticValidationError

from aula.app.core.exceptions import BundleVersionError
from aula.app.schemas.bundle import (
    BUNDLE_VERSION,
    AttendanceEntry,
    GradeEntry,
    UserBundle,
)

logger = logging.getLogger(__name__)

# Averages below this are shown as failing; nothing else depends on it
PASSING_GRADE = 7.0

BUNDLE_KEY_PREFIX = "userData-"


def bundle_key(username: str) -> str:
    return f"{BUNDLE_KEY_PREFIX}{username}"


# ─────────────────────────────────────────────────────────────
# Grades
# ─────────────────────────────────────────────────────────────
def compute_average(p1, p2, p3, examen_final, supletorio=None) -> float:
    """
    Average of the three partials and the final exam, to 2 decimals.

    A make-up exam (supletorio), when given, takes the place of the final.
    """
    final = supletorio if supletorio is not None else examen_final
    total = sum(Decimal(str(v)) for v in (p1, p2, p3, final))
    return float((total / 4).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def is_failing(average: float) -> bool:
    return average < PASSING_GRADE


def _with_average(entry: GradeEntry) -> GradeEntry:
    promedio = compute_average(entry.p1, entry.p2, entry.p3, entry.ex, entry.sup)
    return entry.model_copy(update={"promedio": promedio})


def upsert_grade(bundle: UserBundle, entry: GradeEntry) -> UserBundle:
    """Store a grade entry (average recomputed), replacing one with the same id."""
    entry = _with_average(entry)
    if any(n.id == entry.id for n in bundle.notas):
        notas = [entry if n.id == entry.id else n for n in bundle.notas]
    else:
        notas = list(bundle.notas) + [entry]
    return bundle.model_copy(update={"notas": notas})


def remove_grade(bundle: UserBundle, grade_id: str) -> UserBundle:
    return bundle.model_copy(update={"notas": [n for n in bundle.notas if n.id != grade_id]})


# ─────────────────────────────────────────────────────────────
# Attendance
# ─────────────────────────────────────────────────────────────
def record_attendance(bundle: UserBundle, entry: AttendanceEntry) -> UserBundle:
    """Add an attendance mark; an earlier mark for the same student and day is replaced."""
    kept = [
        r for r in bundle.registro
        if not (r.nombre == entry.nombre and r.fecha == entry.fecha)
    ]
    return bundle.model_copy(update={"registro": kept + [entry]})


def attendance_for(bundle: UserBundle, nombre: str, fecha: str) -> Optional[bool]:
    for r in bundle.registro:
        if r.nombre == nombre and r.fecha == fecha:
            return r.asistencia
    return None


def count_attendance(bundle: UserBundle, present: bool) -> int:
    return sum(1 for r in bundle.registro if r.asistencia == present)


# ─────────────────────────────────────────────────────────────
# Courses and roster cleanup
# ─────────────────────────────────────────────────────────────
def add_course(bundle: UserBundle, name: str) -> UserBundle:
    """Add a course name. Blank names and case-insensitive duplicates are ignored."""
    cleaned = (name or "").strip()
    if not cleaned:
        return bundle
    if any(c.lower() == cleaned.lower() for c in bundle.cursos):
        return bundle
    return bundle.model_copy(update={"cursos": sorted(bundle.cursos + [cleaned])})


def courses_from_roster(students: Iterable[dict]) -> List[str]:
    return sorted({s["level"] for s in students if s.get("level")})


def drop_student(bundle: UserBundle, nombre: str) -> UserBundle:
    """Forget a deleted student's attendance and grades (matched by name)."""
    return bundle.model_copy(update={
        "registro": [r for r in bundle.registro if r.nombre != nombre],
        "notas": [n for n in bundle.notas if n.nombre != nombre],
    })


# ─────────────────────────────────────────────────────────────
# Loading and saving
# ─────────────────────────────────────────────────────────────
def _valid_entries(model, items: Any, label: str) -> list:
    out = []
    for item in items or []:
        try:
            out.append(model.model_validate(item))
        except PydanticValidationError as exc:
            logger.warning("Dropping malformed %s entry: %s", label, exc.errors()[0]["msg"])
    return out


def _build(data: dict, notas: Any) -> UserBundle:
    return UserBundle(
        version=BUNDLE_VERSION,
        notas=[_with_average(n) for n in _valid_entries(GradeEntry, notas, "grade")],
        registro=_valid_entries(AttendanceEntry, data.get("registro"), "attendance"),
        cursos=[c for c in data.get("cursos") or [] if isinstance(c, str) and c.strip()],
    )


def _migrate_legacy(data: dict) -> UserBundle:
    # Unversioned bundles stored promedio as a string and sup as null or 0
    notas = []
    for item in data.get("notas") or []:
        if isinstance(item, dict):
            item = dict(item)
            if not item.get("sup"):
                item["sup"] = None
            if item.get("ex") in (None, ""):
                item["ex"] = 0
        notas.append(item)
    return _build(data, notas)


def load_bundle(raw: Any) -> UserBundle:
    """
    Read a stored bundle (JSON text or an already decoded dict).

    Missing or unreadable data gives an empty bundle. Bundles without a
    version are migrated to the current schema. Malformed entries are
    dropped with a warning, whatever the version.

    Raises:
        BundleVersionError: the bundle was written by a newer schema
    """
    if raw is None or raw == "":
        return UserBundle()

    if isinstance(raw, (str, bytes)):
        try:
            raw = json.loads(raw)
        except ValueError:
            logger.warning("Stored bundle is not valid JSON, starting empty")
            return UserBundle()

    if not isinstance(raw, dict):
        return UserBundle()

    version = raw.get("version")
    if version is None:
        return _migrate_legacy(raw)
    if version != BUNDLE_VERSION:
        raise BundleVersionError(f"unsupported bundle version: {version}")

    return _build(raw, raw.get("notas"))


def dump_bundle(bundle: UserBundle) -> str:
    return bundle.model_dump_json()
