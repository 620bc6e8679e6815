from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from aula.app.core.exceptions import BundleVersionError
from aula.app.schemas.bundle import BUNDLE_VERSION, AttendanceEntry, GradeEntry, UserBundle
from aula.app.services import bundle as rules


def _grade(**kw):
    data = {"id": "g1", "nombre": "Ana", "curso": "8vo A", "p1": 8, "p2": 7, "p3": 9, "ex": 6}
    data.update(kw)
    return GradeEntry(**data)


def _mark(nombre="Ana", fecha="2026-03-02", asistencia=True, id="r1"):
    return AttendanceEntry(id=id, nombre=nombre, materia="General", fecha=fecha, asistencia=asistencia)


def test_average_uses_final_exam():
    assert rules.compute_average(8, 7, 9, 6) == 7.50


def test_supletorio_replaces_final_exam():
    assert rules.compute_average(8, 7, 9, 6, supletorio=9) == 8.25


def test_supletorio_of_zero_still_counts():
    assert rules.compute_average(8, 8, 8, 10, supletorio=0) == 6.0


def test_average_rounds_half_up_to_two_places():
    # 30.05 / 4 = 7.5125
    assert rules.compute_average(7.5, 7.5, 7.5, 7.55) == 7.51
    # 30.1 / 4 = 7.525
    assert rules.compute_average(7.5, 7.5, 7.5, 7.6) == 7.53


def test_failing_threshold():
    assert rules.is_failing(6.99)
    assert not rules.is_failing(7.0)
    assert not rules.is_failing(rules.PASSING_GRADE)


def test_upsert_grade_computes_average_and_replaces_by_id():
    b = rules.upsert_grade(UserBundle(), _grade())
    assert b.notas[0].promedio == 7.5

    b = rules.upsert_grade(b, _grade(sup=9))
    assert len(b.notas) == 1
    assert b.notas[0].promedio == 8.25

    b = rules.upsert_grade(b, _grade(id="g2", nombre="Luis"))
    assert [n.id for n in b.notas] == ["g1", "g2"]


def test_remove_grade():
    b = rules.upsert_grade(UserBundle(), _grade())
    assert rules.remove_grade(b, "g1").notas == []
    assert len(b.notas) == 1


def test_attendance_same_student_same_day_is_replaced():
    b = rules.record_attendance(UserBundle(), _mark(asistencia=True, id="r1"))
    b = rules.record_attendance(b, _mark(asistencia=False, id="r2"))

    assert len(b.registro) == 1
    assert b.registro[0].id == "r2"
    assert rules.attendance_for(b, "Ana", "2026-03-02") is False


def test_attendance_different_days_accumulate():
    b = rules.record_attendance(UserBundle(), _mark(fecha="2026-03-02"))
    b = rules.record_attendance(b, _mark(fecha="2026-03-03", asistencia=False, id="r2"))
    b = rules.record_attendance(b, _mark(nombre="Luis", id="r3"))

    assert len(b.registro) == 3
    assert rules.count_attendance(b, True) == 2
    assert rules.count_attendance(b, False) == 1
    assert rules.attendance_for(b, "Luis", "2026-03-03") is None


def test_attendance_date_must_be_iso():
    with pytest.raises(ValidationError):
        _mark(fecha="02/03/2026")


def test_add_course_dedupes_case_insensitively_and_sorts():
    b = rules.add_course(UserBundle(), "  9no B ")
    b = rules.add_course(b, "8vo A")
    b = rules.add_course(b, "8VO a")
    b = rules.add_course(b, "   ")
    assert b.cursos == ["8vo A", "9no B"]


def test_courses_from_roster():
    students = [{"level": "9no"}, {"level": "8vo"}, {"level": "9no"}, {"level": None}]
    assert rules.courses_from_roster(students) == ["8vo", "9no"]


def test_drop_student_removes_their_entries():
    b = rules.upsert_grade(UserBundle(), _grade())
    b = rules.upsert_grade(b, _grade(id="g2", nombre="Luis"))
    b = rules.record_attendance(b, _mark())
    b = rules.record_attendance(b, _mark(nombre="Luis", id="r2"))

    b = rules.drop_student(b, "Ana")
    assert [n.nombre for n in b.notas] == ["Luis"]
    assert [r.nombre for r in b.registro] == ["Luis"]


def test_bundle_key():
    assert rules.bundle_key("profe") == "userData-profe"


@pytest.mark.parametrize("raw", [None, "", "{oops", "[1, 2]"])
def test_load_missing_or_unreadable_bundle_is_empty(raw):
    b = rules.load_bundle(raw)
    assert b == UserBundle()
    assert b.version == BUNDLE_VERSION


def test_load_legacy_bundle_migrates():
    legacy = {
        "notas": [
            {"id": "g1", "nombre": "Ana", "curso": "8vo A", "p1": 8, "p2": 7, "p3": 9,
             "ex": 6, "sup": None, "promedio": "7.50"},
            {"id": "g2", "nombre": "Luis", "curso": "8vo A", "p1": 8, "p2": 7, "p3": 9,
             "ex": 6, "sup": 9, "promedio": "8.25"},
            {"id": "bad", "nombre": "Sin notas"},
        ],
        "registro": [
            {"id": "r1", "nombre": "Ana", "materia": "General", "fecha": "2026-03-02", "asistencia": True},
        ],
    }
    b = rules.load_bundle(json.dumps(legacy))

    assert b.version == BUNDLE_VERSION
    assert [(n.id, n.promedio) for n in b.notas] == [("g1", 7.5), ("g2", 8.25)]
    assert len(b.registro) == 1
    assert b.cursos == []


def test_load_rejects_newer_version():
    with pytest.raises(BundleVersionError):
        rules.load_bundle({"version": BUNDLE_VERSION + 1})


def test_dump_and_load_current_version():
    b = rules.add_course(rules.upsert_grade(UserBundle(), _grade()), "8vo A")
    assert rules.load_bundle(rules.dump_bundle(b)) == b


def test_load_current_version_drops_malformed_entries():
    stored = {
        "version": BUNDLE_VERSION,
        "notas": [
            {"id": "g1", "nombre": "Ana", "curso": "8vo A", "p1": 8, "p2": 7, "p3": 9, "ex": 6},
            {"id": "bad", "nombre": "Sin notas", "p1": "ocho"},
        ],
        "registro": [
            {"id": "r1", "nombre": "Ana", "materia": "General", "fecha": "2026-03-02", "asistencia": True},
            {"id": "r2", "nombre": "Ana", "materia": "General", "fecha": "02/03/2026", "asistencia": True},
        ],
        "cursos": ["8vo A"],
    }
    b = rules.load_bundle(json.dumps(stored))

    assert [(n.id, n.promedio) for n in b.notas] == [("g1", 7.5)]
    assert [r.id for r in b.registro] == ["r1"]
    assert b.cursos == ["8vo A"]
