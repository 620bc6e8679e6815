# aula/app/models/student.py
from sqlalchemy import Column, String, Text, DateTime
from sqlalchemy.sql import func
from aula.app.db.base import Base


class Student(Base):
    __tablename__ = "students"

    # Generated by the client, never changes
    sid = Column(String(64), primary_key=True)

    name = Column(String(200), nullable=True)
    # School-assigned code, sent as "id" on the wire; not unique
    student_id = Column("studentId", String(64), nullable=True)
    # Course / cohort grouping
    level = Column(String(100), nullable=True)
    email = Column(String(255), nullable=True)

    # Free-form JSON blobs, stored as text and never validated
    attendance = Column(Text, nullable=False, default="{}", server_default="{}")
    grades = Column(Text, nullable=False, default="{}", server_default="{}")

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now()
    )
