# aula/app/api/v1/router.py
from fastapi import APIRouter
from aula.app.api.v1.endpoints import auth, students

api_router = APIRouter()
api_router.include_router(auth.router, tags=["auth"])
api_router.include_router(students.router, prefix="/students", tags=["students"])
