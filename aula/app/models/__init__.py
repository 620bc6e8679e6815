from aula.app.models.student import Student
from aula.app.models.user import User

__all__ = ["Student", "User"]
