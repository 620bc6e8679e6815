# aula/app/api/v1/endpoints/students.py
import logging
from typing import List

from fastapi import APIRouter, Depends

from aula.app.api import deps
from aula.app.schemas.student import OkResponse, StudentIn, StudentOut
from aula.app.services.roster import RosterStore

logger = logging.getLogger(__name__)

# Every route requires a valid session token
router = APIRouter(dependencies=[Depends(deps.get_current_user)])


# 1. LIST
@router.get("", response_model=List[StudentOut])
async def list_students(roster: RosterStore = Depends(deps.get_roster)):
    return await roster.list_students()


# 2. ADD (client supplies the sid)
@router.post("", response_model=OkResponse)
async def add_student(
        student_in: StudentIn,
        roster: RosterStore = Depends(deps.get_roster),
        current_user: str = Depends(deps.get_current_user),
):
    await roster.add(student_in)
    logger.info("%s added student %s", current_user, student_in.sid)
    return OkResponse()


# 3. REPLACE: full overwrite, omitted fields are cleared
@router.put("/{sid}", response_model=OkResponse)
async def replace_student(
        sid: str,
        student_in: StudentIn,
        roster: RosterStore = Depends(deps.get_roster),
):
    await roster.replace(sid, student_in)
    return OkResponse()


# 4. DELETE (idempotent)
@router.delete("/{sid}", response_model=OkResponse)
async def delete_student(
        sid: str,
        roster: RosterStore = Depends(deps.get_roster),
        current_user: str = Depends(deps.get_current_user),
):
    await roster.remove(sid)
    logger.info("%s removed student %s", current_user, sid)
    return OkResponse()
