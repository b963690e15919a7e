from fastapi import APIRouter, Depends
from pydantic import BaseModel

from backend.auth.dependencies import require_authenticated, require_roles
from backend.auth.sessions import SessionData
from backend.homework.partitions import PARTITIONS
from backend.models.user import Role

router = APIRouter(tags=['dashboard'])


class PartitionResponse(BaseModel):
    grade_level: int
    subject: str
    label: str


class DashboardResponse(BaseModel):
    user_id: int
    role: Role
    partitions: list[PartitionResponse]


def list_partitions() -> list[PartitionResponse]:
    return [
        PartitionResponse(grade_level=key.grade_level, subject=key.subject, label=key.label)
        for key in PARTITIONS
    ]


@router.get('/partitions', response_model=list[PartitionResponse])
def partitions(session: SessionData = Depends(require_authenticated)):
    return list_partitions()


@router.get('/teachers', response_model=DashboardResponse)
def teacher_dashboard(session: SessionData = Depends(require_roles(Role.TEACHER))):
    return DashboardResponse(user_id=session.user_id, role=session.role, partitions=list_partitions())


@router.get('/parents', response_model=DashboardResponse)
def parent_dashboard(session: SessionData = Depends(require_roles(Role.PARENT))):
    return DashboardResponse(user_id=session.user_id, role=session.role, partitions=list_partitions())
