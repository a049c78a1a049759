# nagar_connect/api/departments.py
from typing import List

from fastapi import APIRouter, Depends

from nagar_connect.api.deps import get_department_repository
from nagar_connect.core.enums import UserType
from nagar_connect.core.security import CurrentUser, require_role
from nagar_connect.models.department import Department, DepartmentSLAs
from nagar_connect.repositories.department_repository import DepartmentRepository
from nagar_connect.schemas.department import DepartmentCreate, DepartmentOut

router = APIRouter(prefix="/admin/departments", tags=["Admin Departments"])

admin_only = require_role(UserType.admin.value)


def to_department_out(doc: dict) -> dict:
    return {
        "id": str(doc["_id"]),
        "name": doc.get("name"),
        "shortCode": doc.get("short_code"),
        "contactEmail": doc.get("contact_email"),
        "contactPhone": doc.get("contact_phone"),
        "operatingHours": doc.get("operating_hours"),
        "slas": doc.get("slas") or {},
        "members": [str(m) for m in doc.get("members", [])],
    }


@router.get("", response_model=List[DepartmentOut])
async def list_departments(
    user: CurrentUser = Depends(admin_only),
    repo: DepartmentRepository = Depends(get_department_repository),
):
    return [to_department_out(d) for d in await repo.list_all()]


@router.post("", response_model=DepartmentOut, status_code=201)
async def create_department(
    body: DepartmentCreate,
    user: CurrentUser = Depends(admin_only),
    repo: DepartmentRepository = Depends(get_department_repository),
):
    department = Department(
        name=body.name.strip(),
        short_code=body.shortCode,
        contact_email=body.contactEmail,
        contact_phone=body.contactPhone,
        operating_hours=body.operatingHours,
        slas=DepartmentSLAs(**body.slas.model_dump()),
    )
    doc = await repo.create(department)
    return to_department_out(doc)
