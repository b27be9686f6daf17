"""物料目录路由

GET /api/materials: 全部物料（含停用），按序号升序。
"""

from fastapi import APIRouter, Depends
from loadledger.core.models import Material
from loadledger.core.service import TaskExecutionService
from pydantic import BaseModel

from ..deps import get_service

router = APIRouter()


class MaterialListResponse(BaseModel):
    materials: list[Material]


@router.get("/api/materials", response_model=MaterialListResponse)
async def list_materials(service: TaskExecutionService = Depends(get_service)):
    return MaterialListResponse(materials=await service.list_materials())
