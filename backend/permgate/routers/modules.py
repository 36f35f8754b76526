from fastapi import APIRouter, Depends, status

from ..dependencies import get_module_service, require_permission
from ..schemas.common import MessageResponse
from ..schemas.named import ModuleCreate, ModuleResponse, ModuleUpdate
from ..services.admin import ModuleService

router = APIRouter(prefix="/modules", tags=["modules"])


@router.get(
    "",
    response_model=list[ModuleResponse],
    dependencies=[Depends(require_permission("modules", "read"))],
)
async def list_modules(modules: ModuleService = Depends(get_module_service)):
    return await modules.list()


@router.post(
    "",
    response_model=ModuleResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_permission("modules", "create"))],
)
async def create_module(payload: ModuleCreate, modules: ModuleService = Depends(get_module_service)):
    return await modules.create(payload.name, payload.description)


@router.get(
    "/{module_id}",
    response_model=ModuleResponse,
    dependencies=[Depends(require_permission("modules", "read"))],
)
async def get_module(module_id: int, modules: ModuleService = Depends(get_module_service)):
    return await modules.get(module_id)


@router.put(
    "/{module_id}",
    response_model=ModuleResponse,
    dependencies=[Depends(require_permission("modules", "update"))],
)
async def update_module(
    module_id: int, payload: ModuleUpdate, modules: ModuleService = Depends(get_module_service)
):
    return await modules.update(module_id, name=payload.name, description=payload.description)


@router.delete(
    "/{module_id}",
    response_model=MessageResponse,
    dependencies=[Depends(require_permission("modules", "delete"))],
)
async def delete_module(module_id: int, modules: ModuleService = Depends(get_module_service)):
    await modules.soft_delete(module_id)
    return MessageResponse(message="Module deleted successfully")
