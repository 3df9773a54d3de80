from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from hsc_api.models.health import SchemaResponse
from hsc_api.schemas.auth import Role
from hsc_api.services.authz import require_role
from hsc_api.services.schema_service import describe_schema, require_db_ready
from hsc_api.utils.db_async import get_session

router = APIRouter(tags=["admin"])


@router.get(
    "/schema",
    response_model=SchemaResponse,
    dependencies=[Depends(require_role(Role.ADMIN)), Depends(require_db_ready)],
)
async def schema_info(db: AsyncSession = Depends(get_session)) -> SchemaResponse:
    """Report the recorded schema version and the tables that exist."""
    version, tables = await describe_schema(db)
    return SchemaResponse(version=version, tables=tables)
