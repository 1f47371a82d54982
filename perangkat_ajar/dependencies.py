from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from perangkat_ajar.database import get_db
from perangkat_ajar.services.document_store import SqlDocumentStore
from perangkat_ajar.services.planning_service import PlanningService
from perangkat_ajar.services.suggestion_service import SuggestionService
from perangkat_ajar.services.sync_service import PullSynchronizer


async def get_store(db: AsyncSession = Depends(get_db)):
    return SqlDocumentStore(db)

async def get_planning_service(store=Depends(get_store)) -> PlanningService:
    return PlanningService(store)

async def get_synchronizer(store=Depends(get_store)) -> PullSynchronizer:
    return PullSynchronizer(store)

async def get_suggestion_service(planning: PlanningService = Depends(get_planning_service)) -> SuggestionService:
    return SuggestionService(planning)
