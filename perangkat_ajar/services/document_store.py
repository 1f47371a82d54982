import copy
import logging
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from perangkat_ajar.models.document import StoredDocument

logger = logging.getLogger(__name__)


def path_key(path: List[str]) -> str:
    """Joins ordered path segments into the storage key."""
    return "/".join(path)


class SqlDocumentStore:
    """
    Hierarchical document store on top of a single SQLAlchemy table.
    Point reads/writes by full path only; a write replaces the whole document.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def read(self, path: List[str]) -> Optional[dict]:
        row = await self.session.get(StoredDocument, path_key(path))
        if row is None:
            return None
        return copy.deepcopy(row.data)

    async def write(self, path: List[str], document: dict) -> None:
        key = path_key(path)
        data = copy.deepcopy(document)
        row = await self.session.get(StoredDocument, key)
        if row is None:
            self.session.add(StoredDocument(path=key, data=data))
        else:
            row.data = data
        await self.session.commit()
        logger.debug(f"Document written: {key}")
