from typing import Any, Generic, TypeVar

from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from direct_messaging.database import Base

ModelType = TypeVar("ModelType", bound=Base)
PydanticType = TypeVar("PydanticType", bound=BaseModel)


class BaseRepository(Generic[ModelType, PydanticType]):
    """Generic base repository with common read/insert operations.

    Rows in this service are create-only (memberships excepted), so there is
    no generic update or delete.
    """

    def __init__(self, db: AsyncSession, model_class: Any):
        self.db = db
        self.model_class = model_class

    async def insert(self, db_model: ModelType, commit: bool = True) -> PydanticType:
        """Insert a new record.

        With ``commit=False`` the row is only flushed (so its id is assigned)
        and the caller owns the transaction.
        """
        self.db.add(db_model)
        if commit:
            await self.db.commit()
            await self.db.refresh(db_model)
        else:
            await self.db.flush()
        return self._to_pydantic(db_model)

    def _to_pydantic(self, db_model: ModelType) -> PydanticType:
        """Convert SQLAlchemy model to Pydantic model.

        This should be overridden in subclasses for specific conversion logic.
        """
        raise NotImplementedError
