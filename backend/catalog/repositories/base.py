import logging
from typing import Generic, List, Optional, Tuple, Type, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from catalog.core.exceptions import ConflictError, InternalError
from catalog.query.executor import apply_fetch_plan
from catalog.query.paging import FetchPlan
from catalog.query.predicates import Predicate

logger = logging.getLogger(__name__)

ModelType = TypeVar("ModelType")


class SqlAlchemyRepository(Generic[ModelType]):
    """Keyed storage for one model class on top of a SQLAlchemy session."""

    model: Type[ModelType]

    def __init__(self, session: Session):
        self.session = session

    def _base_query(self):
        return self.session.query(self.model)

    def get(self, entity_id: int) -> Optional[ModelType]:
        return self._base_query().filter(self.model.id == entity_id).first()

    def exists(self, entity_id: int) -> bool:
        return self.session.query(self.model.id).filter(self.model.id == entity_id).first() is not None

    def list_all(self) -> List[ModelType]:
        return self._base_query().order_by(self.model.id).all()

    def find_all(self, predicate: Predicate, plan: FetchPlan) -> Tuple[List[ModelType], int]:
        """Matching slice for the plan and the total number of matches."""
        return apply_fetch_plan(self.list_all(), predicate, plan)

    def add(self, entity: ModelType) -> ModelType:
        self.session.add(entity)
        return entity

    def delete(self, entity: ModelType):
        self.session.delete(entity)

    def commit(self):
        """Commit the unit of work, translating storage failures."""
        try:
            self.session.commit()
        except StaleDataError as e:
            self.session.rollback()
            logger.warning(f"Concurrent modification of {self.model.__name__}: {e}")
            raise ConflictError(
                f"{self.model.__name__} was modified by another request, reload and retry"
            ) from e
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Database error while saving {self.model.__name__}: {e}", exc_info=True)
            raise InternalError("A storage error occurred") from e

    def save(self, entity: ModelType) -> ModelType:
        self.add(entity)
        self.commit()
        self.session.refresh(entity)
        return entity

