"""Async repository pattern for database access.

Provides a generic base repository with insert, lookup by id, and the
optional-filter query: each repository declares a list of FilterRule
entries, and a query appends one equality predicate per rule whose
criteria value is set. Unset values (None) impose no constraint, and a
criteria object with nothing set scans the whole table.

Example: BookRepository extending BaseRepository.
"""

import logging
from dataclasses import dataclass
from typing import Any, ClassVar, Generic, Sequence, TypeVar
from uuid import UUID

from sqlalchemy import Result, Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.errors import NotFound, store_errors
from core.models.base import Base
from core.observability.otel_setup import operation_span

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Type variable for model classes
# ---------------------------------------------------------------------------

ModelT = TypeVar("ModelT", bound=Base)


# ---------------------------------------------------------------------------
# Declarative filters
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class FilterRule:
    """Maps a criteria attribute to the column it constrains."""

    field: str
    column: Any


def apply_filters(stmt: Select, rules: Sequence[FilterRule], criteria: Any) -> Select:
    """AND an equality predicate onto stmt for every rule whose value is set."""
    for rule in rules:
        value = getattr(criteria, rule.field, None)
        if value is not None:
            stmt = stmt.where(rule.column == value)
    return stmt


def set_fields(rules: Sequence[FilterRule], criteria: Any) -> dict[str, Any]:
    """The subset of criteria values that will become predicates."""
    return {
        rule.field: getattr(criteria, rule.field)
        for rule in rules
        if getattr(criteria, rule.field, None) is not None
    }


# ---------------------------------------------------------------------------
# Base repository
# ---------------------------------------------------------------------------

class BaseRepository(Generic[ModelT]):
    """Generic async repository with insert, get and filtered query.

    Subclass and set `model` and `filter_rules`::

        class AuthorRepository(BaseRepository[Author]):
            model = Author
            filter_rules = (
                FilterRule("name", Author.name),
                FilterRule("country", Author.country),
            )

    Override base_select() and serialize() when the query is a join rather
    than a plain entity select.
    """

    model: type[ModelT]
    filter_rules: ClassVar[Sequence[FilterRule]] = ()
    entity_name: ClassVar[str] = "row"

    def __init__(self, session: AsyncSession):
        self.session = session

    # -- Query building --

    def base_select(self) -> Select:
        return select(self.model)

    def serialize(self, result: Result) -> list[dict]:
        return [row.to_dict() for row in result.scalars().all()]

    # -- Filtered query --

    async def search(self, criteria: Any) -> list[dict]:
        """Return every row matching all set criteria fields (may be empty)."""
        stmt = apply_filters(self.base_select(), self.filter_rules, criteria)
        with operation_span(f"query_{self.entity_name}"):
            async with store_errors(f"query_{self.entity_name}"):
                result = await self.session.execute(stmt)
                return self.serialize(result)

    async def query(self, criteria: Any) -> list[dict]:
        """Like search(), but an empty result raises NotFound."""
        rows = await self.search(criteria)
        if not rows:
            logger.info(
                "no %s matched %s",
                self.entity_name,
                set_fields(self.filter_rules, criteria),
            )
            raise NotFound(self.entity_name)
        return rows

    # -- Get by ID --

    async def get(self, item_id: str | UUID) -> dict | None:
        """Get a single item by ID. A malformed id finds nothing."""
        if not isinstance(item_id, UUID):
            try:
                item_id = UUID(str(item_id))
            except ValueError:
                return None
        stmt = select(self.model).where(self.model.id == item_id)
        async with store_errors(f"get_{self.entity_name}"):
            result = await self.session.execute(stmt)
            row = result.scalar_one_or_none()
        return row.to_dict() if row else None

    async def require(self, item_id: str | UUID) -> dict:
        """Get a single item by ID, raising NotFound if missing."""
        item = await self.get(item_id)
        if item is None:
            raise NotFound(self.entity_name)
        return item

    # -- Create --

    async def create(self, data: dict[str, Any]) -> dict:
        """Insert and commit a new row, returning it with its generated id.

        A failed commit raises StoreFailure and leaves nothing stored.
        """
        item = self.model(**data)
        with operation_span(f"insert_{self.entity_name}"):
            async with store_errors(f"insert_{self.entity_name}"):
                self.session.add(item)
                await self.session.flush()
                # server-side timestamps must be loaded before to_dict()
                await self.session.refresh(item)
                await self.session.commit()
        logger.info("created %s %s", self.entity_name, item.id)
        return item.to_dict()
