"""
Relational recipe store backed by SQLAlchemy.

This backend is selected with RECIPE_STORAGE=database (the default whenever
DATABASE_URL is set). It pushes filtering, ordering and pagination down to
the database:

- Ingredient and tag search matches each list element on its own, through
  unnest() on PostgreSQL and json_each() on SQLite, so separators and JSON
  quoting never take part in a match
- On PostgreSQL, tag filtering uses array containment (tags @> ARRAY[...]);
  on SQLite (tests, local runs) every wanted tag must equal a json_each() element

Concurrency control is left to the database; concurrent updates of the same
recipe are last-write-wins. Database errors are rolled back, logged and
re-raised as InternalError.
"""

import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Callable, Iterator, List, Optional

from sqlalchemy import Text, and_, column, func, or_, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from cookbook.db import RecipeRow, create_session_factory, init_db, is_postgres
from cookbook.exceptions import InternalError
from cookbook.models import DEFAULT_AUTHOR_ID, Recipe, RecipeCreate, RecipeUpdate
from cookbook.storage.base import (
    ORDERINGS,
    RecipeStorage,
    ensure_complete,
    ensure_valid_changes,
    validate_criterion,
    validate_page,
)

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite hands back naive datetimes; everything we store is UTC.
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _to_recipe(row: RecipeRow) -> Recipe:
    return Recipe(
        id=row.id,
        name=row.name,
        description=row.description,
        ingredients=list(row.ingredients or []),
        instructions=list(row.instructions or []),
        image_url=row.image_url,
        prep_time=row.prep_time,
        cook_time=row.cook_time,
        servings=row.servings,
        tags=list(row.tags or []),
        author_id=row.author_id,
        rating=row.rating or 0,
        rating_count=row.rating_count or 0,
        created_at=_as_utc(row.created_at),
        updated_at=_as_utc(row.updated_at),
    )


def _order_by(criterion: str) -> list:
    """ORDER BY clauses matching ORDERINGS[criterion]."""
    field, direction, id_direction = ORDERINGS[criterion]
    if field == "name":
        primary = [func.lower(RecipeRow.name), RecipeRow.name]
    elif field == "rating":
        primary = [func.coalesce(RecipeRow.rating, 0)]
    else:
        primary = [getattr(RecipeRow, field)]

    clauses = [key.desc() if direction == "desc" else key.asc() for key in primary]
    clauses.append(RecipeRow.id.desc() if id_direction == "desc" else RecipeRow.id.asc())
    return clauses


class SqlRecipeStorage(RecipeStorage):
    """Recipe store persisting to the `recipes` table."""
    backend = "database"

    def __init__(self, engine: Engine, clock: Callable[[], datetime] = _utcnow, create_tables: bool = True):
        self._engine = engine
        self._session_factory = create_session_factory(engine)
        self._postgres = is_postgres(engine)
        self._clock = clock
        if create_tables:
            init_db(engine)

    @contextmanager
    def _session(self) -> Iterator[Session]:
        db = self._session_factory()
        try:
            yield db
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Database error in recipe store: {e}")
            raise InternalError("Database operation failed") from e
        finally:
            db.close()

    def _list(self, criterion: str, limit: int, offset: int, *conditions) -> List[Recipe]:
        with self._session() as db:
            query = db.query(RecipeRow)
            if conditions:
                query = query.filter(*conditions)
            rows = query.order_by(*_order_by(criterion)).offset(offset).limit(limit).all()
            return [_to_recipe(row) for row in rows]

    def _elements(self, list_column):
        """A list column as a one-column table of its elements, named value."""
        if self._postgres:
            return func.unnest(list_column).table_valued(column("value", Text)).render_derived()
        return func.json_each(list_column).table_valued(column("value", Text))

    def _any_element(self, list_column, condition):
        """EXISTS clause: condition(value) holds for some element of a list column."""
        elements = self._elements(list_column)
        return (
            select(1)
            .select_from(elements)
            .where(condition(elements.c.value))
            .correlate(RecipeRow)
            .exists()
        )

    def get_many(self, limit: int, offset: int) -> List[Recipe]:
        return self.sort_by("newest", limit, offset)

    def get_by_id(self, recipe_id: int) -> Optional[Recipe]:
        with self._session() as db:
            row = db.get(RecipeRow, recipe_id)
            return _to_recipe(row) if row is not None else None

    def get_by_author(self, author_id: int) -> List[Recipe]:
        with self._session() as db:
            rows = (
                db.query(RecipeRow)
                .filter(RecipeRow.author_id == author_id)
                .order_by(RecipeRow.id.asc())
                .all()
            )
            return [_to_recipe(row) for row in rows]

    def count(self) -> int:
        with self._session() as db:
            return db.query(RecipeRow).count()

    def create(self, recipe: RecipeCreate) -> Recipe:
        ensure_complete(recipe)
        data = recipe.model_dump(exclude={"author_id"})
        with self._session() as db:
            row = RecipeRow(
                **data,
                author_id=DEFAULT_AUTHOR_ID,
                rating=0,
                rating_count=0,
                created_at=self._clock(),
                updated_at=None,
            )
            db.add(row)
            db.commit()
            db.refresh(row)
            logger.debug(f"Created recipe {row.id} in database")
            return _to_recipe(row)

    def update(self, recipe_id: int, changes: RecipeUpdate) -> Optional[Recipe]:
        updates = changes.changes()
        ensure_valid_changes(updates)
        with self._session() as db:
            row = db.get(RecipeRow, recipe_id)
            if row is None:
                return None
            if updates:
                for field, value in updates.items():
                    setattr(row, field, value)
                row.updated_at = self._clock()
                db.commit()
                db.refresh(row)
            return _to_recipe(row)

    def delete(self, recipe_id: int) -> bool:
        with self._session() as db:
            deleted = db.query(RecipeRow).filter(RecipeRow.id == recipe_id).delete()
            db.commit()
            return deleted > 0

    def search(self, query: str, limit: int, offset: int) -> List[Recipe]:
        validate_page(limit, offset)
        needle = (query or "").strip()
        if not needle:
            return self.get_many(limit, offset)
        condition = or_(
            RecipeRow.name.icontains(needle, autoescape=True),
            RecipeRow.description.icontains(needle, autoescape=True),
            self._any_element(RecipeRow.ingredients, lambda value: value.icontains(needle, autoescape=True)),
            self._any_element(RecipeRow.tags, lambda value: value.icontains(needle, autoescape=True)),
        )
        return self._list("newest", limit, offset, condition)

    def filter_by_tags(self, tags: List[str], limit: int, offset: int) -> List[Recipe]:
        validate_page(limit, offset)
        wanted = list(dict.fromkeys(tags))
        if not wanted:
            return self.get_many(limit, offset)
        if self._postgres:
            condition = RecipeRow.tags.contains(wanted)
        else:
            condition = and_(*[self._any_element(RecipeRow.tags, lambda value, tag=tag: value == tag) for tag in wanted])
        return self._list("newest", limit, offset, condition)

    def sort_by(self, criterion: str, limit: int, offset: int) -> List[Recipe]:
        validate_criterion(criterion)
        validate_page(limit, offset)
        return self._list(criterion, limit, offset)

    def close(self) -> None:
        self._engine.dispose()
