from typing import Generic, List, Optional, Type, TypeVar

import psycopg2
from fastapi import HTTPException, status
from pydantic import BaseModel
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.declarative import DeclarativeMeta
from sqlalchemy.orm import Query, Session

from app.core.exceptions.api_exceptions import NotFound
from app.core.logger import logger

ModelType = TypeVar('ModelType', bound=DeclarativeMeta)
CreateSchemaType = TypeVar('CreateSchemaType', bound=BaseModel)
UpdateSchemaType = TypeVar('UpdateSchemaType', bound=BaseModel)


class CRUDBase(Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
    def __init__(self, model: Type[ModelType]):
        self.model = model

    def _apply_filters(
        self, query: Query, filters: Optional[BaseModel] = None
    ) -> Query:
        """Override this method to implement filter logic"""
        if not filters:
            return query

        for field, value in filters.model_dump(exclude_none=True).items():
            if hasattr(self.model, field):
                query = query.filter(getattr(self.model, field) == value)
        return query

    def _commit(self, db: Session, db_obj: ModelType) -> ModelType:
        try:
            db.commit()
        except IntegrityError as e:
            logger.error('Error saving %s: %s', self.model.__name__, str(e))
            db.rollback()
            orig = str(e.orig)
            detail = 'Integrity error'
            if isinstance(e.orig, psycopg2.errors.UniqueViolation) and 'DETAIL' in orig:
                error_detail = orig.split('DETAIL: ')[1].split('\n')[0].strip()
                if '(' in error_detail and ')' in error_detail:
                    keys = error_detail.split('(')[1].split(')')[0]
                    resource = self.model.__name__
                    detail = f'It already exists a {resource} with this {keys}'
            logger.error('Integrity error: %s', detail)
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=detail)
        db.refresh(db_obj)
        return db_obj

    def create(self, db: Session, obj: CreateSchemaType) -> ModelType:
        """Create a new record."""
        obj_data = obj.model_dump()
        model_columns = self.model.__table__.columns.keys()
        filtered_data = {k: v for k, v in obj_data.items() if k in model_columns}

        db_obj = self.model(**filtered_data)
        db.add(db_obj)
        return self._commit(db, db_obj)

    def get(self, db: Session, id: str) -> ModelType:
        """Get a single record by id."""
        obj = db.query(self.model).filter(self.model.id == id).first()
        if not obj:
            logger.error('%s %s not found', self.model.__name__, id)
            raise NotFound(self.model.__name__)
        return obj

    def find(
        self,
        db: Session,
        skip: int = 0,
        limit: Optional[int] = None,
        filters: Optional[BaseModel] = None,
        sort_by: str = 'created_at',
        sort_order: str = 'desc',
    ) -> List[ModelType]:
        """Get multiple records with pagination, filters and sorting."""
        query = db.query(self.model)
        query = self._apply_filters(query, filters)

        if not hasattr(self.model, sort_by):
            raise HTTPException(
                status_code=400, detail=f'Invalid sort field: {sort_by}'
            )

        order_by = getattr(self.model, sort_by)
        if sort_order == 'desc':
            order_by = order_by.desc()

        query = query.order_by(order_by).offset(skip)
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    def update(self, db: Session, id: str, obj: UpdateSchemaType) -> ModelType:
        """Update a record."""
        db_obj = self.get(db, id)  # This will raise 404 if not found
        obj_data = obj.model_dump(exclude_unset=True)

        for field, value in obj_data.items():
            setattr(db_obj, field, value)

        return self._commit(db, db_obj)

    def delete(self, db: Session, id: str) -> ModelType:
        """Delete a record."""
        obj = self.get(db, id)  # This will raise 404 if not found
        db.delete(obj)
        db.commit()
        return obj
