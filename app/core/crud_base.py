# app/core/crud_base.py

"""
공통 CRUD(Create, Read, Update, Delete) 작업을 위한 기본 클래스 모듈입니다.
모든 메서드는 비동기(async) 환경에 맞게 작성되었습니다.

쓰기 메서드는 `commit` 인자를 받습니다. 하나의 서비스 작업이 여러 레코드를 변경할 때는
`commit=False`로 변경 사항을 flush만 해 두고, 서비스가 마지막에 한 번 커밋합니다.
"""

from typing import Generic, List, Optional, Sequence, Type, TypeVar, Any, Dict, Union

from sqlalchemy import func
from sqlalchemy.sql.elements import ColumnElement
from sqlmodel import SQLModel, select
from sqlmodel.ext.asyncio.session import AsyncSession
from pydantic import BaseModel

ModelType = TypeVar("ModelType", bound=SQLModel)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=BaseModel)


class CRUDBase(Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
    """
    모든 CRUD 작업에 대한 기본 클래스를 정의합니다.
    """
    def __init__(self, model: Type[ModelType]):
        self.model = model

    async def get(self, db: AsyncSession, id: Any) -> Optional[ModelType]:
        """
        ID를 기준으로 단일 레코드를 조회합니다.
        """
        return await db.get(self.model, id)

    async def get_multi(
        self, db: AsyncSession, *, skip: int = 0, limit: Optional[int] = None, **kwargs: Any
    ) -> List[ModelType]:
        """
        여러 레코드를 조회합니다. 동등 비교 필터를 위한 키워드 인자를 지원합니다.
        """
        query = select(self.model)

        for field, value in kwargs.items():
            if hasattr(self.model, field):
                query = query.where(getattr(self.model, field) == value)

        query = query.order_by(self.model.id).offset(skip)
        if limit is not None:
            query = query.limit(limit)

        result = await db.execute(query)
        return list(result.scalars().all())

    async def get_by_attribute(
        self, db: AsyncSession, *, attribute: str, value: Any
    ) -> Optional[ModelType]:
        statement = select(self.model).where(getattr(self.model, attribute) == value)
        response = await db.execute(statement)
        return response.scalars().first()

    async def get_filtered(
        self,
        db: AsyncSession,
        *,
        conditions: Optional[Sequence[ColumnElement]] = None,  # 타입이 지정된 SQLAlchemy 조건식 목록
        order_by: Optional[Sequence[Any]] = None,              # 정렬 기준 컬럼/표현식
        skip: int = 0,
        limit: Optional[int] = None,
    ) -> List[ModelType]:
        """
        조건식 목록을 AND로 결합한 다중 조회.
        조건이 없으면 전체 레코드를 반환합니다. (기본 정렬: id 오름차순)
        """
        query = select(self.model)
        if conditions:
            query = query.where(*conditions)

        if order_by:
            query = query.order_by(*order_by)
        else:
            query = query.order_by(self.model.id)

        if skip:
            query = query.offset(skip)
        if limit is not None:
            query = query.limit(limit)

        result = await db.execute(query)
        return list(result.scalars().all())

    async def get_one_filtered(
        self, db: AsyncSession, *, conditions: Sequence[ColumnElement]
    ) -> Optional[ModelType]:
        """
        조건을 만족하는 레코드가 여러 개 있더라도 그 중 첫 번째 것을 반환하며,
        조건을 만족하는 레코드가 전혀 없으면 None을 반환합니다.
        """
        query = select(self.model).where(*conditions).order_by(self.model.id)
        response = await db.execute(query)
        return response.scalars().first()

    async def count(
        self, db: AsyncSession, *, conditions: Optional[Sequence[ColumnElement]] = None
    ) -> int:
        """조건을 만족하는 레코드 수를 반환합니다."""
        query = select(func.count()).select_from(self.model)
        if conditions:
            query = query.where(*conditions)
        result = await db.execute(query)
        return int(result.scalar_one())

    async def exists(self, db: AsyncSession, *, conditions: Sequence[ColumnElement]) -> bool:
        return await self.count(db, conditions=conditions) > 0

    async def create(
        self,
        db: AsyncSession,
        *,
        obj_in: Union[CreateSchemaType, Dict[str, Any]],
        commit: bool = True,
    ) -> ModelType:
        """
        새로운 레코드를 생성합니다.
        """
        db_obj = self.model.model_validate(obj_in)
        db.add(db_obj)
        await self._persist(db, db_obj, commit=commit)
        return db_obj

    async def update(
        self,
        db: AsyncSession,
        *,
        db_obj: ModelType,
        obj_in: Union[UpdateSchemaType, Dict[str, Any]],
        commit: bool = True,
    ) -> ModelType:
        """
        기존 레코드를 업데이트합니다. (스키마의 경우 명시적으로 설정된 필드만 반영)
        """
        if isinstance(obj_in, dict):
            update_data = obj_in
        else:
            update_data = obj_in.model_dump(exclude_unset=True)
        for key, value in update_data.items():
            setattr(db_obj, key, value)

        db.add(db_obj)
        await self._persist(db, db_obj, commit=commit)
        return db_obj

    async def delete(self, db: AsyncSession, *, id: Any, commit: bool = True) -> Optional[ModelType]:
        """
        ID를 기준으로 레코드를 삭제합니다.
        """
        db_obj = await db.get(self.model, id)
        if db_obj:
            await db.delete(db_obj)
            if commit:
                await db.commit()
            else:
                await db.flush()
        return db_obj

    @staticmethod
    async def _persist(db: AsyncSession, db_obj: ModelType, *, commit: bool) -> None:
        if commit:
            await db.commit()
            await db.refresh(db_obj)
        else:
            await db.flush()
