# app/domains/cst/crud.py

"""
'cst' 도메인 (고객/주소)과 관련된 CRUD 로직을 담당하는 모듈입니다.
비즈니스 규칙 검증은 services.py에서 수행하며, 이 모듈은 조회/저장만 담당합니다.
"""

from typing import List, Optional, Iterable
import logging

from sqlalchemy import func, or_, update
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.crud_base import CRUDBase
from . import models as cst_models
from . import schemas as cst_schemas


logger = logging.getLogger(__name__)


# =============================================================================
# 1. 고객 (Customer) CRUD
# =============================================================================
class CRUDCustomer(
    CRUDBase[
        cst_models.Customer,
        cst_schemas.CustomerCreate,
        cst_schemas.CustomerUpdate
    ]
):
    def __init__(self):
        super().__init__(model=cst_models.Customer)

    async def get_by_email(
        self, db: AsyncSession, *, email: str, exclude_id: Optional[int] = None
    ) -> Optional[cst_models.Customer]:
        """이메일(대소문자 무시)로 고객을 조회합니다. exclude_id가 주어지면 해당 고객은 제외합니다."""
        conditions = [func.lower(self.model.email) == email.lower()]
        if exclude_id is not None:
            conditions.append(self.model.id != exclude_id)
        return await self.get_one_filtered(db, conditions=conditions)

    async def count_by_email_domain(
        self, db: AsyncSession, *, domain: str, exclude_id: Optional[int] = None
    ) -> int:
        """같은 이메일 도메인(@domain)을 사용하는 고객 수를 반환합니다."""
        conditions = [func.lower(self.model.email).like(f"%@{domain.lower()}")]
        if exclude_id is not None:
            conditions.append(self.model.id != exclude_id)
        return await self.count(db, conditions=conditions)

    async def search(
        self,
        db: AsyncSession,
        *,
        filters: cst_schemas.CustomerQueryFilter,
        with_ids: Optional[Iterable[int]] = None,
        without_ids: Optional[Iterable[int]] = None,
    ) -> List[cst_models.Customer]:
        """목록 필터(부분 일치)와 포함/제외 ID 집합을 조건식으로 조합해 조회합니다."""
        conditions = []
        if filters.name:
            conditions.append(self.model.name.ilike(f"%{filters.name}%"))
        if filters.email:
            conditions.append(self.model.email.ilike(f"%{filters.email}%"))
        if filters.phone:
            conditions.append(self.model.phone.contains(filters.phone))
        if with_ids is not None:
            conditions.append(self.model.id.in_(list(with_ids)))
        if without_ids is not None:
            conditions.append(self.model.id.not_in(list(without_ids)))
        return await self.get_filtered(db, conditions=conditions)


# =============================================================================
# 2. 주소 (Address) CRUD
# =============================================================================
class CRUDAddress(
    CRUDBase[
        cst_models.Address,
        cst_schemas.AddressCreate,
        cst_schemas.AddressUpdate
    ]
):
    def __init__(self):
        super().__init__(model=cst_models.Address)

    async def get_by_customer(self, db: AsyncSession, *, customer_id: int) -> List[cst_models.Address]:
        """고객의 주소 목록을 기본 주소 우선으로 조회합니다."""
        return await self.get_filtered(
            db,
            conditions=[self.model.customer_id == customer_id],
            order_by=[self.model.is_default.desc(), self.model.id],
        )

    async def get_default(
        self, db: AsyncSession, *, customer_id: int, address_type: cst_models.AddressType
    ) -> Optional[cst_models.Address]:
        return await self.get_one_filtered(
            db,
            conditions=[
                self.model.customer_id == customer_id,
                self.model.type == address_type,
                self.model.is_default.is_(True),
                self.model.is_active.is_(True),
            ],
        )

    async def count_active(self, db: AsyncSession, *, customer_id: int) -> int:
        return await self.count(
            db,
            conditions=[self.model.customer_id == customer_id, self.model.is_active.is_(True)],
        )

    async def has_default(
        self,
        db: AsyncSession,
        *,
        customer_id: int,
        address_type: cst_models.AddressType,
        exclude_id: Optional[int] = None,
    ) -> bool:
        """(고객, 유형)에 활성 기본 주소가 있는지 확인합니다. exclude_id 주소는 제외합니다."""
        conditions = [
            self.model.customer_id == customer_id,
            self.model.type == address_type,
            self.model.is_default.is_(True),
            self.model.is_active.is_(True),
        ]
        if exclude_id is not None:
            conditions.append(self.model.id != exclude_id)
        return await self.exists(db, conditions=conditions)

    async def unset_defaults(
        self,
        db: AsyncSession,
        *,
        customer_id: int,
        address_type: cst_models.AddressType,
        exclude_id: Optional[int] = None,
    ) -> None:
        """(고객, 유형)의 다른 주소들의 기본 주소 표시를 해제합니다. 커밋은 호출자가 수행합니다."""
        statement = (
            update(self.model)
            .where(
                self.model.customer_id == customer_id,
                self.model.type == address_type,
                self.model.is_default.is_(True),
            )
            .values(is_default=False)
            .execution_options(synchronize_session="fetch")
        )
        if exclude_id is not None:
            statement = statement.where(self.model.id != exclude_id)
        await db.execute(statement)
        await db.flush()

    async def search(
        self, db: AsyncSession, *, filters: cst_schemas.AddressQueryFilter
    ) -> List[cst_models.Address]:
        conditions = []
        if filters.customer_id is not None:
            conditions.append(self.model.customer_id == filters.customer_id)
        if filters.city:
            conditions.append(self.model.city.ilike(f"%{filters.city}%"))
        if filters.department:
            conditions.append(func.lower(self.model.department) == filters.department.lower())
        if filters.zone:
            conditions.append(self.model.zone.ilike(f"%{filters.zone}%"))
        if filters.type is not None:
            conditions.append(self.model.type == filters.type)
        if filters.is_default is not None:
            conditions.append(self.model.is_default.is_(filters.is_default))
        if filters.is_active is not None:
            conditions.append(self.model.is_active.is_(filters.is_active))
        if filters.search_text:
            pattern = f"%{filters.search_text}%"
            conditions.append(
                or_(
                    self.model.street.ilike(pattern),
                    self.model.reference.ilike(pattern),
                    self.model.alias.ilike(pattern),
                )
            )
        return await self.get_filtered(db, conditions=conditions)


customer = CRUDCustomer()
address = CRUDAddress()
