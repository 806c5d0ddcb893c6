"""
Companies API Endpoints.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from smartcrm.core.database import get_session
from smartcrm.core.database.entities import Company
from smartcrm.server.schemas import CompanyCreate, CompanyRead

router = APIRouter()


@router.post(
    "",
    response_model=CompanyRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Company",
)
async def create_company(
    company_in: CompanyCreate,
    session: AsyncSession = Depends(get_session),
) -> CompanyRead:
    """Create a company."""
    company = Company.model_validate(company_in)
    session.add(company)
    await session.commit()
    await session.refresh(company)
    return CompanyRead.model_validate(company)


@router.get(
    "",
    response_model=list[CompanyRead],
    summary="List Companies",
    description="List companies by name.",
)
async def list_companies(
    limit: int = 100,
    offset: int = 0,
    session: AsyncSession = Depends(get_session),
) -> list[CompanyRead]:
    """List companies."""
    statement = select(Company).order_by(Company.name).offset(offset).limit(limit)
    result = await session.execute(statement)
    return [CompanyRead.model_validate(c) for c in result.scalars().all()]
