"""
供应商管理路由
"""
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from hotelops.database import get_db
from hotelops.models.schemas import SupplierCreate, SupplierResponse
from hotelops.routers.deps import Page, pagination
from hotelops.security.auth import CurrentActor, require_admin, require_staff_or_admin
from hotelops.services.supplier_service import SupplierService

router = APIRouter(prefix="/suppliers", tags=["供应商管理"])


@router.get("", response_model=List[SupplierResponse])
def list_suppliers(
    active_only: bool = False,
    page: Page = Depends(pagination),
    db: Session = Depends(get_db),
    actor: CurrentActor = Depends(require_staff_or_admin)
):
    """获取供应商列表"""
    return SupplierService(db).list_suppliers(active_only, page.limit, page.offset)


@router.get("/{supplier_id}", response_model=SupplierResponse)
def get_supplier(
    supplier_id: int,
    db: Session = Depends(get_db),
    actor: CurrentActor = Depends(require_staff_or_admin)
):
    """获取供应商详情"""
    supplier = SupplierService(db).get_supplier(supplier_id)
    if not supplier:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="供应商不存在")
    return supplier


@router.post("", response_model=SupplierResponse, status_code=status.HTTP_201_CREATED)
def create_supplier(
    data: SupplierCreate,
    db: Session = Depends(get_db),
    actor: CurrentActor = Depends(require_admin)
):
    """创建供应商"""
    return SupplierService(db).create_supplier(data)


@router.post("/{supplier_id}/deactivate", response_model=SupplierResponse)
def deactivate_supplier(
    supplier_id: int,
    db: Session = Depends(get_db),
    actor: CurrentActor = Depends(require_admin)
):
    """停用供应商"""
    return SupplierService(db).deactivate_supplier(supplier_id)
