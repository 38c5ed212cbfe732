"""
菜单管理路由
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from hotelops.database import get_db
from hotelops.models.schemas import MenuItemCreate, MenuItemUpdate, MenuItemResponse
from hotelops.routers.deps import Page, pagination
from hotelops.security.auth import CurrentActor, get_current_actor, require_admin
from hotelops.services.menu_service import MenuService

router = APIRouter(prefix="/menu", tags=["菜单管理"])


@router.get("", response_model=List[MenuItemResponse])
def list_menu_items(
    category: Optional[str] = None,
    available_only: bool = False,
    page: Page = Depends(pagination),
    db: Session = Depends(get_db),
    actor: CurrentActor = Depends(get_current_actor)
):
    """获取菜单"""
    return MenuService(db).list_menu_items(category, available_only, page.limit, page.offset)


@router.get("/categories", response_model=List[str])
def list_categories(
    db: Session = Depends(get_db),
    actor: CurrentActor = Depends(get_current_actor)
):
    """获取菜品分类"""
    return MenuService(db).list_categories()


@router.get("/{item_id}", response_model=MenuItemResponse)
def get_menu_item(
    item_id: int,
    db: Session = Depends(get_db),
    actor: CurrentActor = Depends(get_current_actor)
):
    """获取菜品详情"""
    item = MenuService(db).get_menu_item(item_id)
    if not item:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="菜品不存在")
    return item


@router.post("", response_model=MenuItemResponse, status_code=status.HTTP_201_CREATED)
def create_menu_item(
    data: MenuItemCreate,
    db: Session = Depends(get_db),
    actor: CurrentActor = Depends(require_admin)
):
    """创建菜品"""
    return MenuService(db).create_menu_item(data)


@router.put("/{item_id}", response_model=MenuItemResponse)
def update_menu_item(
    item_id: int,
    data: MenuItemUpdate,
    db: Session = Depends(get_db),
    actor: CurrentActor = Depends(require_admin)
):
    """更新菜品"""
    return MenuService(db).update_menu_item(item_id, data)


@router.delete("/{item_id}")
def delete_menu_item(
    item_id: int,
    db: Session = Depends(get_db),
    actor: CurrentActor = Depends(require_admin)
):
    """删除菜品"""
    MenuService(db).delete_menu_item(item_id)
    return {"message": "删除成功"}
