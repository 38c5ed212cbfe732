"""
菜单服务 - 管理 MenuItem 对象
"""
from typing import List, Optional
import logging

from sqlalchemy.orm import Session

from hotelops.exceptions import ConflictError, NotFoundError
from hotelops.models.ontology import MenuItem, FoodOrderItem
from hotelops.models.schemas import MenuItemCreate, MenuItemUpdate

logger = logging.getLogger(__name__)


class MenuService:
    """菜单服务"""

    def __init__(self, db: Session):
        self.db = db

    def get_menu_item(self, item_id: int) -> Optional[MenuItem]:
        return self.db.query(MenuItem).filter(MenuItem.id == item_id).first()

    def list_menu_items(self, category: Optional[str] = None, available_only: bool = False,
                        limit: int = 50, offset: int = 0) -> List[MenuItem]:
        """获取菜单，按分类和名称排序"""
        query = self.db.query(MenuItem)
        if category:
            query = query.filter(MenuItem.category == category)
        if available_only:
            query = query.filter(MenuItem.is_available.is_(True))
        return query.order_by(MenuItem.category, MenuItem.name).offset(offset).limit(limit).all()

    def list_categories(self) -> List[str]:
        rows = self.db.query(MenuItem.category).distinct().order_by(MenuItem.category).all()
        return [r[0] for r in rows]

    def create_menu_item(self, data: MenuItemCreate) -> MenuItem:
        item = MenuItem(**data.model_dump())
        self.db.add(item)
        self.db.commit()
        self.db.refresh(item)
        logger.info(f"Menu item {item.id} '{item.name}' created")
        return item

    def update_menu_item(self, item_id: int, data: MenuItemUpdate) -> MenuItem:
        item = self.get_menu_item(item_id)
        if not item:
            raise NotFoundError("菜品不存在")

        for key, value in data.model_dump(exclude_unset=True).items():
            setattr(item, key, value)

        self.db.commit()
        self.db.refresh(item)
        return item

    def delete_menu_item(self, item_id: int) -> bool:
        """删除菜品，已被订单引用的菜品只能下架"""
        item = self.get_menu_item(item_id)
        if not item:
            raise NotFoundError("菜品不存在")

        referenced = self.db.query(FoodOrderItem).filter(
            FoodOrderItem.menu_item_id == item_id
        ).count()
        if referenced:
            raise ConflictError("菜品已被订单引用，无法删除，请改为下架")

        self.db.delete(item)
        self.db.commit()
        return True
