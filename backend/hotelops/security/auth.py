"""
认证与授权模块

调用方身份完全来自 JWT：sub 为调用方 ID，role 为 admin / staff / guest。
本服务不保存账号，令牌由外部身份系统签发
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, UTC
from typing import List, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt

from hotelops.config import settings
from hotelops.models.ontology import ActorRole

logger = logging.getLogger(__name__)

security = HTTPBearer()


@dataclass(frozen=True)
class CurrentActor:
    """当前调用方"""
    id: int
    role: ActorRole

    @property
    def is_privileged(self) -> bool:
        return self.role in (ActorRole.ADMIN, ActorRole.STAFF)


def create_access_token(actor_id: int, role: ActorRole,
                        expires_delta: Optional[timedelta] = None) -> str:
    """创建 JWT token"""
    expire = datetime.now(UTC) + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode = {
        "sub": str(actor_id),
        "role": role.value if isinstance(role, ActorRole) else str(role),
        "exp": expire
    }
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_token(token: str) -> dict:
    """解码 JWT token"""
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="无效的认证凭证"
        )


async def get_current_actor(
    credentials: HTTPAuthorizationCredentials = Depends(security)
) -> CurrentActor:
    """获取当前调用方"""
    payload = decode_token(credentials.credentials)

    try:
        actor_id = int(payload.get("sub"))
        role = ActorRole(payload.get("role"))
    except (TypeError, ValueError):
        logger.warning("Rejected token with malformed claims")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="无效的认证凭证"
        )

    return CurrentActor(id=actor_id, role=role)


def require_role(allowed_roles: List[ActorRole]):
    """角色权限验证"""
    async def role_checker(actor: CurrentActor = Depends(get_current_actor)):
        if actor.role not in allowed_roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="权限不足"
            )
        return actor
    return role_checker


# 便捷的角色检查器
require_admin = require_role([ActorRole.ADMIN])
require_staff_or_admin = require_role([ActorRole.ADMIN, ActorRole.STAFF])
