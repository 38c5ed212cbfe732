"""
数据库配置 - SQLAlchemy 持久化层
多行写入统一通过 transaction() / run_in_transaction() 包裹，失败时整体回滚
"""
import logging
from contextlib import contextmanager
from typing import Callable, Iterator, TypeVar

from sqlalchemy import create_engine, text
from sqlalchemy.orm import Session, sessionmaker, declarative_base
from sqlalchemy.orm.exc import StaleDataError

from hotelops.config import settings
from hotelops.exceptions import HotelOpsError

logger = logging.getLogger(__name__)

T = TypeVar("T")

_is_sqlite = settings.DATABASE_URL.startswith("sqlite")

engine = create_engine(
    settings.DATABASE_URL,
    connect_args={"check_same_thread": False} if _is_sqlite else {},
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """依赖注入：获取数据库会话"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    """初始化数据库表"""
    from hotelops.models import ontology  # noqa
    Base.metadata.create_all(bind=engine)

    if _is_sqlite and ":memory:" not in settings.DATABASE_URL:
        # 启用 WAL 模式以提高并发性能
        with engine.connect() as conn:
            conn.execute(text("PRAGMA journal_mode=WAL"))
            conn.execute(text("PRAGMA synchronous=NORMAL"))
            conn.commit()


@contextmanager
def transaction(db: Session) -> Iterator[Session]:
    """事务作用域：正常退出时提交，任何异常都回滚后继续抛出"""
    try:
        yield db
        db.commit()
    except (HotelOpsError, StaleDataError):
        db.rollback()
        raise
    except Exception:
        db.rollback()
        logger.error("Transaction rolled back", exc_info=True)
        raise


def run_in_transaction(db: Session, fn: Callable[[Session], T]) -> T:
    """在单个事务中执行 fn(db) 并返回其结果"""
    with transaction(db):
        return fn(db)
