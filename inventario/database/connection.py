"""
数据库连接管理
"""
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from sqlalchemy import create_engine, inspect
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import NullPool

from config.database import DatabaseSettings, db_settings
from config.settings import AppSettings, get_settings
from ..models import Base

logger = logging.getLogger(__name__)


class DatabaseManager:
    """数据库管理器"""

    def __init__(self, settings: AppSettings = None, database_settings: DatabaseSettings = None):
        self.settings = settings or get_settings()
        self.database_settings = database_settings or db_settings
        self._engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None

    @property
    def database_path(self) -> Path:
        """数据库文件路径"""
        return self.database_settings.resolve_path(self.settings)

    @property
    def engine(self) -> Engine:
        """获取数据库引擎（延迟创建）"""
        if self._engine is None:
            self.database_path.parent.mkdir(parents=True, exist_ok=True)
            # NullPool: 每个会话独立打开/关闭连接，导入覆盖数据库文件时不残留连接
            self._engine = create_engine(
                self.database_settings.database_url(self.settings),
                poolclass=NullPool,
                connect_args={"timeout": self.database_settings.busy_timeout},
                echo=self.database_settings.echo or self.settings.debug,
            )
            logger.debug(f"数据库引擎已创建: {self.database_path}")
        return self._engine

    @property
    def session_factory(self) -> sessionmaker:
        """获取会话工厂"""
        if self._session_factory is None:
            self._session_factory = sessionmaker(
                autocommit=False,
                autoflush=False,
                expire_on_commit=False,
                bind=self.engine,
            )
        return self._session_factory

    def create_tables(self):
        """创建所有表"""
        Base.metadata.create_all(bind=self.engine)

    def drop_tables(self):
        """删除所有表"""
        Base.metadata.drop_all(bind=self.engine)

    def has_table(self, table_name: str) -> bool:
        """检查表是否存在"""
        return inspect(self.engine).has_table(table_name)

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """会话上下文管理器：成功提交，异常回滚"""
        session = self.session_factory()
        try:
            yield session
            session.commit()
        except Exception as e:
            session.rollback()
            logger.error(f"事务回滚: {e}")
            raise
        finally:
            session.close()

    def dispose(self):
        """释放数据库引擎"""
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
            self._session_factory = None
