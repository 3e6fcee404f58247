"""
自定义异常类
"""
from typing import Any, Dict, Optional


class InventarioError(Exception):
    """基础异常类"""
    def __init__(
        self,
        message: str,
        code: str = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)


class Cancelled(InventarioError):
    """用户取消操作"""
    def __init__(self, operation: str):
        super().__init__(
            message=f"{operation}已取消",
            code="CANCELLED",
            details={"operation": operation}
        )


class BackupIOError(InventarioError):
    """主数据文件读写失败"""
    def __init__(self, message: str, path: str = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            code="IO_ERROR",
            details={"path": path, **(details or {})}
        )


class StorageBackendError(InventarioError):
    """存储后端错误"""
    def __init__(
        self,
        message: str = "存储后端操作失败",
        code: str = "STORAGE_BACKEND_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message=message, code=code, details=details)


class UnknownCommandError(StorageBackendError):
    """未知命令"""
    def __init__(self, command: str):
        super().__init__(
            message=f"未知命令: {command}",
            code="UNKNOWN_COMMAND",
            details={"command": command}
        )


class NotFoundError(StorageBackendError):
    """资源不存在错误"""
    def __init__(self, resource: str, identifier: Any = None):
        message = f"{resource}不存在"
        if identifier is not None:
            message += f": {identifier}"
        super().__init__(
            message=message,
            code="NOT_FOUND",
            details={"resource": resource, "identifier": identifier}
        )


class ValidationError(StorageBackendError):
    """验证错误"""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            code="VALIDATION_ERROR",
            details=details
        )
