from __future__ import annotations
from functools import wraps
from typing import Callable, TypeVar

T = TypeVar("T")


class AppError(Exception):
    """崩溃上报基础异常"""


class UserError(AppError):
    """输入问题，可由用户修正（崩溃文件不存在、未知系统标签等）"""


class AnalysisError(AppError):
    """处理崩溃日志时的意外错误"""


def error_handler(func: Callable[..., T]) -> Callable[..., T]:
    """把非 AppError 的异常包装为 AnalysisError，保留原始异常链。"""
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except AppError:
            raise
        except Exception as exc:
            raise AnalysisError(f"{func.__name__}: {exc}") from exc
    return wrapper
