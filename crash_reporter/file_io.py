"""带大小上限的崩溃文件读取。"""
from __future__ import annotations
import os

from config.constants import DEFAULT_MAX_BYTES


def read_text_limited(path: str, max_bytes: int = DEFAULT_MAX_BYTES) -> str:
    """读取崩溃文件；超出上限时保留头尾。

    异常头在文件开头，二进制镜像列表在末尾，因此丢弃中间部分并以
    '...[FILE TRUNCATED]...' 标记替代。OSError 交给调用方处理。
    """
    size = os.path.getsize(path)
    if size <= max_bytes:
        with open(path, "r", encoding="utf-8", errors="ignore") as f:
            return f.read()

    half = max_bytes // 2
    with open(path, "rb") as f:
        head = f.read(half)
        f.seek(max(0, size - half), os.SEEK_SET)
        tail = f.read()
    head_text = head.decode("utf-8", errors="ignore")
    tail_text = tail.decode("utf-8", errors="ignore")
    return f"{head_text}\n\n...[FILE TRUNCATED {size} bytes -> {len(head) + len(tail)} bytes]...\n\n{tail_text}"
