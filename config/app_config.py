"""Crash reporter configuration: data class plus JSON load/save logic."""
from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict

from config.constants import (
    CRASH_FILE_SUFFIX,
    DEFAULT_LOG_LEVEL,
    DEFAULT_MAX_BYTES,
    DIAGNOSTIC_REPORTS_DIR,
    PLUGIN_ID,
)

logger = logging.getLogger(__name__)

MAX_CONFIG_SIZE = 1024 * 1024  # 1MB config file size limit

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class AppConfig:
    """崩溃上报配置。

    Attributes:
        plugin_id: 插件标识，用于插件键。
        reports_dir: 监视 iOS ``.crash`` 文件的目录。
        crash_file_suffix: 视为崩溃日志的文件后缀。
        max_read_bytes: 读取单个崩溃文件的上限。
        log_level: CLI 使用的根日志级别。
    """

    plugin_id: str = PLUGIN_ID
    reports_dir: str = DIAGNOSTIC_REPORTS_DIR
    crash_file_suffix: str = CRASH_FILE_SUFFIX
    max_read_bytes: int = DEFAULT_MAX_BYTES
    log_level: str = DEFAULT_LOG_LEVEL
    _mtime: float = field(default=0.0, repr=False)

    def _validate(self) -> None:
        """Validate and fix configuration values."""
        if not isinstance(self.plugin_id, str) or not self.plugin_id:
            self.plugin_id = PLUGIN_ID

        if not isinstance(self.reports_dir, str) or not self.reports_dir:
            self.reports_dir = DIAGNOSTIC_REPORTS_DIR
        self.reports_dir = os.path.expanduser(self.reports_dir)

        if not isinstance(self.crash_file_suffix, str) or not self.crash_file_suffix:
            self.crash_file_suffix = CRASH_FILE_SUFFIX

        try:
            self.max_read_bytes = int(self.max_read_bytes)
        except (ValueError, TypeError):
            self.max_read_bytes = DEFAULT_MAX_BYTES
        if self.max_read_bytes <= 0:
            self.max_read_bytes = DEFAULT_MAX_BYTES

        level = str(self.log_level or "").upper()
        self.log_level = level if level in _LOG_LEVELS else DEFAULT_LOG_LEVEL

    @classmethod
    def load(cls, config_file: str) -> "AppConfig":
        """Load configuration from file, falling back to defaults."""
        cfg = cls()
        if os.path.exists(config_file):
            try:
                file_size = os.path.getsize(config_file)
                if file_size > MAX_CONFIG_SIZE:
                    logger.warning(
                        "Config file too large: %s bytes (max: %s), using defaults",
                        file_size,
                        MAX_CONFIG_SIZE,
                    )
                    cfg._validate()
                    return cfg
            except OSError:
                pass

            try:
                with open(config_file, "r", encoding="utf-8") as f:
                    data = json.load(f)
                cfg.plugin_id = data.get("plugin_id", cfg.plugin_id)
                cfg.reports_dir = data.get("reports_dir", cfg.reports_dir)
                cfg.crash_file_suffix = data.get("crash_file_suffix", cfg.crash_file_suffix)
                cfg.max_read_bytes = data.get("max_read_bytes", cfg.max_read_bytes)
                cfg.log_level = data.get("log_level", cfg.log_level)
                cfg._mtime = os.path.getmtime(config_file)
            except (OSError, ValueError, AttributeError) as e:
                logger.error("Failed to load config from %s: %s", config_file, e)
        cfg._validate()
        return cfg

    def save(self, config_file: str) -> None:
        data: Dict[str, Any] = {
            "plugin_id": self.plugin_id,
            "reports_dir": self.reports_dir,
            "crash_file_suffix": self.crash_file_suffix,
            "max_read_bytes": int(self.max_read_bytes),
            "log_level": self.log_level,
        }
        with open(config_file, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
        try:
            self._mtime = os.path.getmtime(config_file)
        except OSError:
            pass

    def reload_if_changed(self, config_file: str) -> "AppConfig":
        try:
            mtime = os.path.getmtime(config_file)
            if mtime > self._mtime:
                return self.load(config_file)
        except OSError:
            pass
        return self
