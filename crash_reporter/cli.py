from __future__ import annotations

import argparse
import json
import logging
import os
import sys
import time
from dataclasses import asdict
from typing import Optional

from config.app_config import AppConfig
from config.constants import CONFIG_FILE, OS_IOS, SUPPORTED_OS

from .device import BaseDevice
from .errors import AppError, UserError, error_handler
from .events import EventTypes
from .file_io import read_text_limited
from .paths import parse_path, should_show_crash_notification
from .plugin import CrashReporterPlugin, get_new_persisted_state_from_crash_log
from .reporter import CrashReporter
from .watcher import DiagnosticReportsWatcher

logger = logging.getLogger(__name__)


def _read_crash_file(path: str, cfg: AppConfig) -> str:
    if not os.path.isfile(path):
        raise UserError(f"Crash file not found: {path}")
    try:
        return read_text_limited(path, cfg.max_read_bytes)
    except OSError as e:
        raise UserError(f"Cannot read crash file {path}: {e}") from e


@error_handler
def _cmd_parse(args: argparse.Namespace, cfg: AppConfig) -> int:
    if args.os not in SUPPORTED_OS:
        raise UserError(f"Unsupported OS tag: {args.os} (expected one of {', '.join(SUPPORTED_OS)})")
    content = _read_crash_file(args.file, cfg)
    plugin = CrashReporterPlugin(plugin_id=cfg.plugin_id)
    state = get_new_persisted_state_from_crash_log(plugin.default_persisted_state, plugin, content, args.os)
    crash = state.crashes[-1]
    if args.json:
        data = asdict(crash)
        if not args.callstack:
            data.pop("callstack")
        print(json.dumps(data, ensure_ascii=False, indent=2))
    else:
        print(f"name:   {crash.name}")
        print(f"reason: {crash.reason}")
        if args.callstack:
            print(crash.callstack)
    return 0


@error_handler
def _cmd_path(args: argparse.Namespace, cfg: AppConfig) -> int:
    content = _read_crash_file(args.file, cfg)
    path = parse_path(content)
    print(path if path is not None else "(no path)")
    if args.serial:
        device = BaseDevice(args.serial, os=OS_IOS)
        show = should_show_crash_notification(device, content)
        print(f"notify {args.serial}: {'yes' if show else 'no'}")
    return 0


def _cmd_watch(args: argparse.Namespace, cfg: AppConfig) -> int:
    reporter = CrashReporter(CrashReporterPlugin(plugin_id=cfg.plugin_id))
    reporter.select(BaseDevice(args.serial, os=OS_IOS), args.app)

    def _print_notification(event) -> None:
        notification = event.payload["notification"]
        print(f"[{notification.id}] {notification.title}", flush=True)

    reporter.event_bus.subscribe(EventTypes.CRASH_NOTIFICATION, _print_notification)

    watcher = DiagnosticReportsWatcher(
        reporter,
        reports_dir=os.path.expanduser(args.dir or cfg.reports_dir),
        suffix=cfg.crash_file_suffix,
        max_bytes=cfg.max_read_bytes,
    )
    watcher.start()
    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        pass
    finally:
        watcher.stop()
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="crash-reporter")
    parser.add_argument("--config", default=os.getenv("CRASH_REPORTER_CONFIG", CONFIG_FILE))
    parser.add_argument(
        "--log-level",
        default=None,
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Override the configured log level",
    )

    sub = parser.add_subparsers(dest="cmd", required=True)

    p_parse = sub.add_parser("parse", help="Extract crash name and reason from a crash log")
    p_parse.add_argument("file")
    p_parse.add_argument("--os", required=True, help="OS tag: iOS or Android")
    p_parse.add_argument("--json", action="store_true")
    p_parse.add_argument("--callstack", action="store_true", help="Also print the raw log")
    p_parse.set_defaults(func=_cmd_parse)

    p_path = sub.add_parser("path", help="Show the app path embedded in an iOS crash log")
    p_path.add_argument("file")
    p_path.add_argument("--serial", default=None, help="Simulator id to check the path against")
    p_path.set_defaults(func=_cmd_path)

    p_watch = sub.add_parser("watch", help="Watch the DiagnosticReports folder for a simulator's crashes")
    p_watch.add_argument("dir", nargs="?", default=None)
    p_watch.add_argument("--serial", required=True, help="Selected simulator id")
    p_watch.add_argument("--app", default=None, help="Selected app id")
    p_watch.set_defaults(func=_cmd_watch)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    cfg = AppConfig.load(args.config)
    logging.basicConfig(
        level=args.log_level or cfg.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        return int(args.func(args, cfg))
    except UserError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    except AppError as e:
        logger.error("crash-reporter failed: %s", e)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
