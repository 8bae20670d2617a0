import os
import re

# 项目根目录（包含此配置包的文件夹）
ROOT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

# 插件标识
PLUGIN_ID = "CrashReporter"
PLUGIN_KEY_SEPARATOR = "#"
UNKNOWN_KEY_PART = "unknown"

# 系统标签
OS_IOS = "iOS"
OS_ANDROID = "Android"
SUPPORTED_OS = (OS_IOS, OS_ANDROID)

# 无法识别时的占位原因
UNKNOWN_CRASH_REASON = "Cannot figure out the cause"

# 设备消息方法名
CRASH_REPORT_METHOD = "crash-report"

# 通知
NOTIFICATION_SEVERITY = "error"
NOTIFICATION_TITLE_PREFIX = "CRASH: "

# iOS 模拟器崩溃报告目录
DIAGNOSTIC_REPORTS_DIR = os.path.join(os.path.expanduser("~"), "Library", "Logs", "DiagnosticReports")
CRASH_FILE_SUFFIX = ".crash"
# 崩溃文件写到此关键字后才视为完整
CRASH_FILE_COMPLETE_MARKER = "Exception Type:"
# 监视器记住的已上报文件数量上限
MAX_SEEN_CRASH_FILES = 1024

# 读取限制
DEFAULT_MAX_BYTES = 8 * 1024 * 1024       # 单个崩溃文件读取上限 (8MB)

CONFIG_FILE = os.path.join(ROOT_DIR, "crash_reporter_config.json")
DEFAULT_LOG_LEVEL = "INFO"

# 预编译正则表达式模式
# 只看第一个 Exception Type 关键字；\w 仅匹配 ASCII，表情等字符得到空捕获
RE_IOS_EXCEPTION_TYPE = re.compile(r"Exception Type: *(\w*)", flags=re.ASCII)
RE_ANDROID_FIRST_LINE = re.compile(r"^(.*)\n")
RE_ANDROID_FRAME = re.compile(r"^[ \t]+at ", flags=re.MULTILINE)
RE_PATH_LINE = re.compile(r"Path:[ \t]*([^\n]*)")
