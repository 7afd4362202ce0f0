"""统一异常体系

所有业务异常继承 GpmError，CLI 层统一捕获并输出 `错误 [code]: message`。
单个依赖包的拉取/检出失败不走异常，而是记录为 PinResult(failed)。
"""

from __future__ import annotations


class GpmError(Exception):
    """gpm 基础异常"""

    code: str = "UNKNOWN"

    def __init__(self, message: str) -> None:
        super().__init__(message)


class ConfigError(GpmError):
    """配置文件内容无效"""

    code = "CONFIG_ERROR"


class ManifestError(GpmError):
    """清单文件格式错误"""

    code = "MANIFEST_ERROR"

    def __init__(self, message: str, line: int = 0) -> None:
        super().__init__(message)
        self.line = line


class ManifestNotFoundError(ManifestError):
    """清单文件不存在"""

    code = "MANIFEST_NOT_FOUND"


class ToolNotFoundError(GpmError):
    """必需的外部工具不在 PATH 中"""

    code = "TOOL_NOT_FOUND"


class VendorError(GpmError):
    """vendor 目录创建或标记文件读写失败"""

    code = "VENDOR_ERROR"


class ExecutionError(GpmError):
    """外部命令执行失败"""

    code = "EXECUTION_ERROR"
