"""
生成过程中的错误类型

所有错误都不是致命的：Orchestrator 捕获后打印并放弃本次生成
"""


class GenerationError(Exception):
    """生成错误基类"""

    kind = "GenerationError"

    def __init__(self, message: str, path: str = ""):
        super().__init__(message)
        self.path = path


class DirectoryCreateFailed(GenerationError):
    """无法创建输出目录"""

    kind = "DirectoryCreateFailed"


class FileOpenFailed(GenerationError):
    """无法打开/写入生成文件"""

    kind = "FileOpenFailed"


class PatternNoMatch(GenerationError):
    """无法从脚本路径推导类名"""

    kind = "PatternNoMatch"


class MissingSourceFile(GenerationError):
    """脚本或场景文件不存在"""

    kind = "MissingSourceFile"


class SceneParseError(GenerationError):
    """场景文件无法解析"""

    kind = "SceneParseError"
