"""依赖清单解析

清单格式（默认文件名 Godeps），每行一条依赖::

    github.com/acme/widget   v1.2.0     # 注释
    github.com/acme/gadget   a1b2c3d
    example.com/local/libfoo ../libfoo

"#" 到行尾为注释；去掉注释后为空的行被跳过。
第一个空白分隔字段为 import path，第二个为 version spec，其余字段忽略。
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

from gpm.core.exceptions import ManifestError, ManifestNotFoundError
from gpm.core.models import DependencyRecord

logger = logging.getLogger(__name__)

COMMENT_MARKER = "#"


def parse_manifest(text: str) -> Iterator[DependencyRecord]:
    """逐行惰性解析清单文本

    异常:
        ManifestError: 某行只有 import path 而缺少 version spec
    """
    for lineno, raw in enumerate(text.splitlines(), start=1):
        fields = raw.split(COMMENT_MARKER, 1)[0].split()
        if not fields:
            continue
        if len(fields) < 2:
            raise ManifestError(
                f"第 {lineno} 行缺少版本: {raw.strip()!r}", line=lineno,
            )
        yield DependencyRecord(
            import_path=fields[0], version_spec=fields[1], line=lineno,
        )


def read_manifest(path: str | Path) -> list[DependencyRecord]:
    """读取并解析清单文件

    异常:
        ManifestNotFoundError: 清单文件不存在
        ManifestError: 格式错误
    """
    p = Path(path)
    if not p.is_file():
        raise ManifestNotFoundError(f"清单文件不存在: {p}")
    try:
        text = p.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ManifestError(f"清单文件无法读取: {p}: {e}") from e
    records = list(parse_manifest(text))
    logger.debug("已解析 %d 条依赖: %s", len(records), p)
    return records
