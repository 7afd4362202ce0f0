"""清单解析测试"""

from __future__ import annotations

from pathlib import Path

import pytest

from gpm.core.exceptions import ManifestError, ManifestNotFoundError
from gpm.core.manifest import parse_manifest, read_manifest
from gpm.core.models import DependencyRecord

SAMPLE = """\
# 项目依赖
github.com/acme/widget   v1.2.0
github.com/acme/gadget a1b2c3d   # 修复前的最后一个提交

   \t
example.com/local/libfoo ../libfoo extra tokens ignored
"""


class TestParseManifest:
    def test_sample(self) -> None:
        records = list(parse_manifest(SAMPLE))
        assert [(r.import_path, r.version_spec) for r in records] == [
            ("github.com/acme/widget", "v1.2.0"),
            ("github.com/acme/gadget", "a1b2c3d"),
            ("example.com/local/libfoo", "../libfoo"),
        ]
        assert [r.line for r in records] == [2, 3, 6]

    def test_trailing_comment_stripped(self) -> None:
        assert list(parse_manifest("pkg v1 # note")) == [
            DependencyRecord("pkg", "v1", line=1),
        ]

    def test_comment_glued_to_version(self) -> None:
        [r] = parse_manifest("pkg v1#note")
        assert r.version_spec == "v1"

    @pytest.mark.parametrize("text", ["", "# only a comment", "   \t  ", "\n\n#x\n"])
    def test_no_records(self, text: str) -> None:
        assert list(parse_manifest(text)) == []

    def test_idempotent(self) -> None:
        assert list(parse_manifest(SAMPLE)) == list(parse_manifest(SAMPLE))

    def test_lazy(self) -> None:
        """错误行之前的记录可以先被消费"""
        it = parse_manifest("a v1\nbroken\n")
        assert next(it).import_path == "a"
        with pytest.raises(ManifestError, match="第 2 行"):
            next(it)

    def test_missing_version_raises(self) -> None:
        with pytest.raises(ManifestError) as exc_info:
            list(parse_manifest("ok v1\n\ngithub.com/acme/widget  # no version\n"))
        assert exc_info.value.line == 3

    def test_duplicates_kept(self) -> None:
        records = list(parse_manifest("pkg v1\npkg v2\n"))
        assert [r.version_spec for r in records] == ["v1", "v2"]

    def test_crlf(self) -> None:
        records = list(parse_manifest("a v1\r\nb v2\r\n"))
        assert [r.version_spec for r in records] == ["v1", "v2"]


class TestIsLocal:
    @pytest.mark.parametrize("spec, expected", [
        (".", True),
        ("./vendor/x", True),
        ("../x", True),
        ("/abs/x", True),
        ("v1.2.0", False),
        ("a1b2c3d", False),
        ("master", False),
    ])
    def test_is_local(self, spec: str, expected: bool) -> None:
        assert DependencyRecord("pkg", spec).is_local is expected


class TestReadManifest:
    def test_read(self, tmp_path: Path) -> None:
        p = tmp_path / "Godeps"
        p.write_text(SAMPLE, encoding="utf-8")
        assert len(read_manifest(p)) == 3

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ManifestNotFoundError, match="清单文件不存在"):
            read_manifest(tmp_path / "Godeps")

    def test_directory_is_not_a_manifest(self, tmp_path: Path) -> None:
        with pytest.raises(ManifestNotFoundError):
            read_manifest(tmp_path)

    def test_invalid_utf8(self, tmp_path: Path) -> None:
        p = tmp_path / "Godeps"
        p.write_bytes(b"example.com/x v1 \xff\xfe\n")
        with pytest.raises(ManifestError, match="清单文件无法读取"):
            read_manifest(p)
