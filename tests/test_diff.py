"""End-to-end tests for the recursive differ."""

from __future__ import annotations

import io
import json
import threading
import zipfile

import pytest

from stratadiff import DiffNode, DiffOptions, File, NoDiff, NodeStatus, diff
from stratadiff.engine.archive import COMMENT_ORDER_DIFFERS, COMMENT_UNMATCHED_DUPLICATE
from stratadiff.engine.errors import ArchiveFormatError, Cancelled, DecompressError, DiffError
from stratadiff.tree import COMMENT_ONLY_IN_FIRST, COMMENT_ONLY_IN_SECOND


def _listing(size: int, name: str) -> str:
    return f"-rw-r--r-- 0 0 {size:12d} 1970-01-01 00:00:00.000000 {name}\n"


def _run(name: str, data1: bytes, data2: bytes, **options) -> DiffNode:
    return diff(File.from_bytes(name, data1), File.from_bytes(name, data2), DiffOptions(**options))


class TestIdentical:
    def test_identical_text_raises_no_diff(self):
        text, out_json, node = io.StringIO(), io.StringIO(), DiffNode("", "")
        with pytest.raises(NoDiff):
            _run(
                "file.txt",
                b"hello world\nthis is a test\n",
                b"hello world\nthis is a test\n",
                output=text,
                output_json=out_json,
                output_node=node,
            )
        assert text.getvalue() == ""
        assert out_json.getvalue() == ""
        assert node == DiffNode("", "")

    def test_no_diff_is_not_a_diff_error(self):
        assert not issubclass(NoDiff, DiffError)

    def test_identical_archives(self, make_tar):
        data = make_tar([("a.txt", b"a")])
        with pytest.raises(NoDiff):
            _run("a.tar", data, data)


class TestText:
    def test_different_text_same_endings(self):
        text, out_json = io.StringIO(), io.StringIO()
        _run("file.txt", b"hello world\n", b"hello there\n", output=text, output_json=out_json)
        assert text.getvalue() == (
            "--- file.txt\n+++ file.txt\n@@ -1 +1 @@\n-hello world\n+hello there\n\n"
        )
        assert json.loads(out_json.getvalue()) == {
            "source1": "file.txt",
            "source2": "file.txt",
            "unified_diff": "@@ -1 +1 @@\n-hello world\n+hello there\n",
        }

    def test_text_vs_binary(self):
        node = _run("file", b"hello world\n", b"\x00\x01\x02\x03\x00")
        assert node.comments == ["File types differ: text vs binary"]
        assert node.unified_diff is None
        assert node.details == []

    def test_only_line_endings_differ(self):
        node = _run("f.txt", b"hello world\r\nsecond line\r\n", b"hello world\nsecond line\n")
        assert node.comments == ["Line endings differ (-CRLF,+LF)"]
        assert node.unified_diff is None

    def test_line_endings_and_content_differ(self):
        node = _run("f.txt", b"hello world\r\nsecond line\r\n", b"hello world\nthird line\n")
        assert node.comments == [
            "Line endings differ (-CRLF,+LF)",
            "Diff shown with normalized line endings",
        ]
        assert node.unified_diff == "@@ -1,2 +1,2 @@\n hello world\n-second line\n+third line\n"

    def test_mixed_on_one_side_uses_mixed_label(self):
        node = _run("f.txt", b"hello world\r\nsecond line\n", b"hello world\nsecond line\n")
        assert node.comments == ["Line endings differ (-mixed,+LF)"]

    def test_both_mixed_warns(self):
        node = _run("f.txt", b"first line\r\nsecond line\n", b"first line\r\nother line\n")
        assert node.comments[0] == (
            "WARNING: Files have mixed line endings which are not shown in diff"
        )
        assert node.unified_diff.startswith("@@")

    def test_one_side_without_endings(self):
        node = _run("f.txt", b"no newline here", b"one line\n")
        assert node.comments == []
        assert node.unified_diff == "@@ -1 +1 @@\n-no newline here\n+one line\n"

    def test_short_lines_count_as_binary(self):
        node = _run("f.txt", b"x\n", b"y\n")
        assert node.comments == ["Binary files differ"]
        assert node.unified_diff is None

    def test_non_utf8_bytes_stay_distinct(self):
        node = _run("README", b"caf\xe9 au lait\n", b"caf\xe8 au lait\n")
        assert node.unified_diff == "@@ -1 +1 @@\n-caf\\xe9 au lait\n+caf\\xe8 au lait\n"
        assert node.comments == []

    def test_plain_binary(self):
        node = _run("blob", b"\x00\x01", b"\x00\x02")
        assert node.comments == ["Binary files differ"]


class TestGzip:
    def test_compression_level_only(self, make_gzip):
        node = _run("a.gz", make_gzip(b"hello world\n", 1), make_gzip(b"hello world\n", 9))
        assert node.comments == ["Bytes differ but no semantic diff generated"]
        assert node.details == []

    def test_content_differs(self, make_gzip):
        node = _run("notes.txt.gz", make_gzip(b"alpha\n"), make_gzip(b"beta\n"))
        assert len(node.details) == 1
        child = node.details[0]
        assert child.source1 == "notes.txt"
        assert child.unified_diff == "@@ -1 +1 @@\n-alpha\n+beta\n"

    def test_tgz_becomes_tar(self, make_gzip, make_tar):
        node = _run(
            "release.tgz",
            make_gzip(make_tar([("a.txt", b"one")])),
            make_gzip(make_tar([("a.txt", b"two")])),
        )
        assert node.details[0].source1 == "release.tar"

    def test_corrupt_stream(self):
        with pytest.raises(DecompressError) as info:
            _run("a.gz", b"\x1f\x8bgarbage", b"\x1f\x8bother garbage")
        assert str(info.value).startswith("comparing files: ")
        assert "file1" in str(info.value)


class TestTar:
    def test_missing_entry(self, make_tar):
        node = _run(
            "a.tar",
            make_tar([("file1.txt", b"one")]),
            make_tar([("file1.txt", b"one"), ("file2.txt", b"two")]),
        )
        assert [d.source1 for d in node.details] == ["file list", "file2.txt"]
        assert node.details[0].unified_diff == (
            "@@ -1 +1,2 @@\n"
            f" {_listing(3, 'file1.txt')}"
            f"+{_listing(3, 'file2.txt')}"
        )
        assert node.details[1].comments == [COMMENT_ONLY_IN_SECOND]
        assert node.details[1].status == NodeStatus.ONLY_SECOND

    def test_entry_only_in_first(self, make_tar):
        node = _run(
            "a.tar",
            make_tar([("keep.txt", b"k"), ("gone.txt", b"g")]),
            make_tar([("keep.txt", b"k")]),
        )
        gone = node.details[1]
        assert gone.source1 == "gone.txt"
        assert gone.comments == [COMMENT_ONLY_IN_FIRST]
        assert gone.status == NodeStatus.ONLY_FIRST

    def test_reordered_entries(self, make_tar):
        entries = [("a.txt", b"a"), ("b.txt", b"b"), ("c.txt", b"c")]
        node = _run("a.tar", make_tar(entries), make_tar(entries[2:] + entries[:2]))
        assert node.comments == [COMMENT_ORDER_DIFFERS]
        assert node.details == []
        assert node.unified_diff is None

    def test_reordered_with_additions_sorts_listing(self, make_tar):
        node = _run(
            "a.tar",
            make_tar([("b.txt", b"b"), ("a.txt", b"a")]),
            make_tar([("a.txt", b"a"), ("b.txt", b"b"), ("c.txt", b"c")]),
        )
        assert node.comments == []
        assert node.details[0].unified_diff == (
            "@@ -1,2 +1,3 @@\n"
            f" {_listing(1, 'a.txt')}"
            f" {_listing(1, 'b.txt')}"
            f"+{_listing(1, 'c.txt')}"
        )
        assert [d.source1 for d in node.details] == ["file list", "c.txt"]

    def test_details_in_lexicographic_order(self, make_tar):
        names = ["zeta.txt", "alpha.txt", "mid.txt"]
        node = _run(
            "a.tar",
            make_tar([(n, b"1") for n in names]),
            make_tar([(n, b"2") for n in names]),
        )
        assert [d.source1 for d in node.details] == sorted(names)

    def test_duplicate_entries_matched_by_position(self, make_tar):
        node = _run(
            "a.tar",
            make_tar([("a.txt", b"x"), ("a.txt", b"y")]),
            make_tar([("a.txt", b"x"), ("a.txt", b"z")]),
        )
        assert len(node.details) == 1
        assert node.details[0].source1 == "a.txt [occurrence 2]"
        assert node.details[0].unified_diff == "@@ -1 +1 @@\n-y\n+z\n"

    def test_unmatched_duplicate(self, make_tar):
        node = _run(
            "a.tar",
            make_tar([("a.txt", b"x"), ("a.txt", b"y")]),
            make_tar([("a.txt", b"x")]),
        )
        extra = node.details[-1]
        assert extra.source1 == "a.txt [occurrence 2]"
        assert extra.comments == [COMMENT_ONLY_IN_FIRST, COMMENT_UNMATCHED_DUPLICATE]

    def test_malformed_header(self):
        header = bytearray(1024)
        header[0:5] = b"bogus"
        header[257:262] = b"ustar"
        other = bytearray(header)
        other[0:5] = b"bogux"
        with pytest.raises(ArchiveFormatError) as info:
            _run("a.tar", bytes(header), bytes(other))
        assert "reading tar1" in str(info.value)


class TestTarGz:
    def test_one_entry_changed(self, make_gzip, make_tar):
        text = io.StringIO()
        node = _run(
            "archive.tar.gz",
            make_gzip(make_tar([("config.txt", b"debug=on")])),
            make_gzip(make_tar([("config.txt", b"debug=off")])),
            output=text,
        )
        assert len(node.details) == 1
        inner = node.details[0]
        assert (inner.source1, inner.source2) == ("archive.tar", "archive.tar")
        assert [d.source1 for d in inner.details] == ["file list", "config.txt"]
        assert text.getvalue() == (
            "--- archive.tar.gz\n"
            "+++ archive.tar.gz\n"
            "│   --- archive.tar\n"
            "├─┐ +++ archive.tar\n"
            "│ ├── file list\n"
            "│ │ @@ -1 +1 @@\n"
            f"│ │ -{_listing(8, 'config.txt')}"
            f"│ │ +{_listing(9, 'config.txt')}"
            "│ ├── config.txt\n"
            "│ │ @@ -1 +1 @@\n"
            "│ │ -debug=on\n"
            "│ │ +debug=off\n"
        )

    def test_depth_limit_one(self, make_gzip, make_tar):
        text = io.StringIO()
        node = _run(
            "archive.tar.gz",
            make_gzip(make_tar([("config.txt", b"debug=on")])),
            make_gzip(make_tar([("config.txt", b"debug=off")])),
            max_depth=1,
            output=text,
        )
        assert len(node.details) == 1
        inner = node.details[0]
        assert inner.comments == [
            "Binary files differ",
            "Archive not expanded (depth limit 1 reached)",
        ]
        assert inner.details == []
        assert text.getvalue() == (
            "--- archive.tar.gz\n"
            "+++ archive.tar.gz\n"
            "├── archive.tar\n"
            "│┄ Binary files differ\n"
            "│┄ Archive not expanded (depth limit 1 reached)\n"
        )

    @pytest.mark.parametrize("depth", [0, 2])
    def test_depth_limit_not_reached(self, make_gzip, make_tar, depth):
        node = _run(
            "archive.tar.gz",
            make_gzip(make_tar([("config.txt", b"debug=on")])),
            make_gzip(make_tar([("config.txt", b"debug=off")])),
            max_depth=depth,
        )
        assert [d.source1 for d in node.details[0].details] == ["file list", "config.txt"]

    def test_negative_depth_rejected(self):
        with pytest.raises(ValueError):
            _run("a.txt", b"a\n", b"b\n", max_depth=-1)


class TestZip:
    def test_listing_and_entry(self, make_zip):
        node = _run(
            "a.zip",
            make_zip([("a.txt", b"hello")]),
            make_zip([("a.txt", b"hello"), ("b.txt", b"new")]),
        )
        assert node.details[0].source1 == "file list"
        assert node.details[0].unified_diff == (
            "@@ -1 +1,2 @@\n"
            f" -rw-r--r-- Store    {5:<12d} 1980-01-01 00:00:00.000000 a.txt\n"
            f"+-rw-r--r-- Store    {3:<12d} 1980-01-01 00:00:00.000000 b.txt\n"
        )
        assert node.details[1].comments == [COMMENT_ONLY_IN_SECOND]

    def test_deflated_entry_content(self, make_zip):
        node = _run(
            "a.zip",
            make_zip([("doc.txt", b"old text\n")], method=zipfile.ZIP_DEFLATED),
            make_zip([("doc.txt", b"new text\n")], method=zipfile.ZIP_DEFLATED),
        )
        assert [d.source1 for d in node.details] == ["doc.txt"]
        assert node.details[0].unified_diff == "@@ -1 +1 @@\n-old text\n+new text\n"

    def test_reordered_entries(self, make_zip):
        entries = [("a.txt", b"a"), ("b.txt", b"b")]
        node = _run("a.zip", make_zip(entries), make_zip(entries[::-1]))
        assert node.comments == [COMMENT_ORDER_DIFFERS]
        assert node.details == []

    def test_nested_archive(self, make_zip, make_tar):
        node = _run(
            "outer.zip",
            make_zip([("inner.tar", make_tar([("x.txt", b"1")]))]),
            make_zip([("inner.tar", make_tar([("x.txt", b"2")]))]),
        )
        inner = node.details[0]
        assert inner.source1 == "inner.tar"
        assert inner.details[0].source1 == "x.txt"


class TestJar:
    def test_class_bytecode_diff(self, make_zip, make_class):
        node = _run(
            "app.jar",
            make_zip([("Foo.class", make_class(code=b"\x2a\xb1"))]),
            make_zip([("Foo.class", make_class(code=b"\x2b\xb1"))]),
        )
        assert len(node.details) == 1
        entry = node.details[0]
        assert entry.source1 == "Foo.class"
        assert entry.unified_diff.startswith("@@")
        assert "- 2a b1\n" in entry.unified_diff
        assert "+ 2b b1\n" in entry.unified_diff

    def test_invalid_class_files(self, make_zip):
        node = _run(
            "app.jar",
            make_zip([("Foo.class", b"not a class")]),
            make_zip([("Foo.class", b"not a clasz")]),
        )
        assert node.details[0].comments == ["Binary files differ (not valid class files)"]

    def test_equal_disassembly(self, make_zip, make_class):
        node = _run(
            "app.jar",
            make_zip([("Foo.class", make_class(access_flags=0x0021))]),
            make_zip([("Foo.class", make_class(access_flags=0x0031))]),
        )
        assert node.details[0].comments == ["Bytes differ but no semantic diff generated"]

    def test_non_class_entries_recurse(self, make_zip):
        node = _run(
            "app.jar",
            make_zip([("META-INF/MANIFEST.MF", b"Version: 1\n")]),
            make_zip([("META-INF/MANIFEST.MF", b"Version: 2\n")]),
        )
        assert node.details[0].unified_diff == "@@ -1 +1 @@\n-Version: 1\n+Version: 2\n"

    def test_plain_zip_does_not_disassemble(self, make_zip, make_class):
        node = _run(
            "app.zip",
            make_zip([("Foo.class", make_class(code=b"\x2a\xb1"))]),
            make_zip([("Foo.class", make_class(code=b"\x2b\xb1"))]),
        )
        assert node.details[0].comments == ["Binary files differ"]


class TestOptions:
    def test_output_node_matches_json(self, make_tar):
        out_json, node = io.StringIO(), DiffNode("", "")
        root = _run(
            "a.tar",
            make_tar([("a.txt", b"a")]),
            make_tar([("b.txt", b"b")]),
            output_json=out_json,
            output_node=node,
        )
        assert node == root
        assert DiffNode.from_dict(json.loads(out_json.getvalue())) == node

    def test_root_always_has_content(self, make_gzip):
        pairs = [
            (b"a\n", b"b\n"),
            (b"\x00", b"\x01"),
            (make_gzip(b"x", 1), make_gzip(b"x", 9)),
        ]
        for left, right in pairs:
            node = _run("f", left, right)
            assert node.has_content

    def test_cancelled(self, make_tar):
        cancel = threading.Event()
        cancel.set()
        with pytest.raises(Cancelled):
            _run("a.tar", make_tar([("a", b"1")]), make_tar([("a", b"2")]), cancel=cancel)

    def test_default_options(self):
        node = diff(File.from_bytes("a", b"alpha line\n"), File.from_bytes("a", b"beta line\n"))
        assert node.unified_diff == "@@ -1 +1 @@\n-alpha line\n+beta line\n"

    def test_from_path(self, tmp_path):
        left = tmp_path / "left.txt"
        right = tmp_path / "right.txt"
        left.write_bytes(b"one\n")
        right.write_bytes(b"two\n")
        node = diff(File.from_path(left, name="x"), File.from_path(right, name="x"))
        assert (node.source1, node.source2) == ("x", "x")
