"""File cache and source screening tests."""

from __future__ import annotations

from routeimpact.core.cache import FileCache, content_hash, read_source
from routeimpact.core.models import FileRecord, ImportRef, RouteEntry


def test_read_source_text(tmp_path):
    path = tmp_path / "a.ts"
    path.write_text("export const a = 1;\n", encoding="utf-8")
    src = read_source(path, max_bytes=1024)
    assert src.text == "export const a = 1;\n"
    assert src.hash == content_hash(b"export const a = 1;\n")
    assert src.last_modified > 0


def test_read_source_oversized(tmp_path):
    path = tmp_path / "big.js"
    path.write_text("x" * 2048, encoding="utf-8")
    src = read_source(path, max_bytes=1024)
    assert src.text is None


def test_read_source_binary(tmp_path):
    path = tmp_path / "blob.js"
    path.write_bytes(b"abc\x00def")
    src = read_source(path, max_bytes=1024)
    assert src.text is None
    assert src.hash


def test_read_source_missing(tmp_path):
    src = read_source(tmp_path / "gone.ts", max_bytes=1024)
    assert src.text is None
    assert src.hash == ""


def test_file_cache_freshness():
    cache = FileCache()
    cache.put(FileRecord(path="a.ts", hash="abc"))

    assert cache.get("a.ts").hash == "abc"
    assert cache.is_fresh("a.ts", "abc")
    assert not cache.is_fresh("a.ts", "def")
    assert not cache.is_fresh("b.ts", "abc")
    assert len(cache) == 1

    cache.remove("a.ts")
    assert cache.get("a.ts") is None

    cache.put(FileRecord(path="b.ts"))
    cache.clear()
    assert len(cache) == 0


def test_file_record_wire_form():
    record = FileRecord(
        path="src/routes.tsx",
        imports=[ImportRef(raw="./Home", resolved="src/Home.tsx", specifiers=("default",), line=1)],
        exports=["router"],
        routes=[RouteEntry(path="/", component="Home", file="src/routes.tsx", line=4)],
        hash="h",
        last_modified=12.5,
    )
    data = record.to_dict()
    assert data["lastModified"] == 12.5
    assert data["routes"] == [{"path": "/", "component": "Home", "file": "src/routes.tsx", "line": 4}]
    assert FileRecord.from_dict(data) == record


def test_file_record_accepts_plain_route_strings():
    record = FileRecord.from_dict({"path": "src/routes.ts", "routes": ["/home"], "imports": ["./x"]})
    assert record.route_paths == ["/home"]
    assert record.routes[0].file == "src/routes.ts"
    assert record.imports[0].raw == "./x"
