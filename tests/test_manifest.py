import json
from pathlib import Path

from inkwell.manifest import build_manifest, write_manifest
from inkwell.store import ContentStore


def create_content(tmp_path: Path) -> Path:
    content = tmp_path / "content"
    (content / "posts" / "pdf").mkdir(parents=True)
    (content / "about.md").write_text(
        "---\ntitle: About\nmenu:\n  main:\n    weight: 1\n---\nHello.\n", encoding="utf-8"
    )
    (content / "posts" / "2024-02-01-agents.md").write_text(
        "---\ntitle: Agents\ntags: [llm]\n---\nText.\n", encoding="utf-8"
    )
    (content / "posts" / "pdf" / "index.md").write_text(
        "---\ntitle: PDFs\ndate: 2024-03-01\ntags: [llm, pdf]\n---\n![Flow](flow.png)\n",
        encoding="utf-8",
    )
    (content / "posts" / "pdf" / "flow.png").write_bytes(b"png")
    (content / "draft.md").write_text("---\ntitle: Draft\ndraft: true\n---\n", encoding="utf-8")
    return content


def test_build_manifest(tmp_path):
    store = ContentStore.load(create_content(tmp_path))
    manifest = build_manifest(store)
    assert [i["path"] for i in manifest["items"]] == ["about", "posts/pdf", "posts/agents"]
    assert manifest["menus"] == {"main": ["about"]}
    assert manifest["tags"] == {"llm": ["posts/pdf", "posts/agents"], "pdf": ["posts/pdf"]}
    assert manifest["posts"] == ["posts/pdf", "posts/agents"]
    assert manifest["generator"].startswith("inkwell ")

    pdf = manifest["items"][1]
    assert pdf["source"] == "posts/pdf/index.md"
    assert pdf["date"] == "2024-03-01T00:00:00"
    assert pdf["assets"] == ["flow.png"]
    assert "html" not in pdf


def test_build_manifest_with_html(tmp_path):
    store = ContentStore.load(create_content(tmp_path))
    manifest = build_manifest(store, include_html=True, base_url="https://blog.example")
    pdf = next(i for i in manifest["items"] if i["path"] == "posts/pdf")
    assert 'src="https://blog.example/posts/pdf/flow.png"' in pdf["html"]


def test_write_manifest(tmp_path):
    store = ContentStore.load(create_content(tmp_path))
    target = write_manifest(store, tmp_path / "out" / "manifest.json")
    data = json.loads(target.read_text(encoding="utf-8"))
    assert len(data["items"]) == 3
    assert all(item["draft"] is False for item in data["items"])
