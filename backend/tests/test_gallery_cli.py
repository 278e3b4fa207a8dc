import io
import json

from hengstudio.gallery.cli import run


def invoke(manifest_store, *argv):
    out = io.StringIO()
    code = run(["--manifest", str(manifest_store.path), *argv], out=out)
    return code, out.getvalue()


def saved_names(manifest_store):
    return [e["name"] for e in json.loads(manifest_store.path.read_text())]


def test_show(manifest_store):
    code, output = invoke(manifest_store, "show")
    assert code == 0
    assert "001.jpg" in output
    assert "5 entries" in output


def test_move_saves_renumbered_manifest(manifest_store):
    code, output = invoke(manifest_store, "move", "2", "4", "--to", "1")

    assert code == 0
    assert "saved 5 entries" in output
    data = json.loads(manifest_store.path.read_text())
    assert [e["name"] for e in data] == ["002.jpg", "004.jpg", "001.jpg", "003.jpg", "005.jpg"]
    assert [e["number"] for e in data] == [1, 2, 3, 4, 5]


def test_shift_at_edge_changes_nothing(manifest_store):
    code, output = invoke(manifest_store, "shift", "1", "--by", "-1")
    assert code == 1
    assert saved_names(manifest_store)[0] == "001.jpg"


def test_swap(manifest_store):
    code, _ = invoke(manifest_store, "swap", "1", "3")
    assert code == 0
    assert saved_names(manifest_store)[:3] == ["003.jpg", "002.jpg", "001.jpg"]


def test_delete_needs_yes(manifest_store):
    code, output = invoke(manifest_store, "delete", "2")
    assert code == 1
    assert "--yes" in output
    assert len(saved_names(manifest_store)) == 5

    code, _ = invoke(manifest_store, "delete", "2", "--yes")
    assert code == 0
    assert saved_names(manifest_store) == ["001.jpg", "003.jpg", "004.jpg", "005.jpg"]


def test_bad_position_reports_error(manifest_store):
    code, output = invoke(manifest_store, "move", "9", "--to", "1")
    assert code == 2
    assert output.startswith("error:")


def test_check(manifest_store):
    assert invoke(manifest_store, "check")[0] == 0
    data = json.loads(manifest_store.path.read_text())
    data[0]["number"] = 9
    manifest_store.path.write_text(json.dumps(data))
    assert invoke(manifest_store, "check")[0] == 1
