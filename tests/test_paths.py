from pixelbox.paths import ensure_directories, get_data_root


def test_ensure_directories(tmp_path):
    dirs = ensure_directories(tmp_path)
    assert (tmp_path / "pictures").is_dir()
    assert dirs["pictures"] == tmp_path / "pictures"


def test_get_data_root_expands_user(monkeypatch, tmp_path):
    monkeypatch.setenv("HOME", str(tmp_path))
    root = get_data_root({"data_root": "~/pixels"})
    assert root == (tmp_path / "pixels").resolve()
