import os
import zipfile

import pytest

from conftest import make_zip
from errors import ExtractionError
from preprocessor import XAPK_EXTENSION, get_file_extension, stage


def test_stage_extracts_archive_and_passes_other_inputs(tmp_path, workspace):
    game = make_zip(tmp_path / "game.zip", {"Assets/Data/a.bin": b"\x00\x01payload"})
    readme = str(tmp_path / "README.txt")
    with open(readme, "w") as f:
        f.write("hello")

    staged = stage([game, readme], workspace)

    assert len(staged) == 2
    assert os.path.dirname(staged[0]) == workspace.root
    assert staged[1] == readme
    with open(os.path.join(staged[0], "Assets", "Data", "a.bin"), "rb") as f:
        assert f.read() == b"\x00\x01payload"


def test_stage_preserves_order_and_length(tmp_path, workspace):
    first = make_zip(tmp_path / "first.zip", {"one.txt": b"1"})
    second = make_zip(tmp_path / "second.apk", {"assets/bin/Data/two.txt": b"2"})
    inputs = [str(tmp_path / "missing.zip"), first, "plain/folder", second]

    staged = stage(inputs, workspace)

    assert len(staged) == len(inputs)
    assert staged[0] == inputs[0]
    assert staged[2] == inputs[2]
    assert os.path.isfile(os.path.join(staged[1], "one.txt"))
    assert os.path.isfile(os.path.join(staged[3], "assets", "bin", "Data", "two.txt"))


def test_each_archive_gets_its_own_folder(tmp_path, workspace):
    a = make_zip(tmp_path / "a.zip", {"same.txt": b"a"})
    b = make_zip(tmp_path / "b.zip", {"same.txt": b"b"})

    staged = stage([a, b, a], workspace)

    assert len(set(staged)) == 3
    with open(os.path.join(staged[1], "same.txt"), "rb") as f:
        assert f.read() == b"b"


def test_every_entry_is_written_verbatim(tmp_path, workspace):
    entries = {
        "root.bin": bytes(range(256)),
        "deep/er/still/nested.dat": b"\xff" * 10000,
        "empty.txt": b"",
    }
    archive = make_zip(tmp_path / "bundle.zip", entries)

    (out,) = stage([archive], workspace)

    for name, data in entries.items():
        with open(os.path.join(out, *name.split("/")), "rb") as f:
            assert f.read() == data


def test_directory_entries_are_created(tmp_path, workspace):
    path = tmp_path / "dirs.zip"
    with zipfile.ZipFile(path, "w") as zf:
        zf.writestr("Empty/", b"")
        zf.writestr("Full/file.txt", b"x")

    (out,) = stage([str(path)], workspace)

    assert os.path.isdir(os.path.join(out, "Empty"))
    assert os.path.isfile(os.path.join(out, "Full", "file.txt"))


def test_xapk_and_unknown_extensions_pass_through(tmp_path, workspace):
    xapk = make_zip(tmp_path / f"bundle{XAPK_EXTENSION}", {"base.apk": b"x"})
    upper = make_zip(tmp_path / "GAME.ZIP", {"a.txt": b"x"})
    assets = tmp_path / "level0.assets"
    assets.write_bytes(b"unity")

    inputs = [xapk, upper, str(assets)]
    assert stage(inputs, workspace) == inputs
    assert os.listdir(workspace.root) == []


def test_missing_input_has_no_extension(tmp_path):
    assert get_file_extension(str(tmp_path / "nope.zip")) is None


def test_corrupt_archive_aborts_staging(tmp_path, workspace):
    good = make_zip(tmp_path / "good.zip", {"a.txt": b"a"})
    bad = tmp_path / "bad.zip"
    bad.write_bytes(b"this is not a zip file")

    with pytest.raises(ExtractionError, match="bad.zip"):
        stage([good, str(bad)], workspace)


def test_corrupt_payload_aborts_staging(tmp_path, workspace):
    path = tmp_path / "damaged.zip"
    with zipfile.ZipFile(path, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        zf.writestr("level0", bytes(i * 7 % 251 for i in range(20000)))
    data = bytearray(path.read_bytes())
    start = 30 + len("level0") + 10
    for offset in range(start, start + 6):
        data[offset] ^= 0xFF
    path.write_bytes(bytes(data))

    with pytest.raises(ExtractionError, match="damaged.zip"):
        stage([str(path)], workspace)


def test_encrypted_entries_abort_staging(tmp_path, workspace, monkeypatch):
    archive = make_zip(tmp_path / "locked.zip", {"a.txt": b"a"})

    def encrypted(self, *args, **kwargs):
        raise RuntimeError("File 'a.txt' is encrypted, password required for extraction")

    monkeypatch.setattr(zipfile.ZipFile, "open", encrypted)

    with pytest.raises(ExtractionError, match="encrypted"):
        stage([archive], workspace)


def test_empty_archive_stages_an_existing_folder(tmp_path, workspace):
    archive = make_zip(tmp_path / "empty.zip", {})

    (out,) = stage([archive], workspace)

    assert os.path.isdir(out)
    assert os.listdir(out) == []


def test_entries_escaping_the_folder_are_rejected(tmp_path, workspace):
    archive = make_zip(tmp_path / "evil.zip", {"../../outside.txt": b"x"})

    with pytest.raises(ExtractionError):
        stage([archive], workspace)
    assert not (tmp_path / "outside.txt").exists()
