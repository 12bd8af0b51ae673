from types import SimpleNamespace

import unity_assets
from unity_assets import MonoScript, load_scripts, read_unity_version, to_mono_script


def make_obj(type_name, data, path_id=1, unity_version="2019.4.31f1"):
    return SimpleNamespace(
        type=SimpleNamespace(name=type_name),
        read=lambda: data,
        path_id=path_id,
        assets_file=SimpleNamespace(unity_version=unity_version),
    )


def mono_script_data(class_name, namespace, assembly):
    return SimpleNamespace(m_ClassName=class_name, m_Namespace=namespace, m_AssemblyName=assembly)


def test_to_mono_script():
    obj = make_obj("MonoScript", mono_script_data("Player", "Game", "Assembly-CSharp.dll"), path_id=42)
    assert to_mono_script(obj) == MonoScript("Player", "Game", "Assembly-CSharp.dll", 42)


def test_missing_fields_become_empty():
    obj = make_obj("MonoScript", SimpleNamespace(m_ClassName="Player", m_Namespace=None))
    script = to_mono_script(obj)
    assert script.namespace == ""
    assert script.assembly_name == ""


def test_stripped_version_is_unknown():
    assert read_unity_version(make_obj("MonoScript", None, unity_version="0.0.0")) is None
    assert read_unity_version(make_obj("MonoScript", None, unity_version="")) is None
    assert str(read_unity_version(make_obj("MonoScript", None))) == "2019.4.31f1"


def test_load_scripts_keeps_only_mono_scripts(tmp_path, monkeypatch):
    objects = [
        make_obj("Texture2D", None),
        make_obj("MonoScript", mono_script_data("Player", "Game", "Assembly-CSharp.dll"), path_id=2),
        make_obj("MonoBehaviour", None),
        make_obj("MonoScript", mono_script_data("Enemy", "", "Game.Core.dll"), path_id=3),
    ]
    loaded_paths = []

    def fake_load(*paths):
        loaded_paths.extend(paths)
        return SimpleNamespace(objects=objects)

    monkeypatch.setattr(unity_assets.UnityPy, "load", fake_load)

    loaded = load_scripts([str(tmp_path), str(tmp_path / "missing")])

    assert loaded_paths == [str(tmp_path)]
    assert [s.class_name for s in loaded.scripts] == ["Player", "Enemy"]
    assert str(loaded.unity_version) == "2019.4.31f1"


def test_load_scripts_without_inputs(tmp_path):
    loaded = load_scripts([str(tmp_path / "missing")])
    assert loaded.scripts == []
    assert loaded.unity_version is None
