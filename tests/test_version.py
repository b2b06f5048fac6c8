from __future__ import annotations

from importlib.metadata import PackageNotFoundError

from spacemichael.core import version as version_module


def _not_installed(dist):
    raise PackageNotFoundError(dist)


def test_installed_metadata_wins_over_version_file(tmp_path, monkeypatch):
    version_file = tmp_path / "VERSION"
    version_file.write_text("1.2.3\n", encoding="utf-8")
    monkeypatch.setattr(version_module, "VERSION_FILE", version_file)
    monkeypatch.setattr(version_module, "metadata_version", lambda dist: "4.5.6")
    assert version_module.get_app_version() == "4.5.6"


def test_version_file_used_from_a_plain_checkout(tmp_path, monkeypatch):
    version_file = tmp_path / "VERSION"
    version_file.write_text("1.2.3\n", encoding="utf-8")
    monkeypatch.setattr(version_module, "VERSION_FILE", version_file)
    monkeypatch.setattr(version_module, "metadata_version", _not_installed)
    assert version_module.get_app_version() == "1.2.3"


def test_default_when_neither_source_exists(tmp_path, monkeypatch):
    monkeypatch.setattr(version_module, "VERSION_FILE", tmp_path / "VERSION")
    monkeypatch.setattr(version_module, "metadata_version", _not_installed)
    assert version_module.get_app_version(default="9.9.9") == "9.9.9"


def test_blank_version_file_falls_back_to_default(tmp_path, monkeypatch):
    version_file = tmp_path / "VERSION"
    version_file.write_text("   \n", encoding="utf-8")
    monkeypatch.setattr(version_module, "VERSION_FILE", version_file)
    monkeypatch.setattr(version_module, "metadata_version", _not_installed)
    assert version_module.get_app_version(default="2.0.0") == "2.0.0"


def test_checkout_version_matches_packaging():
    pyproject = version_module.VERSION_FILE.parent / "pyproject.toml"
    assert f'version = "{version_module.checkout_version()}"' in pyproject.read_text(encoding="utf-8")
