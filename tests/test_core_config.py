"""Tests for config loading and CT_PATHS path resolution."""

from custrack.core.config import get_config, get_config_value, CT_PATHS, _PACKAGE_DIR


def test_get_config_returns_dict():
    config = get_config(reload=True)
    assert isinstance(config, dict)
    assert "destinations" in config


def test_get_config_caching():
    c1 = get_config()
    c2 = get_config()
    assert c1 is c2


def test_get_config_reload_returns_fresh():
    get_config()
    c2 = get_config(reload=True)
    c3 = get_config()
    assert c3 is c2


def test_get_config_value_nested():
    db_path = get_config_value("destinations", "database")
    assert db_path is not None
    assert db_path.endswith("customers.db")


def test_get_config_value_missing_returns_default():
    result = get_config_value("nonexistent", "deep", "path", default="fallback")
    assert result == "fallback"


def test_cascade_delete_mode_configured():
    assert get_config_value("customers", "atomic_cascade_delete") is True


def test_ct_paths_database_is_absolute():
    assert CT_PATHS.database.is_absolute()
    assert str(CT_PATHS.database).endswith("customers.db")


def test_ct_paths_database_under_package_dir():
    assert str(CT_PATHS.database).startswith(str(_PACKAGE_DIR))


def test_ct_paths_root_is_package_dir():
    assert CT_PATHS.root == _PACKAGE_DIR
    assert (CT_PATHS.config_dir / "config.yaml").exists()
