"""Unit tests for qrsites/config.py — Settings defaults and env overrides."""

import pytest


class TestSettings:

    def test_defaults(self):
        from qrsites.config import Settings
        s = Settings.from_env({})
        assert s.store_path == "BD.txt"
        assert s.image_dir == "image"
        assert s.lock_timeout == 10.0
        assert s.box_size == 10
        assert s.border == 4

    def test_env_overrides(self):
        from qrsites.config import Settings
        s = Settings.from_env({
            "QRSITES_STORE_PATH": "/data/BD.txt",
            "QRSITES_IMAGE_DIR": "/data/image",
            "QRSITES_LOCK_TIMEOUT": "2.5",
        })
        assert s.store_path == "/data/BD.txt"
        assert s.image_dir == "/data/image"
        assert s.lock_timeout == 2.5

    def test_empty_env_values_ignored(self):
        from qrsites.config import Settings
        s = Settings.from_env({"QRSITES_STORE_PATH": "", "QRSITES_LOCK_TIMEOUT": ""})
        assert s.store_path == "BD.txt"
        assert s.lock_timeout == 10.0

    @pytest.mark.parametrize("value", ["soon", "-1"])
    def test_invalid_timeout_rejected(self, value):
        from qrsites.config import Settings
        with pytest.raises(ValueError, match="QRSITES_LOCK_TIMEOUT"):
            Settings.from_env({"QRSITES_LOCK_TIMEOUT": value})
