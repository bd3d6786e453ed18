"""Tests for YAML settings persistence (pos_config/loader.py)."""

from decimal import Decimal

import pytest
import yaml

from pos_config.loader import load_settings, load_yaml_file, save_settings, update_settings
from pos_config.schema import StoreSettings
from pos_kernel.exceptions import ConfigurationError


class TestLoadSettings:

    def test_missing_file_gives_defaults(self, tmp_path, captured_logs):
        settings = load_settings(tmp_path / "settings.yaml")
        assert settings == StoreSettings()
        assert any(r["message"] == "settings_file_missing" for r in captured_logs())

    def test_load(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text(
            "store_name: Perera Stores\n"
            "currency: LKR\n"
            "enable_tax: true\n"
            "tax_rate: 8\n"
            "payroll_type: wagesBoard\n",
            encoding="utf-8",
        )
        settings = load_settings(path)
        assert settings.store_name == "Perera Stores"
        assert settings.currency == "LKR"
        assert settings.tax_fraction == Decimal("0.08")
        assert settings.payroll_divisor == 26

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("", encoding="utf-8")
        assert load_settings(path) == StoreSettings()

    def test_non_mapping_rejected(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("- just\n- a list\n", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="must contain a mapping"):
            load_yaml_file(path)

    def test_malformed_yaml_propagates(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("store_name: [unclosed\n", encoding="utf-8")
        with pytest.raises(yaml.YAMLError):
            load_settings(path)

    def test_invalid_value_rejected(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("tax_rate: 150\n", encoding="utf-8")
        with pytest.raises(ConfigurationError) as exc_info:
            load_settings(path)
        assert exc_info.value.field == "tax_rate"


class TestSaveAndUpdate:

    def test_save_then_load(self, tmp_path):
        original = StoreSettings(
            store_name="Perera Stores", currency="LKR", enable_tax=True,
            tax_rate=Decimal("12.5"), is_setup_complete=True,
        )
        path = save_settings(original, tmp_path / "config" / "settings.yaml")
        assert path.exists()
        assert load_settings(path) == original

    def test_update_merges_and_validates(self):
        settings = StoreSettings()
        updated = update_settings(settings, enable_tax=True, tax_rate="8")
        assert updated.enable_tax is True
        assert updated.tax_rate == Decimal("8")
        assert updated.store_name == settings.store_name
        assert settings.enable_tax is False

    def test_update_rejects_bad_values(self):
        with pytest.raises(ConfigurationError):
            update_settings(StoreSettings(), currency="???")
