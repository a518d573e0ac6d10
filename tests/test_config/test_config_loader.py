"""Tests for doittea.config.loader module."""

from unittest.mock import MagicMock

import pytest

from doittea.config.loader import (
    import_path, load_config_file, load_task_module, module_exports,
)
from doittea.config.parser import ConfigLoadError


class TestImportPath:

    def test_imports_module(self, tmp_path):
        path = tmp_path / "helpers.py"
        path.write_text("VALUE = 42\n")
        module = import_path(path)
        assert module.VALUE == 42

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            import_path(tmp_path / "missing.py")

    def test_errors_propagate(self, tmp_path):
        path = tmp_path / "broken.py"
        path.write_text("raise ValueError('broken')\n")
        with pytest.raises(ValueError, match="broken"):
            import_path(path)


class TestLoadConfigFile:

    def test_yaml(self, tmp_path):
        pytest.importorskip("yaml")
        path = tmp_path / "config.yml"
        path.write_text("paths:\n  des: public\n")
        assert load_config_file(path, MagicMock()) == {'paths': {'des': 'public'}}

    def test_factory_receives_tea(self, tmp_path):
        path = tmp_path / "config.py"
        path.write_text(
            "def configure(tea):\n"
            "    return {'scripts': {'app': {'src': tea.pattern}}}\n"
        )
        tea = MagicMock()
        tea.pattern = 'js/*.js'
        assert load_config_file(path, tea) == {'scripts': {'app': {'src': 'js/*.js'}}}

    def test_module_without_config(self, tmp_path):
        path = tmp_path / "config.py"
        path.write_text("x = 1\n")
        assert load_config_file(path, MagicMock()) == {}

    def test_factory_must_return_mapping(self, tmp_path):
        path = tmp_path / "config.py"
        path.write_text("def configure(tea):\n    return ['not', 'a', 'mapping']\n")
        with pytest.raises(ConfigLoadError, match="must provide a mapping"):
            load_config_file(path, MagicMock())

    def test_unsupported_type(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{}")
        with pytest.raises(ConfigLoadError, match="Unsupported config file type"):
            load_config_file(path, MagicMock())


class TestModuleExports:

    def test_public_functions_and_mappings(self, tmp_path):
        path = tmp_path / "tasks.py"
        path.write_text(
            "from os.path import join\n"
            "import json\n"
            "\n"
            "def build(group):\n"
            "    return group\n"
            "\n"
            "def _helper():\n"
            "    pass\n"
            "\n"
            "scripts = {'app': {'src': 'js/*.js'}}\n"
            "VERSION = '1.0'\n"
        )
        bundle = load_task_module(path)
        assert sorted(bundle) == ['build', 'scripts']

    def test_all_overrides_discovery(self, tmp_path):
        path = tmp_path / "tasks.py"
        path.write_text(
            "__all__ = ['init', 'VERSION']\n"
            "def init(tea):\n"
            "    pass\n"
            "def build():\n"
            "    pass\n"
            "VERSION = '1.0'\n"
        )
        module = import_path(path)
        assert module_exports(module) == {'init': module.init, 'VERSION': '1.0'}
