"""Tests for doittea.patterns.sources module."""

import os
from unittest.mock import MagicMock

import pytest

from doittea import Tea
from doittea.patterns.sources import (
    PluginSource, TaskSource, RawGlobSource, RootGlobSource,
    default_glob, make_source, resolve_sources, strip_cwd,
)


def make_tea(cwd="/work", glob=None, src="assets"):
    tea = Tea(cwd=cwd, glob=glob or MagicMock(return_value=[]), runner=MagicMock())
    tea.configure({'paths': {'src': src, 'des': 'public'}})
    return tea


class TestStripCwd:

    def test_strips_prefix_and_separator(self):
        assert strip_cwd("/work/lib/a.js", "/work") == "lib/a.js"

    def test_relative_path_unchanged(self):
        assert strip_cwd("lib/a.js", "/work") == "lib/a.js"

    def test_other_absolute_path_loses_leading_separator(self):
        assert strip_cwd("/other/a.js", "/work") == "other/a.js"

    def test_sibling_directory_not_stripped(self):
        assert strip_cwd("/workspace/a.js", "/work") == "workspace/a.js"

    def test_trailing_separator_in_cwd(self):
        assert strip_cwd("/work/a.js", "/work/") == "a.js"


class TestMakeSource:

    @pytest.mark.parametrize("pattern,cls", [
        ("#bower", PluginSource),
        ("@vendor:js", TaskSource),
        ("!/abs/*.js", RawGlobSource),
        ("js/*.js", RootGlobSource),
    ])
    def test_strategy_by_prefix(self, pattern, cls):
        assert isinstance(make_source(make_tea(), pattern), cls)


class TestPluginSource:

    def test_paths_made_relative(self):
        tea = make_tea()
        tea.register('plugin', 'bower', lambda: ["/work/lib/a.js", "/work/lib/b.css"])

        assert resolve_sources(tea, "#bower") == ["lib/a.js", "lib/b.css"]

    def test_ext_filter(self):
        tea = make_tea()
        tea.register('plugin', 'bower', lambda: [
            "/work/lib/a.js", "/work/lib/b.css", "/work/lib/c.json", "/work/lib/d.js",
        ])

        files = resolve_sources(tea, "#bower:js")
        assert files == ["lib/a.js", "lib/d.js"]
        assert all(f.endswith(".js") for f in files)

    def test_unknown_plugin_is_empty(self):
        assert resolve_sources(make_tea(), "#missing:js") == []

    def test_plugin_called_without_arguments(self):
        tea = make_tea()
        plugin = MagicMock(return_value=[])
        tea.register('plugin', 'bower', plugin)

        resolve_sources(tea, "#bower")
        plugin.assert_called_once_with()


class TestTaskSource:

    def test_task_output_used(self):
        tea = make_tea()
        tea.register('task', 'vendor', lambda: ["/work/vendor/x.js", "vendor/y.css"])

        assert resolve_sources(tea, "@vendor") == ["vendor/x.js", "vendor/y.css"]
        assert resolve_sources(tea, "@vendor:css") == ["vendor/y.css"]

    def test_task_runs_in_tea_context(self):
        from doittea import current_tea

        tea = make_tea()
        seen = []

        def vendor():
            seen.append(current_tea())
            return []

        tea.register('task', 'vendor', vendor)
        resolve_sources(tea, "@vendor")
        assert seen == [tea]

    def test_unknown_task_is_empty(self):
        tea = make_tea()
        assert resolve_sources(tea, "@missing") == []
        tea.runner.assert_not_called()

    def test_plugin_with_same_name_not_used(self):
        tea = make_tea()
        tea.register('plugin', 'vendor', lambda: ["/work/a.js"])
        assert resolve_sources(tea, "@vendor") == []


class TestGlobSources:

    def test_raw_pattern_passed_unchanged(self):
        glob = MagicMock(return_value=["/abs/a.js"])
        tea = make_tea(glob=glob)

        assert resolve_sources(tea, "!/abs/*.js") == ["/abs/a.js"]
        glob.assert_called_once_with("!/abs/*.js")

    def test_default_joined_onto_source_root(self):
        glob = MagicMock(return_value=["assets/js/a.js"])
        tea = make_tea(glob=glob)

        assert resolve_sources(tea, "js/*.js") == ["assets/js/a.js"]
        glob.assert_called_once_with(os.path.join("assets", "js/*.js"))

    def test_missing_source_root(self):
        glob = MagicMock(return_value=[])
        tea = Tea(cwd="/work", glob=glob, runner=MagicMock())

        assert resolve_sources(tea, "js/*.js") == []
        glob.assert_called_once_with("js/*.js")

    def test_resolution_is_repeatable(self):
        glob = MagicMock(return_value=["assets/a.js", "assets/b.js"])
        tea = make_tea(glob=glob)

        assert resolve_sources(tea, "*.js") == resolve_sources(tea, "*.js")


class TestDefaultGlob:

    def test_sorted_matches(self, tmp_path):
        for name in ["b.js", "a.js", "c.css"]:
            (tmp_path / name).write_text("")

        files = default_glob(str(tmp_path / "*.js"))
        assert files == [str(tmp_path / "a.js"), str(tmp_path / "b.js")]

    def test_recursive(self, tmp_path):
        nested = tmp_path / "js" / "lib"
        nested.mkdir(parents=True)
        (nested / "a.js").write_text("")

        assert default_glob(str(tmp_path / "**" / "*.js")) == [str(nested / "a.js")]

    def test_bang_marks_verbatim_pattern(self, tmp_path):
        (tmp_path / "a.js").write_text("")
        assert default_glob("!" + str(tmp_path / "*.js")) == [str(tmp_path / "a.js")]

    def test_no_matches(self, tmp_path):
        assert default_glob(str(tmp_path / "*.none")) == []

    def test_end_to_end_with_tea(self, tmp_path, monkeypatch):
        (tmp_path / "assets" / "js").mkdir(parents=True)
        (tmp_path / "assets" / "js" / "app.js").write_text("")
        monkeypatch.chdir(tmp_path)

        tea = Tea({'paths': {'src': 'assets'}}, runner=MagicMock())
        assert resolve_sources(tea, "js/*.js") == [os.path.join("assets", "js", "app.js")]

    def test_rooted_relative_pattern(self, tmp_path, monkeypatch):
        (tmp_path / "assets").mkdir()
        (tmp_path / "assets" / "a.js").write_text("")
        monkeypatch.chdir(tmp_path / "assets")

        assert default_glob(os.path.join("assets", "*.js"), root=str(tmp_path)) == [
            os.path.join("assets", "a.js"),
        ]

    def test_rooted_absolute_pattern_unchanged(self, tmp_path):
        (tmp_path / "a.js").write_text("")
        assert default_glob(str(tmp_path / "*.js"), root="/elsewhere") == [
            str(tmp_path / "a.js"),
        ]

    def test_rooted_directory_pattern_keeps_separator(self, tmp_path):
        (tmp_path / "js").mkdir()
        (tmp_path / "js.txt").write_text("")

        assert default_glob("js*" + os.sep, root=str(tmp_path)) == ["js" + os.sep]

    def test_tea_cwd_used_for_sources(self, tmp_path, monkeypatch):
        (tmp_path / "assets").mkdir()
        (tmp_path / "assets" / "a.js").write_text("")
        (tmp_path / "elsewhere").mkdir()
        monkeypatch.chdir(tmp_path / "elsewhere")

        tea = Tea({'paths': {'src': 'assets', 'des': 'public'}},
                  cwd=str(tmp_path), runner=MagicMock())
        assert tea.get_source_files("*.js") == [os.path.join("assets", "a.js")]
        assert tea.get_source_files("!assets/*.js") == [os.path.join("assets", "a.js")]


class TestDirectoryPatterns:

    def test_trailing_separator_kept(self):
        glob = MagicMock(return_value=[])
        tea = make_tea(glob=glob)

        resolve_sources(tea, "js/")
        glob.assert_called_once_with(os.path.join("assets", "js") + os.sep)

    def test_no_trailing_separator_added(self):
        glob = MagicMock(return_value=[])
        tea = make_tea(glob=glob)

        resolve_sources(tea, "js/*.js")
        glob.assert_called_once_with(os.path.join("assets", "js", "*.js"))
