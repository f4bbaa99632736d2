"""
Tests for LintConfig and SiteConfig.
"""

from pathlib import Path

import pytest

from postlint.config import DEFAULT_EXCERPT_SEPARATOR, LintConfig, SiteConfig
from postlint.errors import InvalidConfigError, MissingConfigError
from postlint.report import Severity
from postlint.rules import MixedCodeStylesRule, UnclosedFenceRule


class TestLintConfigDefaults:
    """Test default values."""

    def test_defaults(self):
        config = LintConfig()

        assert config.site_root == Path(".")
        assert config.posts_dir == "_posts"
        assert config.include_drafts is False
        assert config.extensions == [".md", ".markdown"]
        assert config.required_fields == ["layout", "title"]
        assert config.fail_on == "error"
        assert config.check_external is False

    def test_paths(self, tmp_path):
        config = LintConfig(site_root=tmp_path)

        assert config.posts_path == tmp_path / "_posts"
        assert config.drafts_path == tmp_path / "_drafts"

    def test_string_site_root_becomes_path(self, tmp_path):
        config = LintConfig(site_root=str(tmp_path))
        assert config.site_root == tmp_path

    def test_extensions_get_dot(self):
        config = LintConfig(extensions=["md", ".markdown"])
        assert config.extensions == [".md", ".markdown"]


class TestLintConfigValidation:
    """Invalid values are rejected when the config is built."""

    def test_unknown_field_type(self):
        with pytest.raises(InvalidConfigError) as exc_info:
            LintConfig(field_types={"title": "string"})
        assert exc_info.value.key == "field_types.title"

    def test_unknown_fail_on(self):
        with pytest.raises(InvalidConfigError) as exc_info:
            LintConfig(fail_on="fatal")
        assert exc_info.value.key == "fail_on"

    def test_unknown_severity_override(self):
        with pytest.raises(InvalidConfigError):
            LintConfig(severity_overrides={"MD004": "loud"})

    def test_workers_must_be_positive(self):
        with pytest.raises(InvalidConfigError):
            LintConfig(external_workers=0)

    def test_none_falls_back_to_default(self):
        config = LintConfig(severity_overrides=None, field_types=None, disabled_rules=None)

        assert config.severity_overrides == {}
        assert config.field_types["comments"] == "bool"
        assert config.disabled_rules == []

    def test_tuple_becomes_list(self):
        assert LintConfig(required_fields=("title",)).required_fields == ["title"]

    @pytest.mark.parametrize("key,value", [
        ("disabled_rules", "MD004"),
        ("required_fields", ["title", 3]),
        ("severity_overrides", ["MD004"]),
        ("field_types", {"title": None}),
        ("include_drafts", "yes please"),
        ("external_workers", "5"),
        ("external_workers", True),
        ("external_timeout", 0),
        ("posts_dir", 7),
        ("site_root", 42),
    ])
    def test_wrong_shape(self, key, value):
        with pytest.raises(InvalidConfigError) as exc_info:
            LintConfig(**{key: value})
        assert exc_info.value.key == key

    def test_unknown_key(self):
        with pytest.raises(InvalidConfigError) as exc_info:
            LintConfig.from_dict({"posts_dir": "_posts", "colour": "blue"})
        assert exc_info.value.key == "colour"


class TestLintConfigYaml:
    """Test loading from YAML files."""

    def test_from_yaml(self, tmp_path):
        config_file = tmp_path / ".postlint.yml"
        config_file.write_text(
            "include_drafts: true\n"
            "disabled_rules: [MD004]\n"
            "severity_overrides:\n"
            "  DUP001: error\n"
            "fail_on: warning\n"
        )

        config = LintConfig.from_yaml(config_file)

        assert config.site_root == tmp_path
        assert config.include_drafts is True
        assert config.disabled_rules == ["MD004"]
        assert config.severity_overrides == {"DUP001": "error"}
        assert config.fail_on == "warning"

    def test_relative_site_root_resolved_against_file(self, tmp_path):
        config_file = tmp_path / "config" / "postlint.yml"
        config_file.parent.mkdir()
        config_file.write_text("site_root: ../blog\n")

        config = LintConfig.from_yaml(config_file)
        assert config.site_root == tmp_path / "config" / ".." / "blog"

    def test_empty_file_is_defaults(self, tmp_path):
        config_file = tmp_path / ".postlint.yml"
        config_file.write_text("")

        config = LintConfig.from_yaml(config_file)
        assert config.required_fields == ["layout", "title"]

    def test_empty_sections_are_defaults(self, tmp_path):
        config_file = tmp_path / ".postlint.yml"
        config_file.write_text("severity_overrides:\nfield_types:\nsite_root:\n")

        config = LintConfig.from_yaml(config_file)

        assert config.severity_overrides == {}
        assert config.field_types["title"] == "str"
        assert config.site_root == tmp_path

    @pytest.mark.parametrize("text,key", [
        ("external_workers: '5'\n", "external_workers"),
        ("disabled_rules: MD004\n", "disabled_rules"),
        ("severity_overrides: [MD004]\n", "severity_overrides"),
        ("site_root: [a, b]\n", "site_root"),
    ])
    def test_wrong_shape_in_file(self, tmp_path, text, key):
        config_file = tmp_path / ".postlint.yml"
        config_file.write_text(text)

        with pytest.raises(InvalidConfigError) as exc_info:
            LintConfig.from_yaml(config_file)
        assert exc_info.value.key == key

    def test_missing_file(self, tmp_path):
        with pytest.raises(MissingConfigError):
            LintConfig.from_yaml(tmp_path / "nope.yml")

    def test_invalid_yaml(self, tmp_path):
        config_file = tmp_path / ".postlint.yml"
        config_file.write_text("disabled_rules: [MD004\n")

        with pytest.raises(InvalidConfigError):
            LintConfig.from_yaml(config_file)

    def test_not_a_mapping(self, tmp_path):
        config_file = tmp_path / ".postlint.yml"
        config_file.write_text("- MD004\n")

        with pytest.raises(InvalidConfigError):
            LintConfig.from_yaml(config_file)

    def test_discover_without_file(self, tmp_path):
        config = LintConfig.discover(tmp_path)

        assert config.site_root == tmp_path
        assert config.disabled_rules == []

    def test_discover_with_file_and_overrides(self, tmp_path):
        (tmp_path / ".postlint.yml").write_text("disabled_rules: [DUP001]\n")

        config = LintConfig.discover(tmp_path, include_drafts=True)

        assert config.disabled_rules == ["DUP001"]
        assert config.include_drafts is True

    def test_to_dict_round_trips(self, tmp_path):
        config = LintConfig(site_root=tmp_path, disabled_rules=["MD004"], check_external=True)
        assert LintConfig.from_dict(config.to_dict()) == config


class TestShouldSkip:
    """Test skip pattern matching."""

    @pytest.fixture
    def config(self):
        return LintConfig(skip_patterns=["vendor", "_posts/archive"])

    def test_component_match(self, config):
        assert config.should_skip(Path("_posts/vendor/2020-01-01-a.md"))

    def test_component_pattern_does_not_match_inside_names(self, config):
        assert not config.should_skip(Path("_posts/2020-01-01-vendoring.md"))

    def test_slash_pattern_matches_substring(self, config):
        assert config.should_skip(Path("_posts/archive/2010-01-01-old.md"))


class TestRuleSettings:
    """Rule enablement and severity overrides."""

    def test_disabled_by_code(self):
        config = LintConfig(disabled_rules=["md004"])

        assert not config.is_enabled(MixedCodeStylesRule())
        assert config.is_enabled(UnclosedFenceRule())

    def test_disabled_by_name(self):
        config = LintConfig(disabled_rules=["mixed-code-styles"])
        assert not config.is_enabled(MixedCodeStylesRule())

    def test_severity_default(self):
        assert LintConfig().severity_for(UnclosedFenceRule()) == Severity.ERROR

    def test_severity_override_by_code(self):
        config = LintConfig(severity_overrides={"MD001": "warning"})
        assert config.severity_for(UnclosedFenceRule()) == Severity.WARNING

    def test_severity_override_by_name(self):
        config = LintConfig(severity_overrides={"unclosed-code-fence": "INFO"})
        assert config.severity_for(UnclosedFenceRule()) == Severity.INFO


class TestSiteConfig:
    """Test reading _config.yml and _layouts."""

    def test_missing_config(self, tmp_path):
        site = SiteConfig.load(tmp_path)

        assert site.data == {}
        assert site.layouts is None
        assert site.excerpt_separator == DEFAULT_EXCERPT_SEPARATOR
        assert site.baseurl == ""
        assert site.theme is None

    def test_values(self, tmp_path):
        (tmp_path / "_config.yml").write_text(
            "baseurl: /blog\n"
            "excerpt_separator: <!--more-->\n"
            "remote_theme: pages-themes/minimal\n"
        )
        (tmp_path / "_layouts").mkdir()
        (tmp_path / "_layouts" / "post.html").write_text("{{ content }}")
        (tmp_path / "_layouts" / "page.html").write_text("{{ content }}")

        site = SiteConfig.load(tmp_path)

        assert site.baseurl == "/blog"
        assert site.excerpt_separator == "<!--more-->"
        assert site.theme == "pages-themes/minimal"
        assert site.layouts == {"post", "page"}

    def test_invalid_yaml(self, tmp_path):
        (tmp_path / "_config.yml").write_text("title: [unclosed\n")

        with pytest.raises(InvalidConfigError):
            SiteConfig.load(tmp_path)

    def test_defaults_most_specific_wins(self, tmp_path):
        (tmp_path / "_config.yml").write_text(
            "defaults:\n"
            "  - scope:\n"
            "      path: _posts/tutorials\n"
            "    values:\n"
            "      layout: tutorial\n"
            "  - scope:\n"
            "      path: \"\"\n"
            "      type: posts\n"
            "    values:\n"
            "      layout: post\n"
            "      comments: true\n"
            "  - scope:\n"
            "      type: pages\n"
            "    values:\n"
            "      layout: page\n"
        )
        site = SiteConfig.load(tmp_path)

        assert site.defaults_for("_posts/tutorials/2020-01-01-a.md") == {
            "layout": "tutorial",
            "comments": True,
        }
        assert site.defaults_for("_posts/2020-01-01-b.md") == {"layout": "post", "comments": True}

    def test_defaults_path_is_a_directory_prefix(self, tmp_path):
        (tmp_path / "_config.yml").write_text(
            "defaults:\n"
            "  - scope:\n"
            "      path: _posts/tut\n"
            "    values:\n"
            "      layout: tutorial\n"
        )
        site = SiteConfig.load(tmp_path)

        assert site.defaults_for("_posts/tutorials/2020-01-01-a.md") == {}
