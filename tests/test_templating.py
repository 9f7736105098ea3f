"""Tests for kargogen.templating."""

from __future__ import annotations

from pathlib import Path

from kargogen.templating import RESOURCE_KINDS, TemplateSet, expand, find_unresolved_tokens


def test_expand_replaces_every_occurrence() -> None:
    text = "name: {{SERVICE_NAME}}\nlabel: {{SERVICE_NAME}}-{{REGION}}\n"
    result = expand(text, {"SERVICE_NAME": "nginx", "REGION": "us-east-1"})
    assert result == "name: nginx\nlabel: nginx-us-east-1\n"


def test_expand_leaves_unknown_tokens_verbatim() -> None:
    text = "a: {{SERVICE_NAME}}\nb: {{UNKNOWN_TOKEN}}\n"
    result = expand(text, {"SERVICE_NAME": "nginx"})
    assert "{{UNKNOWN_TOKEN}}" in result
    assert "a: nginx" in result


def test_expand_inserts_values_literally() -> None:
    result = expand("url: {{GIT_REPO_URL}}", {"GIT_REPO_URL": r"https://x/\1$0{{REGION}}"})
    assert result == r"url: https://x/\1$0{{REGION}}"


def test_expand_does_not_reexpand_tokens_inside_values() -> None:
    replacements = {"GIT_REPO_URL": "https://h/{{REGION}}.git", "REGION": "us-east-1"}
    reordered = {"REGION": "us-east-1", "GIT_REPO_URL": "https://h/{{REGION}}.git"}
    text = "url: {{GIT_REPO_URL}}\nregion: {{REGION}}\n"

    expected = "url: https://h/{{REGION}}.git\nregion: us-east-1\n"
    assert expand(text, replacements) == expected
    assert expand(text, reordered) == expected


def test_expand_does_not_touch_spaced_expressions() -> None:
    text = "repoURL: ${{ vars.gitRepo }}"
    assert expand(text, {"vars.gitRepo": "nope"}) == text


def test_find_unresolved_tokens_lists_distinct_names() -> None:
    text = "{{B}} {{A}} {{B}} ${{ vars.repo }}"
    assert find_unresolved_tokens(text) == ["A", "B"]


def test_template_set_paths(tmp_path: Path) -> None:
    templates = TemplateSet(tmp_path)
    assert list(templates.kinds) == ["namespace", "project", "warehouse", "stages"]
    assert templates.template_path("project") == tmp_path / "project.yaml.template"
    assert TemplateSet.output_name("stages") == "stages.yaml"


def test_bundled_templates_exist() -> None:
    bundled = TemplateSet.bundled()
    for kind in RESOURCE_KINDS:
        assert bundled.template_path(kind).is_file()
