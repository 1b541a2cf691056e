import pytest

from brew_bump.errors import InvalidInputError, InvalidVersionError
from brew_bump.version import USER_AGENT, Version, cli_version


@pytest.mark.parametrize(
    "raw", ["1.2.3", "v1.2.3", "2024.01.15", "1.0.0-beta.1", "nightly", " ", " 1.2.3 "]
)
def test_version_keeps_raw_string(raw):
    assert str(Version.parse(raw)) == raw


@pytest.mark.parametrize("raw", [None, ""])
def test_version_rejects_empty(raw):
    with pytest.raises(InvalidVersionError):
        Version.parse(raw)


def test_invalid_version_is_input_error():
    assert issubclass(InvalidVersionError, InvalidInputError)


def test_render_replaces_every_placeholder():
    version = Version.parse("1.2.3")
    rendered = version.render("https://example.com/{{version}}/foo-{{version}}.tar.gz")
    assert rendered == "https://example.com/1.2.3/foo-1.2.3.tar.gz"


def test_render_without_placeholder_is_identity():
    version = Version.parse("1.2.3")
    template = "https://example.com/latest.tar.gz"
    assert version.render(template) == template
    assert version.render(version.render(template)) == template


def test_render_dotted_parts():
    version = Version.parse("v1.2.3")
    assert version.major == "1"
    assert version.minor == "2"
    assert version.patch == "3"
    assert version.render("{{version.major}}.{{version.minor}}") == "1.2"


def test_render_leaves_missing_parts_untouched():
    version = Version.parse("nightly")
    assert version.render("{{version.major}}-{{version}}") == "{{version.major}}-nightly"


def test_render_ignores_other_brace_syntax():
    version = Version.parse("1.0")
    assert version.render("{0} {version} #{version}") == "{0} {version} #{version}"


def test_cli_version_and_user_agent():
    assert cli_version()
    assert USER_AGENT.startswith("brew_bump/")
