import pytest

from brew_bump.args import BumpArgs
from brew_bump.config import (
    BumpConfig,
    ConfigFile,
    TapRef,
    build_bump_config,
    load_config,
    parse_tap,
    release_tag_from_ref,
    resolve_config_path,
    write_default_config,
)
from brew_bump.errors import CLIError, InvalidInputError


@pytest.mark.parametrize(
    "value, branch, expected",
    [
        ("acme/tools", None, TapRef("acme", "homebrew-tools")),
        ("acme/homebrew-tools", None, TapRef("acme", "homebrew-tools")),
        ("acme/tools:dev", None, TapRef("acme", "homebrew-tools", "dev")),
        ("acme/tools:dev", "release", TapRef("acme", "homebrew-tools", "release")),
    ],
)
def test_parse_tap(value, branch, expected):
    assert parse_tap(value, branch) == expected


@pytest.mark.parametrize("value", ["acme", "acme/", "/tools", "a/b/c"])
def test_parse_tap_rejects_malformed_names(value):
    with pytest.raises(InvalidInputError):
        parse_tap(value)


@pytest.mark.parametrize(
    "ref, expected",
    [
        ("refs/tags/v1.2.3", "v1.2.3"),
        ("v1.2.3", "v1.2.3"),
        ("refs/heads/main", None),
        ("", None),
        (None, None),
    ],
)
def test_release_tag_from_ref(ref, expected):
    assert release_tag_from_ref(ref) == expected


def test_manifest_path_by_type():
    tap = TapRef("acme", "homebrew-tools")
    assert BumpConfig(tap, "foo", "formula", "t").manifest_path == "Formula/foo.rb"
    assert BumpConfig(tap, "foo", "cask", "t").manifest_path == "Casks/foo.rb"


def test_load_config_missing_file_returns_defaults(tmp_path):
    assert load_config(tmp_path / "missing.toml") == ConfigFile()


def test_load_config_reads_known_keys(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text(
        'tap = "acme/tools"\n'
        'type = "cask"\n'
        'message = "Bump {{name}}"\n'
        "pull_request = true\n"
        'fork_owner = "bots"\n'
        'api_url = "https://ghe.example.com/api/v3"\n',
        encoding="utf-8",
    )
    config = load_config(path)
    assert config == ConfigFile(
        tap="acme/tools",
        package_type="cask",
        message="Bump {{name}}",
        pull_request=True,
        fork_owner="bots",
        api_url="https://ghe.example.com/api/v3",
    )


def test_load_config_invalid_toml(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text("tap = [", encoding="utf-8")
    with pytest.raises(CLIError):
        load_config(path)


def test_write_default_config_refuses_overwrite(tmp_path):
    path = tmp_path / "nested" / "config.toml"
    assert write_default_config(path, force=False) == path
    assert "brew_bump configuration" in path.read_text(encoding="utf-8")
    with pytest.raises(CLIError):
        write_default_config(path, force=False)
    write_default_config(path, force=True)


def test_resolve_config_path_honours_env(monkeypatch, tmp_path):
    monkeypatch.setenv("BREW_BUMP_CONFIG", str(tmp_path / "custom.toml"))
    assert resolve_config_path() == tmp_path / "custom.toml"


def test_resolve_config_path_reads_given_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("BREW_BUMP_CONFIG", str(tmp_path / "process.toml"))
    environ = {"BREW_BUMP_CONFIG": str(tmp_path / "context.toml")}
    assert resolve_config_path(environ) == tmp_path / "context.toml"
    assert resolve_config_path({}) != tmp_path / "process.toml"


def test_load_config_uses_path_from_environment(tmp_path):
    path = tmp_path / "context.toml"
    path.write_text('tap = "acme/tools"\n', encoding="utf-8")
    assert load_config(environ={"BREW_BUMP_CONFIG": str(path)}).tap == "acme/tools"


def test_write_default_config_uses_path_from_environment(tmp_path):
    path = tmp_path / "written.toml"
    assert write_default_config(force=False, environ={"BREW_BUMP_CONFIG": str(path)}) == path
    assert path.exists()


def test_build_config_keeps_version_verbatim():
    args = BumpArgs(name="foo", tap="acme/tools", version=" 1.2.3 ", sha256="abc")
    config = build_bump_config(args, ConfigFile(), {}, token="t")
    assert config.version == " 1.2.3 "


def test_blank_strings_count_as_missing():
    file_config = ConfigFile(tap="acme/tools")
    args = BumpArgs(name="foo", tap="   ", version="1", fork_owner=" ")
    config = build_bump_config(args, file_config, {}, token="t")
    assert config.tap.full_name == "acme/homebrew-tools"
    assert config.fork_owner is None


def test_build_config_from_flags():
    args = BumpArgs(name="foo", tap="acme/tools:dev", version="1.2.3", sha256="abc")
    config = build_bump_config(args, ConfigFile(), {}, token="t")
    assert config.tap == TapRef("acme", "homebrew-tools", "dev")
    assert config.package_type == "formula"
    assert config.message == "Update {{name}} to {{version}}"
    assert config.force_pull_request is False
    assert config.api_url == "https://api.github.com"


def test_build_config_falls_back_to_file():
    args = BumpArgs(name="foo", version="1.2.3")
    file_config = ConfigFile(
        tap="acme/tools", package_type="Cask", message="m", pull_request=True, fork_owner="bots"
    )
    config = build_bump_config(args, file_config, {}, token="t")
    assert config.tap.full_name == "acme/homebrew-tools"
    assert config.package_type == "cask"
    assert config.message == "m"
    assert config.force_pull_request is True
    assert config.fork_owner == "bots"


def test_flags_beat_file_values():
    args = BumpArgs(name="foo", tap="other/tap", version="1", pull_request=False, message="x")
    file_config = ConfigFile(tap="acme/tools", pull_request=True, message="m")
    config = build_bump_config(args, file_config, {}, token="t")
    assert config.tap.full_name == "other/homebrew-tap"
    assert config.force_pull_request is False
    assert config.message == "x"


def test_asset_patterns_read_release_from_environment():
    args = BumpArgs(name="foo", tap="acme/tools", assets=["foo-(.+).tgz"])
    environ = {"GITHUB_REPOSITORY": "acme/foo", "GITHUB_REF": "refs/tags/v2.0"}
    config = build_bump_config(args, ConfigFile(), environ, token="t")
    assert config.release_repository == ("acme", "foo")
    assert config.release_tag == "v2.0"
    assert config.asset_patterns == ["foo-(.+).tgz"]


def test_asset_patterns_without_tag_are_rejected():
    args = BumpArgs(name="foo", tap="acme/tools", assets=["foo"], release_repo="acme/foo")
    with pytest.raises(InvalidInputError):
        build_bump_config(args, ConfigFile(), {"GITHUB_REF": "refs/heads/main"}, token="t")


def test_overrides_with_several_patterns_warn(capsys):
    args = BumpArgs(
        name="foo",
        tap="acme/tools",
        assets=["a", "b"],
        sha256="abc",
        release_repo="acme/foo",
        release_tag="v1",
    )
    build_bump_config(args, ConfigFile(), {}, token="t")
    assert "ignored" in capsys.readouterr().err


@pytest.mark.parametrize(
    "args, token",
    [
        (BumpArgs(name="foo", version="1"), "t"),
        (BumpArgs(name="", tap="acme/tools", version="1"), "t"),
        (BumpArgs(name="foo", tap="acme/tools"), "t"),
        (BumpArgs(name="foo", tap="acme/tools", version="1", package_type="bottle"), "t"),
        (BumpArgs(name="foo", tap="acme/tools", version="1"), None),
    ],
)
def test_invalid_inputs(args, token):
    with pytest.raises(InvalidInputError):
        build_bump_config(args, ConfigFile(), {}, token=token)


def test_api_url_environment_precedence():
    args = BumpArgs(name="foo", tap="acme/tools", version="1")
    file_config = ConfigFile(api_url="https://file.example.com")
    assert (
        build_bump_config(
            args,
            file_config,
            {"BREW_BUMP_API_URL": "https://a.example.com", "GITHUB_API_URL": "https://b.example.com"},
            token="t",
        ).api_url
        == "https://a.example.com"
    )
    assert (
        build_bump_config(
            args, file_config, {"GITHUB_API_URL": "https://b.example.com"}, token="t"
        ).api_url
        == "https://b.example.com"
    )
    assert build_bump_config(args, file_config, {}, token="t").api_url == "https://file.example.com"
