"""Tests for the config and lock document models."""

from __future__ import annotations

import logging

import pytest

from jumon.core.errors import ValidationError
from jumon.core.repository import RepositoryKey
from jumon.state.models import CommandSpec, Config, Lock, RepositoryConfig, RepositoryLockInfo

KEY = RepositoryKey("acme", "tools")


def test_command_spec_install_name_prefers_alias() -> None:
    spec = CommandSpec.from_path("tools/test", alias="acme-test")

    assert spec.name == "test"
    assert spec.path == "tools/test.md"
    assert spec.install_name == "acme-test"
    assert spec.filename == "acme-test.md"
    assert spec.matches("test") and spec.matches("acme-test")


def test_command_spec_from_dict_derives_missing_name() -> None:
    spec = CommandSpec.from_dict({"path": "docs/run.md"})

    assert spec == CommandSpec(name="run", path="docs/run.md", alias=None)


def test_command_spec_from_dict_rejects_strings() -> None:
    with pytest.raises(ValidationError):
        CommandSpec.from_dict("deploy")


def test_empty_only_means_whole_repository() -> None:
    assert RepositoryConfig().installs_all
    assert not RepositoryConfig(only=[CommandSpec("deploy", "deploy.md")]).installs_all


def test_ref_setters_are_mutually_exclusive() -> None:
    config = RepositoryConfig()
    config.set_tag("v1.0.0")
    config.set_branch("dev")

    assert (config.branch, config.tag, config.version) == ("dev", None, None)
    assert config.to_dict() == {"branch": "dev", "only": []}


def test_upsert_command_updates_alias_in_place() -> None:
    config = RepositoryConfig()
    config.upsert_command(CommandSpec.from_path("deploy.md"))
    config.upsert_command(CommandSpec.from_path("deploy.md", alias="ship"))

    assert config.only == [CommandSpec("deploy", "deploy.md", "ship")]
    assert config.find_by_name("ship") is config.only[0]


def test_conflicting_refs_keep_version_first(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING):
        config = RepositoryConfig.from_dict({"branch": "dev", "tag": "v1", "version": "^1.0.0", "only": []}, "acme/tools")

    assert config.version == "^1.0.0"
    assert config.branch is None and config.tag is None
    assert "only one is allowed" in caplog.text


def test_repository_config_validates_types() -> None:
    with pytest.raises(ValidationError):
        RepositoryConfig.from_dict({"branch": 3})
    with pytest.raises(ValidationError):
        RepositoryConfig.from_dict({"only": "deploy"})


def test_config_round_trip_and_invalid_entries_skipped(caplog: pytest.LogCaptureFixture) -> None:
    payload = {
        "repositories": {
            "acme/tools": {"tag": "v1.2.0", "only": [{"name": "deploy", "path": "deploy.md", "alias": None}]},
            "not-a-key": {"only": []},
        }
    }

    with caplog.at_level(logging.WARNING):
        config = Config.from_dict(payload)

    assert list(config.repositories) == ["acme/tools"]
    assert config.to_dict() == {
        "repositories": {
            "acme/tools": {"tag": "v1.2.0", "only": [{"name": "deploy", "path": "deploy.md", "alias": None}]}
        }
    }
    assert "not-a-key" in caplog.text


def test_config_accessors_take_repository_keys() -> None:
    config = Config()
    config.ensure(KEY).set_branch("dev")

    assert config.get(KEY).branch == "dev"
    assert config.items() == [(KEY, config.get(KEY))]
    config.discard(KEY)
    assert config.get(KEY) is None


def test_lock_merge_replaces_entry_with_same_name() -> None:
    info = RepositoryLockInfo(revision="abc")
    info.merge_command(CommandSpec("deploy", "deploy.md"))
    info.merge_command(CommandSpec("deploy", "deploy.md", "ship"))

    assert info.only == [CommandSpec("deploy", "deploy.md", "ship")]
    assert info.remove_command("ship")
    assert info.only == []
    assert not info.remove_command("ship")


def test_lock_serialises_version_field() -> None:
    lock = Lock()
    lock.ensure(KEY).revision = "abc"

    assert lock.to_dict() == {
        "lockfileVersion": 3,
        "repositories": {"acme/tools": {"revision": "abc", "only": []}},
    }
    assert Lock.from_dict(lock.to_dict()) == lock


def test_command_spec_rejects_path_aliases() -> None:
    with pytest.raises(ValidationError):
        CommandSpec.from_path("deploy", alias="../deploy")
    with pytest.raises(ValidationError):
        CommandSpec.from_dict({"path": "deploy.md", "alias": "../../escaped"})
