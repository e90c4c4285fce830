"""Tests for configuration loading and the .env layer."""

import pytest

from stripe_bindings import (
    Client,
    ClientConfig,
    ClientParameters,
    ConfigError,
    Headers,
    build_environment,
    load_client_config,
    load_env_file,
)
from stripe_bindings.core.config import DEFAULT_API_BASE, DEFAULT_TIMEOUT_SECONDS
from stripe_bindings.core.environment import parse_env_file

SECRET = "sk_test_abcdefghijklmnop"


class TestClientConfig:
    def test_defaults(self):
        config = ClientConfig.from_mapping({"STRIPE_SECRET_KEY": SECRET})
        assert config.secret_key == SECRET
        assert config.api_base == DEFAULT_API_BASE
        assert config.timeout_seconds == DEFAULT_TIMEOUT_SECONDS
        assert config.stripe_version is None
        assert config.headers == Headers()

    def test_all_values(self):
        config = ClientConfig.from_mapping(
            {
                "STRIPE_SECRET_KEY": f"  {SECRET}  ",
                "STRIPE_API_BASE": "http://localhost:12111/v1/",
                "STRIPE_TIMEOUT_SECONDS": "5",
                "STRIPE_VERSION": "2019-03-14",
                "STRIPE_ACCOUNT": "acct_1",
                "STRIPE_CLIENT_ID": "ca_1",
                "STRIPE_WEBHOOK_SECRET": "whsec_1",
            }
        )
        assert config.secret_key == SECRET
        assert config.api_base == "http://localhost:12111/v1"
        assert config.timeout_seconds == 5
        assert config.headers == Headers(
            stripe_account="acct_1", client_id="ca_1", stripe_version="2019-03-14"
        )
        assert config.webhook_secret == "whsec_1"

    def test_restricted_keys_are_accepted(self):
        assert ClientConfig.from_mapping({"STRIPE_SECRET_KEY": "rk_live_1"}).secret_key == "rk_live_1"

    @pytest.mark.parametrize(
        "values",
        [
            {},
            {"STRIPE_SECRET_KEY": "   "},
            {"STRIPE_SECRET_KEY": "pk_test_publishable"},
            {"STRIPE_SECRET_KEY": SECRET, "STRIPE_API_BASE": "ftp://example.com"},
            {"STRIPE_SECRET_KEY": SECRET, "STRIPE_TIMEOUT_SECONDS": "soon"},
            {"STRIPE_SECRET_KEY": SECRET, "STRIPE_TIMEOUT_SECONDS": "0"},
        ],
    )
    def test_invalid_values(self, values):
        with pytest.raises(ConfigError):
            ClientConfig.from_mapping(values)

    def test_direct_construction_is_normalized(self):
        config = ClientConfig(secret_key=f" {SECRET} ", api_base="https://x.test/v1/", timeout_seconds="7")
        assert config.secret_key == SECRET
        assert config.api_base == "https://x.test/v1"
        assert config.timeout_seconds == 7

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"secret_key": ""},
            {"secret_key": "pk_test_publishable"},
            {"secret_key": SECRET, "api_base": "not a url"},
            {"secret_key": SECRET, "timeout_seconds": 0},
        ],
    )
    def test_direct_construction_is_validated(self, kwargs):
        with pytest.raises(ConfigError):
            ClientConfig(**kwargs)

    def test_from_secret_key_is_validated(self):
        with pytest.raises(ConfigError):
            Client.from_secret_key("")

    def test_with_headers_merges_extra(self):
        config = ClientConfig(secret_key=SECRET, extra_headers={"A": "1"})
        updated = config.with_headers(Headers(extra={"B": "2"}))
        assert updated.headers.extra == {"A": "1", "B": "2"}
        assert config.headers.extra == {"A": "1"}

    def test_repr_hides_the_secret(self):
        config = ClientConfig(secret_key=SECRET)
        assert SECRET not in repr(config)
        assert "sk_test_..." in repr(config)

    def test_with_headers_returns_a_new_config(self):
        config = ClientConfig(secret_key=SECRET, stripe_version="2019-03-14")
        updated = config.with_headers(Headers(stripe_account="acct_9"))
        assert updated.stripe_account == "acct_9"
        assert updated.stripe_version == "2019-03-14"
        assert config.stripe_account is None


class TestLoadClientConfig:
    def test_keyword_arguments_win(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("STRIPE_SECRET_KEY=sk_test_from_file\nSTRIPE_TIMEOUT_SECONDS=9\n")
        config = load_client_config(
            env_file=str(env_file),
            base={},
            secret_key="sk_test_from_kwargs",
        )
        assert config.secret_key == "sk_test_from_kwargs"
        assert config.timeout_seconds == 9

    def test_environment_beats_env_file(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("STRIPE_SECRET_KEY=sk_test_from_file\n")
        config = load_client_config(
            env_file=str(env_file), base={"STRIPE_SECRET_KEY": "sk_test_from_env"}
        )
        assert config.secret_key == "sk_test_from_env"

    def test_parameters_bundle(self):
        parameters = ClientParameters(secret_key=SECRET, timeout_seconds=12)
        assert parameters.as_overrides() == {
            "STRIPE_SECRET_KEY": SECRET,
            "STRIPE_TIMEOUT_SECONDS": "12",
        }
        config = load_client_config(env_file=None, base={}, parameters=parameters)
        assert config.timeout_seconds == 12

    def test_overrides_mapping(self):
        config = load_client_config(
            env_file=None,
            base={"STRIPE_SECRET_KEY": SECRET},
            overrides={"STRIPE_ACCOUNT": "acct_2"},
        )
        assert config.stripe_account == "acct_2"

    def test_missing_secret(self):
        with pytest.raises(ConfigError):
            load_client_config(env_file=None, base={})


class TestEnvironment:
    def test_parse_env_file(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text(
            "# comment\n"
            "\n"
            "STRIPE_SECRET_KEY=sk_test_1\n"
            "export STRIPE_ACCOUNT=acct_1\n"
            'STRIPE_VERSION="2019-03-14"\n'
            "STRIPE_CLIENT_ID=ca_1 # trailing comment\n"
            "NOT A PAIR\n"
        )
        assert parse_env_file(env_file) == {
            "STRIPE_SECRET_KEY": "sk_test_1",
            "STRIPE_ACCOUNT": "acct_1",
            "STRIPE_VERSION": "2019-03-14",
            "STRIPE_CLIENT_ID": "ca_1",
        }

    def test_missing_file_is_empty(self, tmp_path):
        assert parse_env_file(tmp_path / "absent.env") == {}

    def test_load_env_file_keeps_existing_keys(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("A=file\nB=file\n")
        environ = {"A": "process"}
        merged = load_env_file(str(env_file), environ=environ)
        assert merged == {"A": "process", "B": "file"}
        assert environ["B"] == "file"

    def test_build_environment_layers(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("A=file\nB=file\n")
        environment = build_environment(
            env_file=str(env_file), base={"A": "base"}, overrides={"B": "override"}
        )
        assert environment.get("A") == "base"
        assert environment.get("B") == "override"
        assert environment.get("C", "default") == "default"

    def test_with_prefix(self):
        environment = build_environment(
            env_file=None, base={"STRIPE_A": "1", "OTHER": "2"}
        )
        assert environment.with_prefix("STRIPE_") == {"STRIPE_A": "1"}
