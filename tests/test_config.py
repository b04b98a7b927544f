"""Tests for host configuration extraction."""

from __future__ import annotations

import pytest

from conftest import host_config, write
from include_dependencies.config import (
    SERVICE_FILE_ENV_VAR,
    PluginOptions,
    ResolutionContext,
    load_service_config,
)
from include_dependencies.errors import ConfigError, ErrorKind


class TestResolutionContext:
    """Tests for ResolutionContext.from_host."""

    def test_defaults(self, service):
        context = ResolutionContext.from_host(host_config(service))

        assert context.service_path == service
        assert context.use_local_node_modules is False
        assert context.ignore_package_json_dependencies is False
        assert context.ignored_package_names == frozenset()

    def test_reads_plugin_options(self, service):
        context = ResolutionContext.from_host(
            host_config(
                service,
                {
                    "shouldUseLocalNodeModules": True,
                    "shouldIgnorePackageJsonDependencies": True,
                    "packagesToBeIgnored": ["aws-sdk", "@aws-sdk/client-s3"],
                },
            )
        )

        assert context.use_local_node_modules is True
        assert context.ignore_package_json_dependencies is True
        assert context.ignored_package_names == {"aws-sdk", "@aws-sdk/client-s3"}

    def test_explicit_log_wins(self, service):
        messages: list[str] = []
        record = host_config(service)
        record["cli"] = {"log": lambda message: None}

        context = ResolutionContext.from_host(record, log=messages.append)
        context.log("hello")

        assert messages == ["hello"]

    @pytest.mark.parametrize(
        "options",
        [
            {"shouldUseLocalNodeModules": "yes"},
            {"packagesToBeIgnored": "aws-sdk"},
            {"packagesToBeIgnored": [""]},
            ["not", "a", "mapping"],
        ],
    )
    def test_invalid_options_rejected(self, service, options):
        with pytest.raises(ConfigError) as excinfo:
            ResolutionContext.from_host(host_config(service, options))

        assert excinfo.value.kind is ErrorKind.HOST_MISCONFIGURATION
        assert "serverless-plugin-include-dependencies" in str(excinfo.value)

    @pytest.mark.parametrize("record", [None, "service", {"config": {"servicePath": ""}}])
    def test_missing_host_record(self, record):
        with pytest.raises(ConfigError):
            ResolutionContext.from_host(record)


class TestPluginOptions:
    """Tests for PluginOptions.from_host."""

    def test_defaults(self, service):
        assert PluginOptions.from_host(host_config(service)).enable_caching is False

    def test_enable_caching(self, service):
        record = host_config(service)
        record["service"]["custom"]["includeDependencies"] = {"enableCaching": True}
        assert PluginOptions.from_host(record).enable_caching is True


class TestLoadServiceConfig:
    """Tests for reading serverless.yml."""

    def test_loads_yaml(self, tmp_path):
        service_file = write(
            tmp_path,
            "svc/serverless.yml",
            "service: demo\n"
            "provider:\n  runtime: nodejs18.x\n"
            "custom:\n  serverless-plugin-include-dependencies:\n    packagesToBeIgnored: [aws-sdk]\n",
        )

        record = load_service_config(service_file)

        assert record["config"]["servicePath"] == str(service_file.parent)
        assert record["service"]["provider"]["runtime"] == "nodejs18.x"
        context = ResolutionContext.from_host(record)
        assert context.ignored_package_names == {"aws-sdk"}

    def test_env_var(self, tmp_path, monkeypatch):
        service_file = write(tmp_path, "elsewhere.yml", "service: demo\n")
        monkeypatch.setenv(SERVICE_FILE_ENV_VAR, str(service_file))

        assert load_service_config()["service"] == {"service": "demo"}

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            load_service_config(tmp_path / "serverless.yml")

    def test_invalid_yaml(self, tmp_path):
        service_file = write(tmp_path, "serverless.yml", "service: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_service_config(service_file)

    def test_not_a_mapping(self, tmp_path):
        service_file = write(tmp_path, "serverless.yml", "- just\n- a list\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_service_config(service_file)
