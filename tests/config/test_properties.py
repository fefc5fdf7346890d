# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Tests for @config_properties binding of the sidecar subsystems."""

from datetime import timedelta

import pytest
from pydantic import BaseModel

from galera_sidecar.config.properties import (
    ARBITRATOR_SERVICE_NAME,
    LoggingProperties,
    NodeProperties,
    ReadinessProperties,
    SupervisorProperties,
)
from galera_sidecar.core.config import Config, config_properties
from galera_sidecar.kernel.exceptions import ConfigurationException


class Undecorated(BaseModel):
    value: str = "nope"


@config_properties(prefix="sidecar.other")
class NotAModel:
    value: str = "nope"


class TestNodeProperties:
    def test_bind_defaults(self):
        props = Config({"sidecar": {"node": {}}}).bind(NodeProperties)
        assert props.service_name == "mysql"
        assert props.galera_init_address == "127.0.0.1:8114"

    def test_arbitrator_service_name(self):
        props = Config({"sidecar": {"node": {"service_name": "garbd"}}}).bind(NodeProperties)
        assert props.service_name == ARBITRATOR_SERVICE_NAME

    @pytest.mark.parametrize("address", ["localhost", ":8114", "localhost:http"])
    def test_rejects_bad_address(self, address: str):
        config = Config({"sidecar": {"node": {"galera_init_address": address}}})
        with pytest.raises(ConfigurationException, match="NodeProperties"):
            config.bind(NodeProperties)

    def test_rejects_empty_service_name(self):
        config = Config({"sidecar": {"node": {"service_name": ""}}})
        with pytest.raises(ConfigurationException):
            config.bind(NodeProperties)

    def test_env_only_key(self, monkeypatch):
        monkeypatch.setenv("SIDECAR_NODE_STATE_FILE_PATH", "/tmp/state.txt")
        props = Config({}).bind(NodeProperties)
        assert props.state_file_path == "/tmp/state.txt"


class TestSupervisorProperties:
    def test_bind_defaults(self):
        props = Config({}).bind(SupervisorProperties)
        assert props.base_url == "http://127.0.0.1:2822"
        assert props.timeout_delta() == timedelta(seconds=10)

    def test_env_port_is_coerced(self, monkeypatch):
        monkeypatch.setenv("SIDECAR_SUPERVISOR_PORT", "2900")
        props = Config({"sidecar": {"supervisor": {"port": 2822}}}).bind(SupervisorProperties)
        assert props.port == 2900

    def test_rejects_out_of_range_port(self):
        with pytest.raises(ConfigurationException):
            Config({"sidecar": {"supervisor": {"port": 70000}}}).bind(SupervisorProperties)


class TestReadinessProperties:
    def test_bind_defaults(self):
        props = Config({}).bind(ReadinessProperties)
        assert props.tick_interval_delta() == timedelta(seconds=1)
        assert props.probe_timeout_delta() == timedelta(seconds=1)
        assert props.max_wait_delta() is None

    def test_bind_custom_values(self):
        config = Config({"sidecar": {"readiness": {"tick_interval": 0.5, "probe_timeout": 2, "max_wait": 300}}})
        props = config.bind(ReadinessProperties)
        assert props.tick_interval_delta() == timedelta(milliseconds=500)
        assert props.probe_timeout_delta() == timedelta(seconds=2)
        assert props.max_wait_delta() == timedelta(minutes=5)

    def test_rejects_non_positive_probe_timeout(self):
        with pytest.raises(ConfigurationException):
            Config({"sidecar": {"readiness": {"probe_timeout": 0}}}).bind(ReadinessProperties)


class TestLoggingProperties:
    def test_bind_levels(self):
        config = Config({"sidecar": {"logging": {"format": "Json", "level": {"root": "warning", "galera_sidecar.lifecycle": "debug"}}}})
        props = config.bind(LoggingProperties)
        assert props.format == "json"
        assert props.root_level == "WARNING"
        assert props.module_levels == {"galera_sidecar.lifecycle": "DEBUG"}

    def test_env_format_override(self, monkeypatch):
        monkeypatch.setenv("SIDECAR_LOGGING_FORMAT", "json")
        props = Config({"sidecar": {"logging": {"format": "console"}}}).bind(LoggingProperties)
        assert props.format == "json"

    def test_rejects_unknown_format(self):
        with pytest.raises(ConfigurationException, match="LoggingProperties"):
            Config({"sidecar": {"logging": {"format": "xml"}}}).bind(LoggingProperties)

    def test_rejects_unknown_level(self):
        with pytest.raises(ConfigurationException):
            Config({"sidecar": {"logging": {"level": {"root": "LOUD"}}}}).bind(LoggingProperties)


class TestBindErrors:
    def test_undecorated(self):
        with pytest.raises(ConfigurationException, match="not decorated"):
            Config({}).bind(Undecorated)

    def test_not_a_model(self):
        with pytest.raises(ConfigurationException, match="BaseModel"):
            Config({}).bind(NotAModel)
