import sys
from typing import Dict, List, Optional, Set, Tuple

import pytest
import requests

from common.errors import ResourceNotFound
from common.lockdown_policy import LockdownPolicy
from common.resources import (
    AdapterStatus,
    RunState,
    ServiceState,
    StartupMode,
    WirelessAdapter,
)
from core.config import AppConfig
from utilities.context import ConsoleContext

from fake_windows import FakeWindows


class FakeServiceControl:
    """In-memory Service Control Manager."""

    def __init__(self, services: Dict[str, ServiceState]):
        self.services = dict(services)
        self.calls: List[Tuple[str, str]] = []
        self.fail_on: Dict[Tuple[str, str], str] = {}

    def _check(self, op: str, name: str):
        self.calls.append((op, name))
        if (op, name) in self.fail_on:
            raise OSError(self.fail_on[(op, name)])
        if name not in self.services:
            raise ResourceNotFound(name)

    def query_service(self, name: str) -> Optional[ServiceState]:
        return self.services.get(name)

    def set_startup_mode(self, name: str, mode: StartupMode) -> None:
        self._check("set_startup_mode", name)
        self.services[name] = ServiceState(mode, self.services[name].run_state)

    def stop(self, name: str, force: bool = True) -> None:
        self._check("stop", name)
        self.services[name] = ServiceState(self.services[name].startup_mode, RunState.STOPPED)

    def start(self, name: str) -> None:
        self._check("start", name)
        state = self.services[name]
        if state.startup_mode is StartupMode.DISABLED:
            raise OSError("service is disabled")
        self.services[name] = ServiceState(state.startup_mode, RunState.RUNNING)

    @property
    def mutations(self):
        return [c for c in self.calls if c[0] != "query_service"]


class FakeAdapterControl:

    def __init__(self, adapters: List[WirelessAdapter]):
        self.adapters = {a.name: a for a in adapters}
        self.list_calls = 0
        self.set_calls: List[Tuple[str, bool]] = []

    def list_adapters(self, physical_only: bool = True) -> List[WirelessAdapter]:
        self.list_calls += 1
        return list(self.adapters.values())

    def set_adapter_enabled(self, name: str, enabled: bool) -> None:
        self.set_calls.append((name, enabled))
        if name not in self.adapters:
            raise ResourceNotFound(name)
        adapter = self.adapters[name]
        status = AdapterStatus.UP if enabled else AdapterStatus.DISABLED
        self.adapters[name] = WirelessAdapter(adapter.name, adapter.description, status)


class FakePolicyStore:

    def __init__(self):
        self.paths: Set[str] = set()
        self.values: Dict[Tuple[str, str], int] = {}
        self.writes = 0
        self.fail_names: Set[str] = set()

    def ensure_path(self, path: str) -> None:
        self.writes += 1
        self.paths.add(path)

    def set_value(self, path: str, name: str, value: int) -> None:
        self.writes += 1
        if name in self.fail_names:
            raise PermissionError("access denied")
        if path not in self.paths:
            raise FileNotFoundError(path)
        self.values[(path, name)] = value

    def get_value(self, path: str, name: str) -> Optional[int]:
        return self.values.get((path, name))

    def delete_value(self, path: str, name: str) -> bool:
        self.writes += 1
        return self.values.pop((path, name), None) is not None

    def remove_path(self, path: str) -> bool:
        if path not in self.paths:
            return False
        self.paths.discard(path)
        self.values = {k: v for k, v in self.values.items() if k[0] != path}
        return True


class FakeResponse:

    def __init__(self, body, status_code: int = 200):
        self._body = body
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        if isinstance(self._body, Exception):
            raise self._body
        return self._body


class FakeSession:
    """Maps URL -> FakeResponse or exception; records requested URLs."""

    def __init__(self, routes):
        self.routes = routes
        self.requested: List[str] = []

    def get(self, url, timeout=None):
        self.requested.append(url)
        result = self.routes.get(url)
        if result is None:
            raise requests.ConnectionError(f"no route to {url}")
        if isinstance(result, Exception):
            raise result
        return result


POLICY_PATH = "HKLM\\SOFTWARE\\Policies\\Test"

RUNNING_AUTO = ServiceState(StartupMode.AUTOMATIC, RunState.RUNNING)


@pytest.fixture
def policy():
    return LockdownPolicy(
        services=("svcA", "svcB"),
        policy_path=POLICY_PATH,
        policy_values={"X": 1, "Y": 1},
    )


@pytest.fixture
def service_control():
    return FakeServiceControl({"svcA": RUNNING_AUTO, "svcB": RUNNING_AUTO})


@pytest.fixture
def adapter_control():
    return FakeAdapterControl([
        WirelessAdapter("Wi-Fi", "Intel(R) Wi-Fi 6 AX201 160MHz", AdapterStatus.UP),
        WirelessAdapter("Ethernet", "Realtek PCIe GbE Family Controller", AdapterStatus.UP),
    ])


@pytest.fixture
def policy_store():
    return FakePolicyStore()


@pytest.fixture
def context(policy, service_control, adapter_control, policy_store):
    return ConsoleContext(
        config=AppConfig(policy=policy),
        services=service_control,
        adapters=adapter_control,
        policy_store=policy_store,
        http=FakeSession({}),
    )


# Modules that import win32service, pywintypes, winreg or wmi at import time
WINDOWS_BACKED_MODULES = (
    "scripts.service_control",
    "scripts.policy_store",
    "scripts.adapter_control",
    "main",
)


@pytest.fixture
def windows(monkeypatch):
    """
    Fake Windows modules in sys.modules. Modules from WINDOWS_BACKED_MODULES
    imported during the test are bound to the fakes and dropped afterwards.
    """
    fakes = FakeWindows()
    for name, module in fakes.modules().items():
        monkeypatch.setitem(sys.modules, name, module)
    for name in WINDOWS_BACKED_MODULES:
        monkeypatch.delitem(sys.modules, name, raising=False)

    yield fakes

    for name in WINDOWS_BACKED_MODULES:
        sys.modules.pop(name, None)
