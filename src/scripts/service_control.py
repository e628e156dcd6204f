"""
Service Control Manager backend.

- Start type via ChangeServiceConfig
- Stop/start via ControlService/StartService, dependents are stopped first on a forced stop
- Requires: pywin32 (pip install pywin32), run as Administrator
"""
import logging
import time
from typing import Optional

import pywintypes
import win32service

from common.errors import ResourceNotFound
from common.resources import RunState, ServiceState, StartupMode

logger = logging.getLogger(__name__)

ERROR_SERVICE_DOES_NOT_EXIST = 1060
ERROR_SERVICE_NOT_ACTIVE = 1062

# Map WinAPI service start types to StartupMode
START_TYPE_MAP = {
    win32service.SERVICE_BOOT_START: StartupMode.BOOT,
    win32service.SERVICE_SYSTEM_START: StartupMode.SYSTEM,
    win32service.SERVICE_AUTO_START: StartupMode.AUTOMATIC,
    win32service.SERVICE_DEMAND_START: StartupMode.MANUAL,
    win32service.SERVICE_DISABLED: StartupMode.DISABLED,
}

START_MODE_MAP = {
    StartupMode.AUTOMATIC: win32service.SERVICE_AUTO_START,
    StartupMode.MANUAL: win32service.SERVICE_DEMAND_START,
    StartupMode.DISABLED: win32service.SERVICE_DISABLED,
}

RUN_STATE_MAP = {
    win32service.SERVICE_RUNNING: RunState.RUNNING,
    win32service.SERVICE_STOPPED: RunState.STOPPED,
    win32service.SERVICE_START_PENDING: RunState.START_PENDING,
    win32service.SERVICE_STOP_PENDING: RunState.STOP_PENDING,
    win32service.SERVICE_PAUSED: RunState.PAUSED,
}


class WindowsServiceControl:

    def __init__(self, wait_seconds: float = 10.0):
        self._wait_seconds = wait_seconds

    # ---------------- Handles ----------------
    def _open(self, name: str, access: int):
        scm = win32service.OpenSCManager(None, None, win32service.SC_MANAGER_ALL_ACCESS)
        try:
            return scm, win32service.OpenService(scm, name, access)
        except pywintypes.error as e:
            win32service.CloseServiceHandle(scm)
            if e.winerror == ERROR_SERVICE_DOES_NOT_EXIST:
                raise ResourceNotFound(name) from e
            raise

    @staticmethod
    def _close(scm, service):
        win32service.CloseServiceHandle(service)
        win32service.CloseServiceHandle(scm)

    # ---------------- Probe ----------------
    def query_service(self, name: str) -> Optional[ServiceState]:
        try:
            scm, service = self._open(
                name, win32service.SERVICE_QUERY_CONFIG | win32service.SERVICE_QUERY_STATUS)
        except ResourceNotFound:
            return None

        try:
            config = win32service.QueryServiceConfig(service)
            status = win32service.QueryServiceStatus(service)
        finally:
            self._close(scm, service)

        # config[1] = start type, status[1] = current state
        return ServiceState(
            START_TYPE_MAP.get(config[1], StartupMode.UNKNOWN),
            RUN_STATE_MAP.get(status[1], RunState.OTHER),
        )

    # ---------------- Mutators ----------------
    def set_startup_mode(self, name: str, mode: StartupMode) -> None:
        scm, service = self._open(name, win32service.SERVICE_CHANGE_CONFIG)
        try:
            win32service.ChangeServiceConfig(
                service,
                win32service.SERVICE_NO_CHANGE,  # service type
                START_MODE_MAP[mode],            # start type
                win32service.SERVICE_NO_CHANGE,  # error control
                None, None, 0, None, None, None, None
            )
        finally:
            self._close(scm, service)

    def stop(self, name: str, force: bool = True) -> None:
        scm, service = self._open(
            name,
            win32service.SERVICE_STOP | win32service.SERVICE_QUERY_STATUS
            | win32service.SERVICE_ENUMERATE_DEPENDENTS,
        )
        try:
            if force:
                dependents = win32service.EnumDependentServices(service, win32service.SERVICE_ACTIVE)
                for dependent_name, _, _ in dependents:
                    logger.info("Stopping %s (depends on %s)", dependent_name, name)
                    self.stop(dependent_name, force=True)

            try:
                win32service.ControlService(service, win32service.SERVICE_CONTROL_STOP)
            except pywintypes.error as e:
                if e.winerror != ERROR_SERVICE_NOT_ACTIVE:
                    raise

            self._wait_for(service, win32service.SERVICE_STOPPED)
        finally:
            self._close(scm, service)

    def start(self, name: str) -> None:
        scm, service = self._open(name, win32service.SERVICE_START | win32service.SERVICE_QUERY_STATUS)
        try:
            status = win32service.QueryServiceStatus(service)
            if status[1] == win32service.SERVICE_RUNNING:
                return

            win32service.StartService(service, None)
            self._wait_for(service, win32service.SERVICE_RUNNING)
        finally:
            self._close(scm, service)

    def _wait_for(self, service, state: int) -> None:
        deadline = time.time() + self._wait_seconds
        while time.time() < deadline:
            status = win32service.QueryServiceStatus(service)
            if status[1] == state:
                return
            time.sleep(0.5)
