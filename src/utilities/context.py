from dataclasses import dataclass

import requests

from common.resources import AdapterControl, PolicyStore, ServiceControl
from core.config import AppConfig
from core.dispatcher import MenuCommand


@dataclass(frozen=True)
class ConsoleContext:
    """Everything a menu command needs, built once in main()."""
    config: AppConfig
    services: ServiceControl
    adapters: AdapterControl
    policy_store: PolicyStore
    http: requests.Session


class ContextCommand(MenuCommand):

    def __init__(self, context: ConsoleContext):
        self._context = context
