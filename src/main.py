import ctypes
import logging
import sys

import requests

from common.errors import ConfigError, PrivilegeMissing
from core.config import load_config
from core.console import init_console, print_error
from core.logs import setup_logging
from core.loop import main_loop
from scripts.adapter_control import WmiAdapterControl
from scripts.policy_store import RegistryPolicyStore
from scripts.service_control import WindowsServiceControl
from utilities.context import ConsoleContext
from utilities.root import build_root_menu

logger = logging.getLogger(__name__)


def is_admin():
    """Check if the current process is running as administrator"""
    try:
        return bool(ctypes.windll.shell32.IsUserAnAdmin())
    except (AttributeError, OSError):
        return False


def ensure_admin():
    if not is_admin():
        raise PrivilegeMissing("Administrator rights are required. Run the console as Administrator.")


def start_logging(config):
    """A log file that cannot be opened disables logging, not the console."""
    try:
        setup_logging(config)
    except OSError as e:
        print_error(f"Logging disabled, cannot write {config.log_file}: {e}")


def main():
    sys.stdout.reconfigure(encoding="utf-8")
    sys.stderr.reconfigure(encoding="utf-8")
    init_console()

    try:
        config = load_config()
        start_logging(config)
        ensure_admin()
    except (ConfigError, PrivilegeMissing) as e:
        print_error(str(e))
        sys.exit(1)

    logger.info("Console started")

    with requests.Session() as http:
        context = ConsoleContext(
            config=config,
            services=WindowsServiceControl(wait_seconds=config.service_wait_seconds),
            adapters=WmiAdapterControl(),
            policy_store=RegistryPolicyStore(),
            http=http,
        )
        main_loop(build_root_menu(context))

    logger.info("Console closed")


if __name__ == "__main__":
    main()
