from typing import Callable, Optional

from core.dispatcher import Dispatcher, ExitCommand
from utilities.context import ConsoleContext
from utilities.documentation import ShowDocumentation
from utilities.identity import ShowIdentity
from utilities.lockdown import FullLockdown, PolicyKeysOnly, ServicesAndAdapters
from utilities.revert import RevertAll
from utilities.status import CheckStatus

TITLE = 'Privacy Lockdown Console'


def build_root_menu(context: ConsoleContext, read_line: Optional[Callable[[str], str]] = None,
                    clear: Optional[Callable[[], None]] = None) -> Dispatcher:
    commands = [
        FullLockdown(context),
        CheckStatus(context),
        ServicesAndAdapters(context),
        PolicyKeysOnly(context),
        RevertAll(context),
        ShowIdentity(context),
        ShowDocumentation(),
        ExitCommand(),
    ]

    kwargs = {}
    if read_line is not None:
        kwargs['read_line'] = read_line
    if clear is not None:
        kwargs['clear'] = clear
    return Dispatcher(TITLE, commands, **kwargs)
