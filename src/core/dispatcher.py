import logging
from abc import ABC, abstractmethod
from typing import Callable, List, Optional

from prompt_toolkit import prompt

from core.console import header, print_error
from core.utils import cls

logger = logging.getLogger(__name__)


class MenuCommand(ABC):
    KEY: str = ''
    EXITS: bool = False

    def get_key(self) -> str:
        return self.KEY.upper()

    @abstractmethod
    def get_name(self) -> str:
        raise NotImplementedError

    @abstractmethod
    def process(self):
        raise NotImplementedError


class ExitCommand(MenuCommand):
    KEY = 'Q'
    EXITS = True

    def get_name(self) -> str:
        return 'Exit'

    def process(self):
        pass


class Dispatcher:

    def __init__(
            self,
            title: str,
            commands: List[MenuCommand],
            read_line: Callable[[str], str] = prompt,
            clear: Callable[[], None] = cls,
    ):
        keys = [c.get_key() for c in commands]
        assert len(keys) == len(set(keys)), f"duplicate menu keys: {keys}"

        self._title = title
        self._commands = commands
        self._read_line = read_line
        self._clear = clear

    def lookup(self, selection: str) -> Optional[MenuCommand]:
        selection = selection.strip().upper()
        for command in self._commands:
            if command.get_key() == selection:
                return command
        return None

    def print_menu(self):
        header(self._title)
        for command in self._commands:
            print(f"  {command.get_key()} - {command.get_name()}")
        print()

    def pause(self):
        self._read_line('\nPress Enter to continue...')

    def process(self) -> bool:
        """Run one menu round. Returns False once the user asked to exit."""
        self._clear()
        self.print_menu()

        selection = self._read_line('Select an option: ')
        command = self.lookup(selection)

        if command is None:
            print_error(f"Invalid selection '{selection.strip()}'.")
            self.pause()
            return True

        if command.EXITS:
            return False

        self._clear()
        try:
            command.process()
        except Exception as e:
            logger.exception("Command '%s' failed", command.get_name())
            print_error(f"Unexpected error: {e}")

        self.pause()
        return True
