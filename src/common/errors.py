class ConsoleError(RuntimeError):
    pass


class PrivilegeMissing(ConsoleError):
    pass


class ConfigError(ConsoleError):
    pass


class ResourceNotFound(ConsoleError):
    """Raised by a backend when the named service/adapter does not exist."""

    def __init__(self, name: str):
        super().__init__(f"'{name}' not found")
        self.name = name


class MutationFailed(ConsoleError):
    pass


class NetworkCallFailed(ConsoleError):
    pass
