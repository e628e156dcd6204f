from colorama import Fore, Style, init

from common.reconciler import OutcomeStatus, ReconcileOutcome

RULE_WIDTH = 70


def init_console():
    init(autoreset=True)


def header(title: str):
    print()
    print(f"{Fore.CYAN}{'=' * RULE_WIDTH}{Style.RESET_ALL}")
    print(f"{Fore.CYAN}{title}{Style.RESET_ALL}")
    print(f"{Fore.CYAN}{'=' * RULE_WIDTH}{Style.RESET_ALL}")


def print_ok(message: str):
    print(f"{Fore.GREEN}[OK] {message}{Style.RESET_ALL}")


def print_info(message: str):
    print(f"{Fore.YELLOW}[--] {message}{Style.RESET_ALL}")


def print_error(message: str):
    print(f"{Fore.RED}[ERROR] {message}{Style.RESET_ALL}")


def format_outcome(outcome: ReconcileOutcome) -> str:
    name = f"{outcome.kind.value} '{outcome.resource_name}'"

    if outcome.status is OutcomeStatus.APPLIED:
        return f"{Fore.GREEN}[OK] {name}: {outcome.state}{Style.RESET_ALL}"
    if outcome.status is OutcomeStatus.OBSERVED:
        return f"{Fore.WHITE}[..] {name}: {outcome.state}{Style.RESET_ALL}"
    if outcome.status is OutcomeStatus.NOT_FOUND:
        return f"{Fore.YELLOW}[--] {name}: not found{Style.RESET_ALL}"
    return f"{Fore.RED}[ERROR] {name}: {outcome.reason}{Style.RESET_ALL}"


def print_outcome(outcome: ReconcileOutcome):
    print(format_outcome(outcome))
