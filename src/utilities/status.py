from utilities.context import ContextCommand
from utilities.passes import adapters_pass, policy_keys_pass, services_pass


class CheckStatus(ContextCommand):
    KEY = '2'

    def get_name(self) -> str:
        return 'Check status'

    def process(self):
        # probe-only: no target, nothing is mutated
        services_pass(self._context, None)
        adapters_pass(self._context, None)
        policy_keys_pass(self._context, None)
