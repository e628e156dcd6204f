from common.resources import Target
from utilities.context import ContextCommand
from utilities.passes import adapters_pass, policy_keys_pass, services_pass, summarize


class RevertAll(ContextCommand):
    KEY = '5'

    def get_name(self) -> str:
        return 'Revert everything to defaults'

    def process(self):
        outcomes = services_pass(self._context, Target.REVERT)
        outcomes += adapters_pass(self._context, Target.REVERT)
        outcomes += policy_keys_pass(self._context, Target.REVERT)
        summarize(outcomes)
