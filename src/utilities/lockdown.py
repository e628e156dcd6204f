from common.resources import Target
from utilities.context import ContextCommand
from utilities.passes import adapters_pass, policy_keys_pass, services_pass, summarize


class FullLockdown(ContextCommand):
    KEY = '1'

    def get_name(self) -> str:
        return 'Full lockdown (services, wireless adapters, policy keys)'

    def process(self):
        outcomes = services_pass(self._context, Target.LOCKDOWN)
        outcomes += adapters_pass(self._context, Target.LOCKDOWN)
        outcomes += policy_keys_pass(self._context, Target.LOCKDOWN)
        summarize(outcomes)


class ServicesAndAdapters(ContextCommand):
    KEY = '3'

    def get_name(self) -> str:
        return 'Disable services and wireless adapters only'

    def process(self):
        outcomes = services_pass(self._context, Target.LOCKDOWN)
        outcomes += adapters_pass(self._context, Target.LOCKDOWN)
        summarize(outcomes)


class PolicyKeysOnly(ContextCommand):
    KEY = '4'

    def get_name(self) -> str:
        return 'Apply location policy keys only'

    def process(self):
        summarize(policy_keys_pass(self._context, Target.LOCKDOWN))
