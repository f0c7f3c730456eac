class EquivRwError(Exception):
    def __init__(self, reason, term = None):
        super().__init__(reason)
        self.reason = reason
        self.term = term

    def __str__(self):
        if self.term is None: return self.reason
        return f"{self.reason}: {self.term}"

# the supplied seed is not a relation
class NotAnEquivalence(EquivRwError):
    pass

# search failures
class NoRuleApplies(EquivRwError):
    pass
class StepBoundExceeded(EquivRwError):
    pass
class VacuousDerivation(EquivRwError):
    pass

# rewriting failures
class GeneralizeFailure(EquivRwError):
    pass
class SubstitutionFailure(EquivRwError):
    pass
