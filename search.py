from term import TermVariable, MetaVariable, get_unused_name
from matching import match_pattern
from rule_library import SubResult
from errors import NoRuleApplies, StepBoundExceeded, VacuousDerivation
from simple_log import simple_log, is_verbose
from derivation_stats import rule_usage

# Open obligation "find a relation whose left side is `pattern`".
# `local_vars` replace the binders stripped from the sub-obligation.
class SearchNode:
    def __init__(self, pattern, local_vars = ()):
        self.pattern = pattern
        self.local_vars = tuple(local_vars)

    def __str__(self):
        if not self.local_vars: return f"{self.pattern} ~= ?"
        return ' '.join(v.name for v in self.local_vars)+f" |- {self.pattern} ~= ?"

class SeedApplication:
    name = "seed"
    arity = 0
    subgoals = ()

    def __init__(self, seed, holes = None):
        self.seed = seed
        self.holes = holes or dict() # hole -> term, solved by this application
    def instantiate(self, holes):
        return self
    def assemble(self, subresults):
        return self.seed

# The seed applies to its left side, holes of the pattern are solved by matching
class SeedCandidate:
    name = "seed"
    is_seed = True

    def __init__(self, seed):
        self.seed = seed
    def try_apply(self, pattern):
        holes = [v for v in pattern.free_vars if isinstance(v, MetaVariable)]
        if not holes:
            if not pattern.equals_to(self.seed.left): return None
            return SeedApplication(self.seed)
        match = match_pattern(pattern, self.seed.left, holes)
        if match is None: return None
        return SeedApplication(self.seed, match.assignments)

# Bounded depth-first resolution: the seed is tried first at every node,
# then the congruence rules in their fixed order. Every applied candidate
# consumes a step of the derivation under construction.
class EquivSearch:
    def __init__(self, rules, max_depth = 6):
        self.rules = rules
        self.max_depth = max_depth

    def run(self, seed, pattern):
        self._seed_candidate = SeedCandidate(seed)
        self._failures = set()
        self._used_names = set(v.name for v in pattern.free_vars)
        simple_log("equiv_rw search:", pattern, "using", seed)

        res = self._solve((SearchNode(pattern),), (), False, self.max_depth, dict())
        if res is None:
            raise self._failure(seed, pattern)
        trail, holes = res
        if holes:
            simple_log("holes solved:", ', '.join(f"{v} := {t}" for v,t in holes.items()))

        trail_it = iter(trail)
        relation = self._assemble(trail_it, holes)
        assert next(trail_it, None) is None
        assert relation.left.equals_to(pattern.substitute_free(holes)), (relation.left, pattern)
        if is_verbose():
            simple_log("equiv_rw found:", relation, "rule usage:", rule_usage(relation))
        return relation

    def _failure(self, seed, pattern):
        if StepBoundExceeded in self._failures:
            return StepBoundExceeded(f"No derivation within {self.max_depth} steps", pattern)
        if VacuousDerivation in self._failures:
            return VacuousDerivation(f"Every derivation avoids the seed {seed.term}", pattern)
        return NoRuleApplies("No candidate matches", pattern)

    def _candidates(self, pattern):
        yield self._seed_candidate
        yield from self.rules.candidates(pattern)

    # goals: open nodes, the first one is solved next
    # trail: applications so far, in pre-order
    # holes: assignments of the pattern holes solved so far
    def _solve(self, goals, trail, seed_used, steps_left, holes):
        if not goals: return trail, holes
        node, rest = goals[0], goals[1:]
        if steps_left <= 0:
            simple_log("  step bound reached at", node)
            self._failures.add(StepBoundExceeded)
            return None
        pattern = node.pattern.substitute_free(holes)

        applied = False
        for candidate in self._candidates(pattern):
            application = candidate.try_apply(pattern)
            if application is None: continue
            applied = True
            cur_seed_used = seed_used or getattr(candidate, "is_seed", False)
            cur_holes = holes
            if getattr(application, "holes", None):
                cur_holes = dict(holes)
                cur_holes.update(application.holes)
            subnodes = tuple(
                self._strip_binders(subgoal)
                for subgoal in application.subgoals
            )
            new_goals = subnodes + rest
            if not new_goals and not cur_seed_used:
                simple_log("  rejected", candidate.name, "at", node, "- closes without the seed")
                self._failures.add(VacuousDerivation)
                continue
            simple_log("  apply", candidate.name, "at", node)
            res = self._solve(
                new_goals,
                trail + ((application, subnodes),),
                cur_seed_used,
                steps_left - 1,
                cur_holes,
            )
            if res is not None: return res

        if not applied:
            simple_log("  no candidate for", node)
            self._failures.add(NoRuleApplies)
        return None

    # fresh local variables for the leading binders of a sub-obligation
    def _strip_binders(self, subgoal):
        local_vars = []
        for name, _ in subgoal.binders:
            name = get_unused_name(name, self._used_names)
            self._used_names.add(name)
            local_vars.append(TermVariable(0, name))
        pattern = subgoal.body
        if local_vars:
            pattern = pattern.instantiate(*(v.to_term() for v in local_vars))
        return SearchNode(pattern, local_vars)

    # applications made before a hole was solved are redone on the solved pattern
    def _assemble(self, trail_it, holes):
        application, subnodes = next(trail_it)
        if holes: application = application.instantiate(holes)
        subresults = [
            SubResult(self._assemble(trail_it, holes), subnode.local_vars)
            for subnode in subnodes
        ]
        return application.assemble(subresults)
