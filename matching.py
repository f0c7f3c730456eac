from term import TermApp, BVar

# One-sided higher order pattern matching. Only the variables in `assignable`
# can be assigned, the matched term is rigid. A variable applied to distinct
# locally bound variables (Miller pattern) is assigned the abstracted subterm,
# e.g. P(x) against Eq(x, c) under a binder gives P := Eq(^1^, c).

class PatternMatch:
    def __init__(self, assignable):
        self.assignable = frozenset(assignable)
        self.assignments = dict() # var -> term with BVar(i) for the i-th argument from the end
        self.to_match = []

    def add_requirement(self, pattern, term):
        self.to_match.append((pattern, term, 0))

    def run(self):
        stack = self.to_match
        self.to_match = []
        stack.reverse()
        postponed = []
        while stack:
            pattern, term, depth = stack.pop()
            if isinstance(pattern, BVar):
                if not pattern.equals_to(term): return False
                continue
            if pattern.f in self.assignable:
                assign_result = self._assign(pattern, term, depth)
                if assign_result is None: # not a pattern, check after the others
                    postponed.append((pattern, term, depth))
                elif not assign_result: return False
                continue
            if pattern.f != term.f: return False
            stack.extend(
                (sp, st, depth+numb)
                for sp, st, numb in zip(
                    reversed(pattern.args), reversed(term.args),
                    reversed(pattern.f.signature),
                )
            )

        for pattern, term, depth in postponed:
            if pattern.f not in self.assignments: return False
            if not self.instantiate(pattern).equals_to(term): return False
        return True

    def _assign(self, pattern, term, depth):
        v = pattern.f
        if v.arity == 0:
            if term.debruijn_height > 0: return False # would escape its binder
            abstract = term
        else:
            if not all(isinstance(arg, BVar) for arg in pattern.args): return None
            pattern_vars = [arg.debruijn_height for arg in pattern.args]
            if len(set(pattern_vars)) != len(pattern_vars): return None
            if any(pv > depth for pv in pattern_vars): return None
            args = [None]*(max(pattern_vars)+1)
            for i,pv in enumerate(pattern_vars):
                args[pv] = BVar(v.arity-i)
            for bv in term.bound_vars:
                if bv >= len(args) or args[bv] is None:
                    return False # missing variable
            abstract = term.substitute_bvars(args, natural_order = False)

        ori = self.assignments.get(v, None)
        if ori is not None: return ori.equals_to(abstract)
        self.assignments[v] = abstract
        return True

    def instantiate(self, pattern):
        return pattern.substitute_free(self.assignments)

    def __getitem__(self, v):
        return self.assignments[v]

def match_pattern(pattern, term, assignable):
    match = PatternMatch(assignable)
    match.add_requirement(pattern, term)
    if not match.run(): return None
    return match

# TESTS

if __name__ == "__main__":
    from term import TermConstant, TermVariable

    Nat = TermConstant((), "Nat")
    Forall = TermConstant((0,1), "Forall")
    Eq = TermConstant((0,0), "Eq")
    c = TermConstant((), "c")
    A = TermVariable(0, "A")
    P = TermVariable(1, "P")

    shape = Forall(A, lambda x: P(x))
    target = Forall(Nat, lambda x: Eq(x, c))
    match = match_pattern(shape, target, (A, P))
    print("A :=", match[A])
    print("P :=", match[P])
    print("P(c) =", match[P].instantiate(c.to_term()))
