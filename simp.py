from term import TermApp, BVar, DefinedConstant

class RootRewriter:
    def try_rw(self, term): # -> rewritten term or None
        raise Exception("Not implemented")

class RootRewriterList(RootRewriter):
    def __init__(self, rewriters):
        self.rewriters = rewriters
    def try_rw(self, term):
        for rw in self.rewriters:
            res = rw.try_rw(term)
            if res is not None: return res
        return None

# bwd(R, fwd(R, t)) -> t,  fwd(R, bwd(R, t)) -> t
class RootRewriterRoundTrip(RootRewriter):
    def __init__(self, env, relation_terms = None): # None = any relation
        self.fwd = env.constants.fwd
        self.bwd = env.constants.bwd
        self.relation_terms = relation_terms
    def try_rw(self, term):
        if term.f == self.fwd: inner_f = self.bwd
        elif term.f == self.bwd: inner_f = self.fwd
        else: return None
        R, inner = term.args
        if inner.f != inner_f: return None
        R2, t = inner.args
        if not R.equals_to(R2): return None
        if self.relation_terms is not None:
            if not any(R.equals_to(rt) for rt in self.relation_terms): return None
        return t

# fwd(symm(R), t) -> bwd(R, t),  bwd(symm(R), t) -> fwd(R, t),  symm(symm(R)) -> R
class RootRewriterSymm(RootRewriter):
    def __init__(self, env):
        self.fwd = env.constants.fwd
        self.bwd = env.constants.bwd
        self.symm = env.constants.symm
    def try_rw(self, term):
        if term.f == self.symm:
            [R] = term.args
            if R.f == self.symm: return R.args[0]
            return None
        if term.f == self.fwd: other = self.bwd
        elif term.f == self.bwd: other = self.fwd
        else: return None
        R, t = term.args
        if R.f != self.symm: return None
        return TermApp(other, (R.args[0], t))

class RootRewriterUnfold(RootRewriter):
    def __init__(self, consts = None): # None = every defined constant
        if consts is not None:
            assert all(isinstance(c, DefinedConstant) for c in consts)
            consts = set(consts)
        self.to_unfold = consts
    def try_rw(self, term):
        if not isinstance(term.f, DefinedConstant): return None
        if self.to_unfold is not None and term.f not in self.to_unfold: return None
        return term.f.unfold(term.args)

class Simplifier:
    def __init__(self, env):
        self._env = env
        self._symm = RootRewriterSymm(env)
        self._round_trip = RootRewriterRoundTrip(env)
        self._unfold = RootRewriterUnfold()

    def to_root_rewriter(self, *args):
        rw_list = []
        consts = []
        for arg in args:
            if isinstance(arg, RootRewriter):
                rw_list.append(arg)
            elif isinstance(arg, DefinedConstant):
                consts.append(arg)
            elif isinstance(arg, (tuple, list)):
                rw_list.append(self.to_root_rewriter(*arg))
            else:
                raise Exception(f"Cannot convert type {type(arg)} to a RootRewriter")
        if consts:
            rw_list.append(RootRewriterUnfold(consts))
        if len(rw_list) == 1:
            return rw_list[0]
        else:
            return RootRewriterList(rw_list)

    def _run_aux(self, term, rule, repeat): # return term, changed
        if isinstance(term, BVar): return term, False
        changed = False
        args = []
        for arg in term.args:
            arg, arg_changed = self._run_aux(arg, rule, repeat)
            changed = changed or arg_changed
            args.append(arg)
        if changed:
            term = TermApp(term.f, args, term.bound_names)
            if not repeat: return term, True
        res = rule.try_rw(term)
        if res is None: return term, changed
        if repeat: res, _ = self._run_aux(res, rule, repeat)
        return res, True

    def run(self, term, *rules, repeat = True):
        rule = self.to_root_rewriter(*rules)
        term, _ = self._run_aux(term, rule, repeat)
        return term

    # closing pass of a rewrite, collapses the round trips
    def simp_round_trip(self, term, relation_terms = None):
        if relation_terms is None:
            round_trip = self._round_trip
        else:
            round_trip = RootRewriterRoundTrip(self._env, relation_terms)
        return self.run(term, self._symm, round_trip)

    # used for matching at full transparency
    def normal_form(self, term):
        return self.run(term, self._unfold, self._symm)
