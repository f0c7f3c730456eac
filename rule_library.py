from term import TermApp, TermConstant, TermVariable, BVar, abstract_vars
from matching import match_pattern
from relation import Relation, ProofCongruence, ProofRefl
from values import option_map, sum_map

# A sub-obligation of a rule: find a relation with the left side `body`,
# under the given binders ((name, type), ...) when the body mentions them
class SubObligation:
    def __init__(self, body, binders = ()):
        self.body = body
        self.binders = tuple(binders)

# The result of solving a sub-obligation, `local_vars` were substituted
# for the binders of the sub-obligation
class SubResult:
    def __init__(self, relation, local_vars = ()):
        self.relation = relation
        self.local_vars = tuple(local_vars)

class RuleApplication:
    def __init__(self, rule, pattern, match, subgoals):
        self.rule = rule
        self.pattern = pattern
        self.match = match
        self.subgoals = tuple(subgoals)

    @property
    def name(self): return self.rule.name
    @property
    def arity(self): return len(self.subgoals)
    def instantiate(self, holes): # the same rule on the pattern with solved holes
        res = self.rule.try_apply(self.pattern.substitute_free(holes))
        assert res is not None, (self.name, self.pattern)
        return res
    def assemble(self, subresults):
        assert len(subresults) == self.arity
        return self.rule.combine(self, subresults)

class CongruenceRule:
    name = None
    arity = None # number of sub-relation obligations
    is_base = False

    def __init__(self, env):
        self.env = env
        self.shape, self.variables = self.make_shape()
        self.constant = TermConstant(self.constant_signature(), self.name)

    def make_shape(self): # -> shape, variables
        raise Exception("Not implemented")
    def constant_signature(self):
        raise Exception("Not implemented")
    def sub_obligations(self, pattern, match):
        raise Exception("Not implemented")
    def combine(self, application, subresults):
        raise Exception("Not implemented")

    @property
    def head(self): # None = applies to any head symbol
        if self.shape.f in self.variables: return None
        return self.shape.f

    def try_apply(self, pattern):
        match = match_pattern(self.shape, pattern, self.variables)
        if match is None: return None
        return RuleApplication(self, pattern, match, self.sub_obligations(pattern, match))

    def _relation(self, term, left, right, forward, backward, subrels):
        return Relation(
            self.env, term, left, right, forward, backward,
            ProofCongruence(self.name, [rel.left_inv for rel in subrels]),
            ProofCongruence(self.name, [rel.right_inv for rel in subrels]),
            uses_seed = any(rel.uses_seed for rel in subrels),
        )

    def __repr__(self):
        return f"{type(self).__name__}({self.name})"

def transport_functions(e):
    forward = lambda f: (lambda b: f(e.backward(b)))
    backward = lambda g: (lambda a: g(e.forward(a)))
    return forward, backward
def transport_subtype(e):
    return e.forward, e.backward
def transport_first(e):
    forward = lambda p: (e.forward(p[0]), p[1])
    backward = lambda p: (e.backward(p[0]), p[1])
    return forward, backward

# former(A, x : P(x)) ~= former(B, y : P(bwd(e, y)))  given  e : A ~= B
class BinderCongrLeft(CongruenceRule):
    arity = 1

    def __init__(self, env, name, former, transport):
        self.name = name
        self.former = former
        self.transport = transport
        super().__init__(env)

    def make_shape(self):
        self.A = TermVariable(0, "A")
        self.P = TermVariable(1, "P")
        return self.former(self.A, lambda x: self.P(x)), (self.A, self.P)
    def constant_signature(self):
        return (0,1)
    def sub_obligations(self, pattern, match):
        return [SubObligation(match[self.A])]

    def combine(self, application, subresults):
        [sub] = subresults
        e = sub.relation
        pattern = application.pattern
        body = application.match[self.P]
        bound_names = pattern.bound_names
        right_body = body.substitute_bvars([e.bwd_term(BVar(1))])
        right = TermApp(self.former, (e.right, right_body), bound_names)
        term = TermApp(self.constant, (e.term, body), bound_names)
        forward, backward = self.transport(e)
        return self._relation(term, pattern, right, forward, backward, [e])

def map_functions(rel):
    forward = lambda f: (lambda a: rel.forward(f(a)))
    backward = lambda g: (lambda a: rel.backward(g(a)))
    return forward, backward
def map_second(rel):
    forward = lambda p: (p[0], rel.forward(p[1]))
    backward = lambda p: (p[0], rel.backward(p[1]))
    return forward, backward

# former(A, x : C(x)) ~= former(A, x : D(x))  given  forall x : A, C(x) ~= D(x)
class BinderCongrRight(CongruenceRule):
    arity = 1

    def __init__(self, env, name, former, transport):
        self.name = name
        self.former = former
        self.transport = transport
        super().__init__(env)

    def make_shape(self):
        self.A = TermVariable(0, "A")
        self.C = TermVariable(1, "C")
        return self.former(self.A, lambda x: self.C(x)), (self.A, self.C)
    def constant_signature(self):
        return (0,1)
    def sub_obligations(self, pattern, match):
        [bname] = pattern.bound_names[1]
        return [SubObligation(match[self.C], ((bname, match[self.A]),))]

    def combine(self, application, subresults):
        [sub] = subresults
        rel = sub.relation
        pattern = application.pattern
        A = application.match[self.A]
        bound_names = pattern.bound_names
        right = TermApp(self.former, (A, abstract_vars(rel.right, sub.local_vars)), bound_names)
        term = TermApp(self.constant, (A, abstract_vars(rel.term, sub.local_vars)), bound_names)
        forward, backward = self.transport(rel)
        return self._relation(term, pattern, right, forward, backward, [rel])

# Fun(A1, B1) ~= Fun(A2, B2)  given  A1 ~= A2, B1 ~= B2
class ArrowCongr(CongruenceRule):
    name = "arrow_congr"
    arity = 2

    def make_shape(self):
        self.A = TermVariable(0, "A")
        self.B = TermVariable(0, "B")
        return self.env.constants.Fun(self.A, self.B), (self.A, self.B)
    def constant_signature(self):
        return (0,0)
    def sub_obligations(self, pattern, match):
        return [SubObligation(match[self.A]), SubObligation(match[self.B])]

    def combine(self, application, subresults):
        e1, e2 = (sub.relation for sub in subresults)
        right = self.env.constants.Fun(e1.right, e2.right)
        term = self.constant(e1.term, e2.term)
        forward = lambda f: (lambda b: e2.forward(f(e1.backward(b))))
        backward = lambda g: (lambda a: e2.backward(g(e1.forward(a))))
        return self._relation(term, application.pattern, right, forward, backward, [e1, e2])

# F(A) ~= F(B)  given  A ~= B
class FunctorCongr(CongruenceRule):
    arity = 1

    def __init__(self, env, name, former, fmap):
        self.name = name
        self.former = former
        self.fmap = fmap
        super().__init__(env)

    def make_shape(self):
        self.A = TermVariable(0, "A")
        return self.former(self.A), (self.A,)
    def constant_signature(self):
        return (0,)
    def sub_obligations(self, pattern, match):
        return [SubObligation(match[self.A])]

    def combine(self, application, subresults):
        [sub] = subresults
        e = sub.relation
        right = self.former(e.right)
        term = self.constant(e.term)
        return self._relation(
            term, application.pattern, right,
            self.fmap(e.forward), self.fmap(e.backward), [e],
        )

# F(A1, B1) ~= F(A2, B2)  given  A1 ~= A2, B1 ~= B2
class BifunctorCongr(CongruenceRule):
    arity = 2

    def __init__(self, env, name, former, bimap):
        self.name = name
        self.former = former
        self.bimap = bimap
        super().__init__(env)

    def make_shape(self):
        self.A = TermVariable(0, "A")
        self.B = TermVariable(0, "B")
        return self.former(self.A, self.B), (self.A, self.B)
    def constant_signature(self):
        return (0,0)
    def sub_obligations(self, pattern, match):
        return [SubObligation(match[self.A]), SubObligation(match[self.B])]

    def combine(self, application, subresults):
        e1, e2 = (sub.relation for sub in subresults)
        right = self.former(e1.right, e2.right)
        term = self.constant(e1.term, e2.term)
        return self._relation(
            term, application.pattern, right,
            self.bimap(e1.forward, e2.forward),
            self.bimap(e1.backward, e2.backward),
            [e1, e2],
        )

class Refl(CongruenceRule):
    name = "refl"
    arity = 0
    is_base = True

    def make_shape(self):
        self.A = TermVariable(0, "A")
        return self.A.to_term(), (self.A,)
    def constant_signature(self):
        return (0,)
    def sub_obligations(self, pattern, match):
        return []

    def try_apply(self, pattern):
        if pattern.has_holes: return None
        return super().try_apply(pattern)

    def combine(self, application, subresults):
        A = application.pattern
        identity = lambda x: x
        return Relation(
            self.env, self.constant(A), A, A, identity, identity,
            ProofRefl(A), ProofRefl(A),
        )

class RuleLibrary:
    def __init__(self, rules = ()):
        self._rules = []
        for rule in rules:
            self.register(rule)

    def register(self, rule, before = None):
        assert isinstance(rule, CongruenceRule)
        if rule.name in self.names():
            raise Exception(f"Congruence rule '{rule.name}' already registered")
        if before is not None:
            i = self.names().index(before)
        elif rule.is_base:
            i = len(self._rules)
        else: # base rules stay last
            i = len(self._rules)
            while i > 0 and self._rules[i-1].is_base: i -= 1
        self._rules.insert(i, rule)
        return rule

    def names(self):
        return [rule.name for rule in self._rules]
    def get_rule(self, name):
        for rule in self._rules:
            if rule.name == name: return rule
        return None

    # rules in the fixed order, restricted to those that can match the head
    def candidates(self, pattern):
        for rule in self._rules:
            head = rule.head
            if head is None or head == pattern.f:
                yield rule

    def __iter__(self):
        return iter(self._rules)
    def __len__(self):
        return len(self._rules)

def default_rules(env):
    co = env.constants
    list_map = lambda f: (lambda xs: [f(x) for x in xs])
    pair_map = lambda f, g: (lambda p: (f(p[0]), g(p[1])))
    return RuleLibrary([
        BinderCongrLeft(env, "forall_congr_left", co.Forall, transport_functions),
        BinderCongrLeft(env, "pi_congr_left", co.Pi, transport_functions),
        BinderCongrLeft(env, "subtype_congr", co.Subtype, transport_subtype),
        BinderCongrLeft(env, "sigma_congr_left", co.Sigma, transport_first),
        BinderCongrRight(env, "forall_congr_right", co.Forall, map_functions),
        BinderCongrRight(env, "pi_congr_right", co.Pi, map_functions),
        BinderCongrRight(env, "sigma_congr_right", co.Sigma, map_second),
        ArrowCongr(env),
        BifunctorCongr(env, "prod_congr", co.Prod, pair_map),
        BifunctorCongr(env, "sum_congr", co.Sum, sum_map),
        FunctorCongr(env, "list_congr", co.List, list_map),
        FunctorCongr(env, "option_congr", co.Option, option_map),
        Refl(env),
    ])
