from term import Term, TermFunction, TermConstant, TermVariable, DefinedConstant, abstract_vars
from relation import Relation, ProofSeed
from rule_library import default_rules
from simp import Simplifier
from equiv_rw import EquivRewriter, equiv_rw, equiv_rw_at
from goal_context import GoalEnv
from tactics import Tactics
from config import EquivRwConfig
from errors import NotAnEquivalence

class TypeEnv:
    def __init__(self, config = None):
        if config is None: config = EquivRwConfig()
        self.config = config
        self.constants = ConstantSet()
        self.equivs = dict() # name -> seed Relation

        self.rules = default_rules(self)
        self.simplifier = Simplifier(self)
        self.equiv_rw = EquivRewriter(self)
        self.tactics = Tactics(self)
        self.tactics.register("equiv_rw", equiv_rw)
        self.tactics.register("equiv_rw_at", equiv_rw_at)
        self.goal_env = GoalEnv(self)

    def to_term(self, term):
        if isinstance(term, Term): return term
        if isinstance(term, str):
            term = self.constants[term]
        if isinstance(term, TermFunction):
            return term.to_term()
        else:
            raise Exception(f"Expected Term, got {type(term)}")

    def declare_type(self, name):
        return self.constants.add(TermConstant((), name))
    def declare_const(self, name, arity = 0):
        if isinstance(arity, int): signature = (0,)*arity
        else: signature = tuple(arity)
        return self.constants.add(TermConstant(signature, name))

    # body_fn gets the arguments as terms, the body is unfolded by substitution
    def define(self, name, arity, body_fn):
        vs = [TermVariable(0, f"x{i}") for i in range(arity)]
        if isinstance(body_fn, (Term, TermFunction)): body = body_fn
        else: body = body_fn(*(v.to_term() for v in vs))
        body = abstract_vars(self.to_term(body), vs)
        return self.constants.add(DefinedConstant(arity, name, body))

    # A seed: the round-trip laws are assumed, samples (on the left side)
    # and right_samples are checked with the python maps
    def declare_equiv(self, name, left, right, forward, backward,
                      samples = None, right_samples = None):
        if name in self.equivs:
            raise Exception(f"Equivalence '{name}' already declared")
        term = self.declare_type(name).to_term()
        rel = Relation(
            self, term, self.to_term(left), self.to_term(right),
            forward, backward,
            ProofSeed(name), ProofSeed(name),
            uses_seed = True,
        )
        for samples_, direction in ((samples, rel.left_inv), (right_samples, rel.right_inv)):
            if samples_ is None: continue
            failing = rel.check_round_trip(samples_, direction.direction)
            if failing:
                raise NotAnEquivalence(
                    f"{direction.direction} of '{name}' fails on {failing[:5]}",
                    rel.term,
                )
        self.equivs[name] = rel
        return rel

class ConstantSet:
    builtin = (
        ("List", (0,)),
        ("Option", (0,)),
        ("Prod", (0,0)),
        ("Sum", (0,0)),
        ("Fun", (0,0)),
        ("Pi", (0,1)),
        ("Sigma", (0,1)),
        ("Subtype", (0,1)),
        ("Forall", (0,1)),
        ("Eq", (0,0)),
        ("fwd", (0,0)),
        ("bwd", (0,0)),
        ("symm", (0,)),
        ("lam", (0,1)),
    )

    def __init__(self):
        self._constant_dict = dict()
        for name, signature in self.builtin:
            self.add(TermConstant(signature, name))

    def add(self, const):
        if const.name in self._constant_dict:
            raise Exception(f"Constant '{const.name}' already declared")
        self._constant_dict[const.name] = const
        return const

    def __getattr__(self, name):
        if name.startswith('_'): raise AttributeError(name)
        res = self._constant_dict.get(name, None)
        if res is None: raise AttributeError(name)
        return res
    def __getitem__(self, name):
        return self._constant_dict[name]
