from term import Term, TermFunction, TermVariable
from relation import Relation
from search import EquivSearch
from generalize import RewriteProblem, OccurrenceMatcher, generalize, substitute
from tactics import BasicTactic
from errors import NotAnEquivalence, SubstitutionFailure
from simple_log import simple_log, verbosity

class HypothesisRewrite:
    def __init__(self, relation, problem, old_var, new_var):
        self.relation = relation
        self.problem = problem
        self.old_var = old_var
        self.new_var = new_var

    @property
    def context(self): return self.problem.context
    @property
    def target(self): return self.problem.target

    # proof of the original goal from a proof of the rewritten one
    def build_term(self, proof):
        return proof.substitute_free({
            self.new_var : self.relation.fwd_term(self.old_var.to_term())
        })

class EquivRewriter:
    def __init__(self, env):
        self.env = env

    def _config(self, config, kwargs):
        if config is None: config = self.env.config
        if kwargs: config = config.replace(**kwargs)
        return config

    def resolve_seed(self, seed, symm = False):
        if isinstance(seed, str):
            name = seed
            seed = self.env.equivs.get(name, None)
            if seed is None:
                raise NotAnEquivalence(f"No equivalence named '{name}'")
        if not isinstance(seed, Relation):
            raise NotAnEquivalence(f"Expected an equivalence, got {type(seed).__name__}", seed)
        if symm: seed = seed.symm()
        return seed

    def rewrite_type(self, pattern, seed, config = None, symm = False, **kwargs):
        config = self._config(config, kwargs)
        seed = self.resolve_seed(seed, symm)
        if isinstance(pattern, TermFunction): pattern = pattern.to_term()
        assert isinstance(pattern, Term), pattern
        assert pattern.is_closed, pattern
        with verbosity(config.trace):
            search = EquivSearch(self.env.rules, max_depth = config.max_depth)
            return search.run(seed, pattern)
    equiv_rw_type = rewrite_type

    def transport_hypothesis(self, context, target, name, seed, config = None, symm = False, **kwargs):
        config = self._config(config, kwargs)
        decl = context.find(name)
        if decl is None:
            raise Exception(f"No local named '{name}'")
        rel = self.rewrite_type(decl.type, seed, config, symm)
        with verbosity(config.trace):
            old_var = decl.var
            x = old_var.to_term()
            problem = RewriteProblem(context, target, rel.left_inv.instantiate(x))
            simple_log("equiv_rw at", name, ":", problem.equation)

            matcher = OccurrenceMatcher(
                rel.fwd_term(x), config.transparency,
                normalize = self.env.simplifier.normal_form,
            )
            new_var = TermVariable(0, old_var.name)
            problem = generalize(problem, matcher, old_var, new_var, rel.right)
            _, value = problem.equation.args # x_old = bwd(R, x_new)
            try:
                problem = substitute(problem, old_var, value)
            except SubstitutionFailure as e:
                simple_log("substitution failed:", e, "- retrying unfrozen")
                frozen = problem.context.frozen_vars()
                problem = substitute(problem.unfreeze(), old_var, value)
                problem = problem.refreeze(frozen)

            simp = self.env.simplifier
            problem = problem.map_terms(simp.simp_round_trip)
            simple_log("equiv_rw at", name, "done:", problem.context.find(name))
        return HypothesisRewrite(rel, problem, old_var, new_var)

    def rewrite_goal(self, node, seed, config = None, symm = False, **kwargs):
        return EquivRwGoal(self.env, node, seed, config, symm, **kwargs).child
    def rewrite_hypothesis(self, node, name, seed, config = None, symm = False, **kwargs):
        return EquivRwHyp(self.env, node, name, seed, config, symm, **kwargs).child

class EquivRwGoal(BasicTactic):
    def get_subgoals(self, seed, config = None, symm = False, **kwargs):
        self.relation = self.env.equiv_rw.rewrite_type(self.goal, seed, config, symm, **kwargs)
        return [(self.relation.right, self.context)]
    def build_term(self, proof):
        return self.relation.bwd_term(proof)

class EquivRwHyp(BasicTactic):
    def get_subgoals(self, name, seed, config = None, symm = False, **kwargs):
        self.rewrite = self.env.equiv_rw.transport_hypothesis(
            self.context, self.goal, name, seed, config, symm, **kwargs
        )
        self.outputs = [self.rewrite.new_var.to_term()]
        return [(self.rewrite.target, self.rewrite.context)]
    def build_term(self, proof):
        return self.rewrite.build_term(proof)

def _seed_list(seed):
    if isinstance(seed, (list, tuple)): return list(seed)
    return [seed]

# tactics, several seeds are applied from left to right
def equiv_rw(env, node, seed, **kwargs):
    for s in _seed_list(seed):
        node = env.equiv_rw.rewrite_goal(node, s, **kwargs)
def equiv_rw_at(env, node, name, seed, **kwargs):
    for s in _seed_list(seed):
        node = env.equiv_rw.rewrite_hypothesis(node, name, s, **kwargs)

# TESTS

if __name__ == "__main__":
    from type_env import TypeEnv
    from local_context import LocalContext
    from simple_log import set_verbose
    import logging

    logging.basicConfig(level = logging.INFO, format = "%(message)s")
    set_verbose()

    env = TypeEnv()
    co = env.constants
    Nat = env.declare_type("Nat")
    Fin5 = env.declare_type("Fin5")
    P = env.declare_const("P", 1)
    env.declare_equiv(
        "e", Nat, Fin5,
        lambda n: ("fin5", n), lambda f: f[1],
        samples = range(5),
    )

    rel = env.equiv_rw.rewrite_type(co.List(Nat), "e")
    print(rel)
    print(rel.forward([1,2,3]))
    print()

    rel = env.equiv_rw.rewrite_type(co.Forall(Nat, lambda n: P(n)), "e")
    print(rel.right)
    print()

    x = TermVariable(0, "x")
    ctx = LocalContext().add(x, Nat).add("h", P(x))
    with env.goal_env.goal(P(x), ctx) as g:
        g.equiv_rw_at("x", "e")
        print(g.current_goal)
        g.assumption()
    print("proof:", env.goal_env.last_proven)
