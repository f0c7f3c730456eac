from term import TermApp, abstract_vars, get_unused_name
from goal_tree import GoalTreeNode

class Tactics:
    def __init__(self, env):
        self._env = env
        self._tactics = dict()

        self.register("intros", Intros)
        self.register("intro", lambda env, node, name = None : Intros(env, node, [name]))
        self.register("assumption", Assumption)
        self.register("exact", Exact)

    def register(self, name, tactic):
        assert isinstance(name, str)
        assert callable(tactic)
        if name in self._tactics:
            raise Exception(f"Tactic '{name}' already registered")
        self._tactics[name] = tactic

    def get_tactic(self, name):
        return self._tactics.get(name, None)

class BasicTactic:
    def __init__(self, env, node, *args, **kwargs): # Goal -> list[(target, context)] + set self.outputs
        self.node = node
        self.env = env
        self.goal = node.target
        self.context = node.context
        self.outputs = None
        subgoals = self.get_subgoals(*args, **kwargs)
        if self.outputs is not None:
            assert len(self.outputs) == len(subgoals)
            outputs = self.outputs
        else:
            outputs = [None]*len(subgoals)
        node.tactic = self
        node.children = [
            GoalTreeNode(target, context, node, tactic_output = output)
            for (target, context), output in zip(subgoals, outputs)
        ]
        node.check_closed()
    def get_subgoals(self, *args, **kwargs):
        raise Exception("Not implemented")
    def build_term(self, *proofs): # list[Term] -> Term
        raise Exception("Not implemented")

    @property
    def child(self):
        [child] = self.node.children
        return child

class Intros(BasicTactic):
    def _split(self, term): # -> domain, body (or None), default name
        co = self.env.constants
        if term.f in (co.Forall, co.Pi):
            [bname] = term.bound_names[1]
            return term.args[0], term.args[1], bname
        elif term.f == co.Fun:
            domain, body = term.args
            return domain, body, "h"
        else:
            return None

    def get_subgoals(self, *names):
        if len(names) == 1 and isinstance(names[0], int):
            names = (None,)*names[0]
        elif len(names) == 1 and isinstance(names[0], (tuple, list)):
            [names] = names

        term = self.goal
        ctx = self.context
        self.intros = [] # (domain, local variable)
        while not names or len(self.intros) < len(names):
            split = self._split(term)
            if split is None:
                if names or not self.intros:
                    raise Exception(f"Intro failed: not a binder: {term}")
                break
            domain, body, name = split
            if names and names[len(self.intros)] is not None:
                name = names[len(self.intros)]
            name = get_unused_name(name, set(ctx.names))
            ctx = ctx.add(name, domain)
            v = ctx.decls()[-1].var
            if term.f == self.env.constants.Fun: term = body
            else: term = body.instantiate(v.to_term())
            self.intros.append((domain, v))

        local_terms = tuple(v.to_term() for _,v in self.intros)
        if len(local_terms) == 1: self.outputs = [local_terms[0]]
        else: self.outputs = [local_terms]
        return [(term, ctx)]

    def build_term(self, proof):
        lam = self.env.constants.lam
        for domain, v in reversed(self.intros):
            proof = TermApp(lam, (domain, abstract_vars(proof, [v])), ((), (v.name,)))
        return proof

class Exact(BasicTactic):
    def get_subgoals(self, name):
        decl = self.context.find(name)
        if decl is None:
            raise Exception(f"Exact: no local named '{name}'")
        if not decl.type.equals_to(self.goal):
            raise Exception(f"Exact term {decl.name} : {decl.type} doesn't fit the goal {self.goal}")
        self.proof = decl.term
        return []
    def build_term(self):
        return self.proof

class Assumption(Exact):
    def get_subgoals(self):
        for decl in reversed(list(self.context)):
            if decl.type.equals_to(self.goal):
                self.proof = decl.term
                return []
        raise Exception(f"Goal {self.goal} not found among assumptions")
