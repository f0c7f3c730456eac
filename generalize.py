from term import BVar, TermApp
from config import Transparency
from local_context import LocalContext, LocalDecl
from errors import GeneralizeFailure, SubstitutionFailure

# Everything a hypothesis rewrite touches: the local context, the goal
# target and the auxiliary equation (None once it was used up).
class RewriteProblem:
    def __init__(self, context, target, equation = None):
        self.context = context
        self.target = target
        self.equation = equation

    def map_terms(self, f):
        equation = None if self.equation is None else f(self.equation)
        return RewriteProblem(self.context.map_terms(f), f(self.target), equation)
    def unfreeze(self):
        return RewriteProblem(self.context.unfreeze(), self.target, self.equation)
    def refreeze(self, frozen_vars):
        return RewriteProblem(self.context.refreeze(frozen_vars), self.target, self.equation)

class OccurrenceMatcher:
    def __init__(self, target, transparency = Transparency.NONE, normalize = None):
        assert target.debruijn_height == 0
        self.target = target
        self.transparency = transparency
        if transparency == Transparency.ALL:
            assert normalize is not None
            self._normalize = normalize
            self._target_nf = normalize(target)

    def matches(self, term):
        if term.debruijn_height > 0: return False # mentions a local binder
        if term.equals_to(self.target): return True
        if self.transparency == Transparency.NONE: return False
        return self._normalize(term).equals_to(self._target_nf)

    def abstract(self, term, replacement): # -> term, number of occurrences
        if isinstance(term, BVar): return term, 0
        if self.matches(term): return replacement, 1
        count = 0
        args = []
        for arg in term.args:
            arg, arg_count = self.abstract(arg, replacement)
            count += arg_count
            args.append(arg)
        if count == 0: return term, 0
        return TermApp(term.f, args, term.bound_names), count

    def occurs_in(self, term):
        if isinstance(term, BVar): return False
        if self.matches(term): return True
        return any(self.occurs_in(arg) for arg in term.args)

# Replaces the matched occurrences by `new_var`, declared right after `old_var`.
def generalize(problem, matcher, old_var, new_var, new_type):
    replacement = new_var.to_term()
    equation, count = matcher.abstract(problem.equation, replacement)
    if count == 0:
        raise GeneralizeFailure("Term to generalize not found", matcher.target)

    ctx = problem.context
    i = ctx.index_of(old_var)
    decls = list(ctx.decls(i+1))
    for j,decl in enumerate(decls):
        if decl.value is not None and any(matcher.occurs_in(t) for t in decl.terms()):
            raise GeneralizeFailure(
                f"Abstracting {matcher.target} makes the local definition '{decl.name}' ill-typed",
                decl.value,
            )
        decls[j] = decl.map_terms(lambda t: matcher.abstract(t, replacement)[0])
    ctx = LocalContext(
        list(ctx.decls()[:i+1]) + [LocalDecl(new_var, new_type)] + decls
    )
    target, _ = matcher.abstract(problem.target, replacement)
    return RewriteProblem(ctx, target, equation)

# Eliminates `old_var` by replacing it with `value` everywhere.
def substitute(problem, old_var, value):
    ctx = problem.context
    i = ctx.index_of(old_var)
    decl = ctx.decls(i)[0]
    if decl.value is not None:
        raise SubstitutionFailure(f"Cannot eliminate the local definition '{decl.name}'", decl.value)
    if old_var in value.free_vars:
        raise SubstitutionFailure(f"'{decl.name}' occurs in its replacement", value)
    frozen = [
        d.name for d in [decl]+ctx.dependents(old_var)
        if d.frozen
    ]
    if frozen:
        raise SubstitutionFailure(
            f"'{decl.name}' is frozen by "+', '.join(frozen),
            decl.term,
        )

    subst = { old_var : value }
    ctx = ctx.remove(old_var).map_terms(lambda t: t.substitute_free(subst), start = i)
    target = problem.target.substitute_free(subst)
    return RewriteProblem(ctx, target, None)
