"""Tests for the local context and the generalize / substitute passes."""

import pytest

from term import TermApp, TermVariable
from config import Transparency
from errors import GeneralizeFailure, SubstitutionFailure
from generalize import OccurrenceMatcher, RewriteProblem, generalize, substitute
from local_context import LocalContext


@pytest.fixture
def x():
    return TermVariable(0, "x")


def test_context_is_immutable(t, x):
    ctx = LocalContext().add(x, t.Nat)
    ctx2 = ctx.add("h", t.P(x))
    assert ctx.names == ["x"]
    assert ctx2.names == ["x", "h"]
    assert ctx2["h"].type.equals_to(t.P(x))
    assert ctx2.find("missing") is None
    with pytest.raises(KeyError):
        ctx2["missing"]


def test_context_lookup_and_dependents(t, x):
    ctx = LocalContext().add(x, t.Nat).add("h", t.P(x)).add("b", t.Bool, frozen=True)
    assert ctx.index_of(x) == 0
    assert [decl.name for decl in ctx.dependents(x)] == ["h"]
    assert ctx["b"].frozen
    assert not ctx.unfreeze()["b"].frozen
    with pytest.raises(Exception):
        ctx.add(x, t.Nat)


def test_later_declaration_shadows(t):
    ctx = LocalContext().add("a", t.Nat).add("a", t.Bool)
    assert ctx["a"].type.equals_to(t.Bool)
    assert len(ctx) == 2


def test_matcher_counts_occurrences(t, x):
    target = t.e.fwd_term(x.to_term())
    matcher = OccurrenceMatcher(target)
    y = TermVariable(0, "y").to_term()
    term = t.Q(target, t.P(target))
    res, count = matcher.abstract(term, y)
    assert count == 2
    assert res.equals_to(t.Q(y, t.P(y)))
    assert matcher.occurs_in(term)
    assert not matcher.occurs_in(t.P(x))


def test_matcher_transparency(env, t, x):
    co = t.co
    target = t.e.fwd_term(x.to_term())
    disguised = TermApp(co.bwd, (TermApp(co.symm, (t.e.term,)), x.to_term()))
    syntactic = OccurrenceMatcher(target)
    transparent = OccurrenceMatcher(target, Transparency.ALL, env.simplifier.normal_form)
    assert not syntactic.matches(disguised)
    assert transparent.matches(disguised)


def test_generalize_requires_the_target(t, x):
    target = t.e.fwd_term(x.to_term())
    ctx = LocalContext().add(x, t.Nat)
    problem = RewriteProblem(ctx, t.P(x), t.co.Eq(x, x))
    with pytest.raises(GeneralizeFailure):
        generalize(problem, OccurrenceMatcher(target), x, TermVariable(0, "x"), t.Fin5)


def test_generalize_rejects_local_definitions(t, x):
    target = t.e.fwd_term(x.to_term())
    ctx = LocalContext().add(x, t.Nat).add("d", t.Fin5, value=t.f(target))
    problem = RewriteProblem(ctx, t.P(x), t.e.left_inv.instantiate(x.to_term()))
    with pytest.raises(GeneralizeFailure):
        generalize(problem, OccurrenceMatcher(target), x, TermVariable(0, "x"), t.Fin5)


def test_generalize_then_substitute(t, x):
    e = t.e
    target = e.fwd_term(x.to_term())
    ctx = LocalContext().add(x, t.Nat).add("h", t.Q(x, target))
    problem = RewriteProblem(ctx, t.P(target), e.left_inv.instantiate(x.to_term()))
    new_x = TermVariable(0, "x")
    problem = generalize(problem, OccurrenceMatcher(target), x, new_x, t.Fin5)
    assert problem.equation.equals_to(t.co.Eq(x, e.bwd_term(new_x.to_term())))
    assert problem.target.equals_to(t.P(new_x))
    assert [decl.var for decl in problem.context] == [x, new_x, ctx["h"].var]

    value = problem.equation.args[1]
    problem = substitute(problem, x, value)
    assert problem.equation is None
    assert [decl.var for decl in problem.context] == [new_x, ctx["h"].var]
    assert problem.context["h"].type.equals_to(t.Q(value, new_x))


def test_substitute_blocked_by_frozen_dependent(t, x):
    y = TermVariable(0, "y")
    ctx = LocalContext().add(x, t.Nat).add(y, t.Fin5).add("h", t.P(x), frozen=True)
    problem = RewriteProblem(ctx, t.P(x))
    value = t.e.bwd_term(y.to_term())
    with pytest.raises(SubstitutionFailure):
        substitute(problem, x, value)
    problem = substitute(problem.unfreeze(), x, value)
    assert problem.context["h"].type.equals_to(t.P(value))
    assert problem.target.equals_to(t.P(value))


def test_substitute_blocked_by_definition(t, x):
    c = TermVariable(0, "c")
    ctx = LocalContext().add(c, t.Nat).add(x, t.Nat, value=c)
    with pytest.raises(SubstitutionFailure):
        substitute(RewriteProblem(ctx, t.P(x)), x, c.to_term())


def test_substitute_rejects_cyclic_value(t, x):
    ctx = LocalContext().add(x, t.Nat)
    with pytest.raises(SubstitutionFailure):
        substitute(RewriteProblem(ctx, t.P(x)), x, t.f(x))


def test_refreeze_restores_surviving_flags(t, x):
    ctx = LocalContext().add(x, t.Nat, frozen=True).add("b", t.Bool, frozen=True).add("c", t.Bool)
    frozen = ctx.frozen_vars()
    assert frozen == {x, ctx["b"].var}
    relaxed = ctx.unfreeze().remove(x)
    assert not relaxed["b"].frozen
    restored = relaxed.refreeze(frozen)
    assert restored.names == ["b", "c"]
    assert restored["b"].frozen
    assert not restored["c"].frozen
