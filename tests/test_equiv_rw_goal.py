"""Tests for rewriting goals along equivalences."""

import pytest

from term import TermApp, TermVariable
from errors import StepBoundExceeded, VacuousDerivation
from goal_tree import GoalTreeNode
from local_context import LocalContext


def forall_p(t, domain, wrap=lambda y: y):
    return t.co.Forall(domain, lambda y: t.P(wrap(y)))


def test_goal_is_transported(env, t):
    rewritten = forall_p(t, t.Fin5, t.e.bwd_term)
    ctx = LocalContext().add("h", rewritten)
    with env.goal_env.goal(forall_p(t, t.Nat), ctx) as g:
        g.equiv_rw("e")
        node = g.current_goal
        assert node.target.equals_to(rewritten)
        assert node.context is ctx
        g.assumption()

    proof = env.goal_env.last_proven
    assert proof.f == t.co.bwd
    relation_term, child_proof = proof.args
    assert relation_term.f.name == "forall_congr_left"
    assert child_proof.equals_to(ctx["h"].term)


def test_rewrite_goal_returns_the_child(env, t):
    node = GoalTreeNode(t.co.List(t.Nat))
    child = env.equiv_rw.rewrite_goal(node, "e")
    assert child.parent is node
    assert child.target.equals_to(t.co.List(t.Fin5))
    assert node.tactic.relation.left.equals_to(node.target)


def test_several_seeds_left_to_right(env, t):
    co = t.co
    Bit = env.declare_type("Bit")
    env.declare_equiv("g", t.Bool, Bit, int, bool, samples=[False, True])
    ctx = env.goal_env.goal(co.Prod(t.Nat, t.Bool))
    ctx.apply_tactic(env.tactics.get_tactic("equiv_rw"), ["e", "g"])
    node = ctx.current_goal
    assert node.target.equals_to(co.Prod(t.Fin5, Bit))
    assert node.parent.target.equals_to(co.Prod(t.Fin5, t.Bool))


def test_unfinished_proof_is_reported(env, t):
    with pytest.raises(Exception, match="not finished"):
        with env.goal_env.goal(t.co.List(t.Nat)) as g:
            g.equiv_rw("e")
    assert env.goal_env.current_ctx is None


def test_failed_rewrite_leaves_goal_untouched(env, t):
    ctx = env.goal_env.goal(t.Bool)
    node = ctx.current_goal
    with pytest.raises(VacuousDerivation):
        ctx.apply_tactic(env.tactics.get_tactic("equiv_rw"), "e")
    assert ctx.current_goal is node
    assert node.is_leaf
    assert node.children is None


def test_failed_seed_rolls_back_the_whole_chain(env, t):
    ctx = env.goal_env.goal(t.co.List(t.Nat))
    node = ctx.current_goal
    with pytest.raises(VacuousDerivation):
        ctx.apply_tactic(env.tactics.get_tactic("equiv_rw"), ["e", "e"])
    assert node.is_leaf
    assert ctx.current_goal is node


def test_step_bound_reported(env, t):
    target = t.Nat
    for _ in range(6):
        target = t.co.List(target)
    ctx = env.goal_env.goal(target)
    with pytest.raises(StepBoundExceeded):
        ctx.apply_tactic(env.tactics.get_tactic("equiv_rw"), "e")
    assert ctx.current_goal.is_leaf


def test_reverse_rewrite(env, t):
    node = GoalTreeNode(forall_p(t, t.Fin5))
    child = env.equiv_rw.rewrite_goal(node, "e", symm=True)
    symm_e = TermApp(t.co.symm, (t.e.term,))
    expected = forall_p(t, t.Nat, lambda y: TermApp(t.co.bwd, (symm_e, y)))
    assert child.target.equals_to(expected)


def test_goal_with_free_locals(env, t):
    x = TermVariable(0, "x")
    ctx = LocalContext().add(x, t.Bool)
    node = GoalTreeNode(t.co.Prod(t.P(x), t.Nat), ctx)
    child = env.equiv_rw.rewrite_goal(node, "e")
    assert child.target.equals_to(t.co.Prod(t.P(x), t.Fin5))
    assert child.context is ctx
