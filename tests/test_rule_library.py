"""Tests for the congruence rule registry."""

import pytest

from term import MetaVariable
from errors import VacuousDerivation
from rule_library import FunctorCongr, Refl, RuleLibrary, default_rules

DEFAULT_ORDER = [
    "forall_congr_left",
    "pi_congr_left",
    "subtype_congr",
    "sigma_congr_left",
    "forall_congr_right",
    "pi_congr_right",
    "sigma_congr_right",
    "arrow_congr",
    "prod_congr",
    "sum_congr",
    "list_congr",
    "option_congr",
    "refl",
]


def test_default_order(env):
    assert env.rules.names() == DEFAULT_ORDER
    assert len(env.rules) == len(DEFAULT_ORDER)


def test_registered_rule_goes_before_refl(env):
    Box = env.declare_const("Box", 1)
    env.rules.register(FunctorCongr(env, "box_congr", Box, lambda f: f))
    assert env.rules.names()[-2:] == ["box_congr", "refl"]


def test_registered_rule_is_used_by_the_search(env, t):
    Box = env.declare_const("Box", 1)
    with pytest.raises(VacuousDerivation):
        env.equiv_rw.rewrite_type(Box(t.Nat), "e")

    env.rules.register(FunctorCongr(env, "box_congr", Box, lambda f: f))
    rel = env.equiv_rw.rewrite_type(Box(t.Nat), "e")
    assert rel.right.equals_to(Box(t.Fin5))
    assert rel.term.f.name == "box_congr"
    assert rel.forward(3) == ("fin5", 3)
    assert rel.backward(("fin5", 4)) == 4


def test_register_before_named_rule(env):
    Box = env.declare_const("Box", 1)
    env.rules.register(FunctorCongr(env, "box_congr", Box, lambda f: f), before="list_congr")
    names = env.rules.names()
    assert names.index("box_congr") == names.index("list_congr") - 1


def test_duplicate_name_rejected(env):
    with pytest.raises(Exception):
        env.rules.register(Refl(env))


def test_candidates_filter_by_head_keeping_order(env, t):
    names = [rule.name for rule in env.rules.candidates(t.co.List(t.Nat))]
    assert names == ["list_congr", "refl"]
    names = [rule.name for rule in env.rules.candidates(t.co.Pi(t.Nat, lambda x: t.P(x)))]
    assert names == ["pi_congr_left", "pi_congr_right", "refl"]


def test_prod_spawns_two_obligations(env, t):
    application = env.rules.get_rule("prod_congr").try_apply(t.co.Prod(t.Nat, t.Bool))
    assert application.arity == 2
    assert application.subgoals[0].body.equals_to(t.Nat)
    assert application.subgoals[1].body.equals_to(t.Bool)


def test_right_congruence_obligation_is_under_a_binder(env, t):
    pattern = t.co.Sigma(t.Nat, lambda n: t.co.List(t.P(n)))
    application = env.rules.get_rule("sigma_congr_right").try_apply(pattern)
    [subgoal] = application.subgoals
    assert len(subgoal.binders) == 1
    name, domain = subgoal.binders[0]
    assert name == "n"
    assert domain.equals_to(t.Nat)
    assert subgoal.body.debruijn_height == 1


def test_refl_rejects_holes(env, t):
    refl = env.rules.get_rule("refl")
    m = MetaVariable(0, "m")
    assert refl.try_apply(t.co.List(m)) is None
    assert refl.try_apply(t.co.List(t.Nat)) is not None


def test_rule_mismatch(env, t):
    assert env.rules.get_rule("list_congr").try_apply(t.co.Option(t.Nat)) is None


def test_library_from_scratch(env):
    library = RuleLibrary([Refl(env)])
    assert library.names() == ["refl"]
    library = default_rules(env)
    assert library.get_rule("arrow_congr") is not None
    assert library.get_rule("missing") is None
