"""Tests for rule usage statistics of derived relations."""

import numpy as np

from derivation_stats import derivation_size, rule_histogram, rule_usage


def test_seed_alone(t):
    assert np.array_equal(rule_usage(t.e), [1, 0, 0, 0, 0])
    assert derivation_size(t.e) == 1
    assert rule_histogram(t.e) == {}


def test_congruence_with_refl(env, t):
    rel = env.equiv_rw.rewrite_type(t.co.Prod(t.Nat, t.Bool), "e")
    assert np.array_equal(rule_usage(rel), [1, 1, 0, 1, 0])
    assert rule_histogram(rel) == {"prod_congr": 1, "refl": 1}
    assert derivation_size(rel) == 3


def test_nested_congruences(env, t):
    co = t.co
    rel = env.equiv_rw.rewrite_type(co.List(co.Option(t.Nat)), "e")
    assert rule_histogram(rel) == {"list_congr": 1, "option_congr": 1}
    assert np.array_equal(rule_usage(rel.right_inv), [1, 2, 0, 0, 0])


def test_symm_is_counted(env, t):
    rel = env.equiv_rw.rewrite_type(t.co.List(t.Fin5), "e", symm=True)
    assert np.array_equal(rule_usage(rel), [1, 1, 1, 0, 0])
