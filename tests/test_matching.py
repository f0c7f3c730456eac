"""Tests for the one-sided higher-order pattern matcher."""

from term import TermConstant, TermVariable
from matching import match_pattern, PatternMatch

Nat = TermConstant((), "Nat")
Bool = TermConstant((), "Bool")
c = TermConstant((), "c")
Forall = TermConstant((0, 1), "Forall")
Prod = TermConstant((0, 0), "Prod")
Eq = TermConstant((0, 0), "Eq")
Q = TermConstant((0, 0), "Q")

A = TermVariable(0, "A")
B = TermVariable(0, "B")
P = TermVariable(1, "P")


def test_binder_body_is_abstracted():
    shape = Forall(A, lambda x: P(x))
    match = match_pattern(shape, Forall(Nat, lambda x: Eq(x, c)), (A, P))
    assert match is not None
    assert match[A].equals_to(Nat.to_term())
    assert match[P].instantiate(c.to_term()).equals_to(Eq(c, c))


def test_body_using_the_bound_variable_twice():
    shape = Forall(A, lambda x: P(x))
    match = match_pattern(shape, Forall(Bool, lambda x: Q(x, x)), (A, P))
    assert match[P].instantiate(c.to_term()).equals_to(Q(c, c))


def test_instantiate_rebuilds_the_target():
    shape = Forall(A, lambda x: P(x))
    target = Forall(Nat, lambda x: Q(c, x))
    match = match_pattern(shape, target, (A, P))
    assert match.instantiate(shape).equals_to(target)


def test_head_mismatch():
    assert match_pattern(Prod(A, B), Forall(Nat, lambda x: Eq(x, x)), (A, B)) is None


def test_first_order_variable_cannot_capture_bound_variable():
    shape = Forall(A, lambda x: B)
    assert match_pattern(shape, Forall(Nat, lambda x: Eq(x, c)), (A, B)) is None
    match = match_pattern(shape, Forall(Nat, lambda x: Bool), (A, B))
    assert match[B].equals_to(Bool.to_term())


def test_repeated_variable_must_agree():
    assert match_pattern(Prod(A, A), Prod(Nat, Nat), (A,)) is not None
    assert match_pattern(Prod(A, A), Prod(Nat, Bool), (A,)) is None


def test_unassignable_variables_are_rigid():
    assert match_pattern(Prod(A, B), Prod(Nat, Bool), (A,)) is None
    assert match_pattern(Prod(A, B), Prod(Nat, B), (A,)) is not None


def test_several_requirements():
    match = PatternMatch((A, B))
    match.add_requirement(Prod(A, B), Prod(Nat, Bool))
    match.add_requirement(Eq(B, A), Eq(Bool, Nat))
    assert match.run()
    assert match[A].equals_to(Nat.to_term())
