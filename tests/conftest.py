"""Pytest configuration and fixtures."""

from types import SimpleNamespace

import pytest

from type_env import TypeEnv
from simple_log import set_verbose


def nat_to_fin5(n):
    return ("fin5", n)


def fin5_to_nat(f):
    return f[1]


@pytest.fixture(autouse=True)
def quiet_trace():
    """Every test starts with tracing off."""
    set_verbose(False)
    yield
    set_verbose(False)


@pytest.fixture
def env() -> TypeEnv:
    """Environment with Nat, Fin5, Bool, a few predicates and the seed e : Nat ~= Fin5."""
    env = TypeEnv()
    env.declare_type("Nat")
    env.declare_type("Fin5")
    env.declare_type("Bool")
    env.declare_const("P", 1)
    env.declare_const("Q", 2)
    env.declare_const("f", 1)
    env.declare_equiv("e", "Nat", "Fin5", nat_to_fin5, fin5_to_nat, samples=range(5))
    return env


@pytest.fixture
def t(env: TypeEnv) -> SimpleNamespace:
    """Constants of the fixture environment."""
    co = env.constants
    return SimpleNamespace(
        co=co,
        Nat=co.Nat.to_term(),
        Fin5=co.Fin5.to_term(),
        Bool=co.Bool.to_term(),
        P=co.P,
        Q=co.Q,
        f=co.f,
        e=env.equivs["e"],
    )
