from term import Term, TermApp

# Justifications of the round-trip laws

class Proof:
    pass

class ProofSeed(Proof): # assumed together with a declared seed
    def __init__(self, name):
        self.name = name
class ProofRefl(Proof):
    def __init__(self, domain):
        self.domain = domain
class ProofCongruence(Proof):
    def __init__(self, rule_name, sublaws):
        self.rule_name = rule_name
        self.sublaws = tuple(sublaws)
class ProofSymm(Proof):
    def __init__(self, law):
        self.law = law

class RoundTripLaw:
    LEFT_INV = "left_inv"   # bwd(R, fwd(R, a)) = a
    RIGHT_INV = "right_inv" # fwd(R, bwd(R, b)) = b

    def __init__(self, env, relation_term, domain, direction, proof):
        assert direction in (self.LEFT_INV, self.RIGHT_INV)
        if not isinstance(proof, Proof):
            raise Exception(f"Round-trip law {direction} of {relation_term} has no justification")
        self._env = env
        self.relation_term = relation_term
        self.domain = domain
        self.direction = direction
        self.proof = proof
        self._statement = None

    def round_trip_term(self, t):
        co = self._env.constants
        if self.direction == self.LEFT_INV:
            first, second = co.fwd, co.bwd
        else:
            first, second = co.bwd, co.fwd
        return TermApp(second, (self.relation_term, TermApp(first, (self.relation_term, t))))

    @property
    def statement(self):
        if self._statement is not None: return self._statement
        co = self._env.constants
        self._statement = co.Forall(
            self.domain,
            lambda a: co.Eq(self.round_trip_term(a), a),
        )
        return self._statement

    # t = bwd(R, fwd(R, t)), the orientation used for generalizing fwd(R, t)
    def instantiate(self, t):
        return self._env.constants.Eq(t, self.round_trip_term(t))

    def __str__(self):
        return f"{self.direction}: {self.statement}"

class Relation:
    def __init__(self, env, term, left, right, forward, backward,
                 left_inv_proof, right_inv_proof, uses_seed = False):
        assert isinstance(term, Term)
        assert isinstance(left, Term)
        assert isinstance(right, Term)
        assert callable(forward) and callable(backward)
        self._env = env
        self.term = term
        self.left = left
        self.right = right
        self.forward = forward
        self.backward = backward
        self.left_inv = RoundTripLaw(env, term, left, RoundTripLaw.LEFT_INV, left_inv_proof)
        self.right_inv = RoundTripLaw(env, term, right, RoundTripLaw.RIGHT_INV, right_inv_proof)
        self.uses_seed = uses_seed

    def fwd_term(self, t):
        return TermApp(self._env.constants.fwd, (self.term, t))
    def bwd_term(self, t):
        return TermApp(self._env.constants.bwd, (self.term, t))

    def symm(self):
        co = self._env.constants
        if self.term.f == co.symm:
            [term] = self.term.args
        else:
            term = TermApp(co.symm, (self.term,))
        return Relation(
            self._env, term, self.right, self.left,
            self.backward, self.forward,
            ProofSymm(self.right_inv), ProofSymm(self.left_inv),
            uses_seed = self.uses_seed,
        )

    # returns the samples violating the round trip
    def check_round_trip(self, samples, direction = RoundTripLaw.LEFT_INV):
        if direction == RoundTripLaw.LEFT_INV:
            there, back = self.forward, self.backward
        else:
            there, back = self.backward, self.forward
        return [
            x for x in samples
            if back(there(x)) != x
        ]

    def to_str(self):
        return f"{self.term} : {self.left} ~= {self.right}"
    def __str__(self):
        return self.to_str()
    def __repr__(self):
        return f"Relation({self.to_str()})"
