import numpy as np
from relation import Relation, RoundTripLaw, ProofSeed, ProofRefl, ProofCongruence, ProofSymm

proof_types = [ProofSeed, ProofCongruence, ProofSymm, ProofRefl]

def get_node_basic_size(proof):
    res = np.zeros(len(proof_types)+1, dtype = int)
    proof_type = type(proof)
    if proof_type in proof_types: res[proof_types.index(proof_type)] += 1
    else: res[-1] += 1
    return res

def get_proof_size_aux(proof, cache):
    if proof in cache: return cache[proof]
    res = get_node_basic_size(proof)
    if isinstance(proof, ProofCongruence):
        for law in proof.sublaws:
            res = res + get_proof_size_aux(law.proof, cache)
    elif isinstance(proof, ProofSymm):
        res = res + get_proof_size_aux(proof.law.proof, cache)
    cache[proof] = res
    return res

# [seed, congruence, symm, refl, other] occurrences in the justification tree
def rule_usage(relation_or_law):
    if isinstance(relation_or_law, Relation):
        relation_or_law = relation_or_law.left_inv
    assert isinstance(relation_or_law, RoundTripLaw)
    return get_proof_size_aux(relation_or_law.proof, dict())

# congruence rule name -> number of applications
def rule_histogram(relation):
    res = dict()
    stack = [relation.left_inv.proof]
    while stack:
        proof = stack.pop()
        if isinstance(proof, ProofCongruence):
            res[proof.rule_name] = res.get(proof.rule_name, 0) + 1
            stack.extend(law.proof for law in proof.sublaws)
        elif isinstance(proof, ProofSymm):
            stack.append(proof.law.proof)
        elif isinstance(proof, ProofRefl):
            res["refl"] = res.get("refl", 0) + 1
    return res

def derivation_size(relation):
    return int(np.sum(rule_usage(relation)))
