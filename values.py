# Runtime carriers for evaluating relation maps on sample data.
# Lists are python lists, pairs and dependent pairs are tuples, subtype
# values are the underlying values, functions and proofs are callables,
# an empty Option is None.

class Some:
    def __init__(self, value):
        self.value = value
    def __eq__(self, other):
        return isinstance(other, Some) and self.value == other.value
    def __hash__(self):
        return hash(("Some", self.value))
    def __repr__(self):
        return f"Some({self.value!r})"

class Inl:
    def __init__(self, value):
        self.value = value
    def __eq__(self, other):
        return isinstance(other, Inl) and self.value == other.value
    def __hash__(self):
        return hash(("Inl", self.value))
    def __repr__(self):
        return f"Inl({self.value!r})"

class Inr:
    def __init__(self, value):
        self.value = value
    def __eq__(self, other):
        return isinstance(other, Inr) and self.value == other.value
    def __hash__(self):
        return hash(("Inr", self.value))
    def __repr__(self):
        return f"Inr({self.value!r})"

def option_map(f):
    def run(x):
        if x is None: return None
        assert isinstance(x, Some), x
        return Some(f(x.value))
    return run

def sum_map(f, g):
    def run(x):
        if isinstance(x, Inl): return Inl(f(x.value))
        assert isinstance(x, Inr), x
        return Inr(g(x.value))
    return run
