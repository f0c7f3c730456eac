from term import Term, TermFunction, TermVariable

def _to_term(t):
    if isinstance(t, TermFunction): return t.to_term()
    assert isinstance(t, Term), t
    return t

class LocalDecl:
    def __init__(self, var, type, value = None, frozen = False):
        assert isinstance(var, TermVariable) and var.arity == 0
        self.var = var
        self.type = _to_term(type)
        self.value = None if value is None else _to_term(value)
        self.frozen = frozen

    @property
    def name(self): return self.var.name
    @property
    def term(self): return self.var.to_term()

    def terms(self):
        if self.value is None: return (self.type,)
        return (self.type, self.value)
    def mentions(self, v):
        return any(v in t.free_vars for t in self.terms())

    def map_terms(self, f):
        value = None if self.value is None else f(self.value)
        return LocalDecl(self.var, f(self.type), value, self.frozen)
    def unfreeze(self):
        if not self.frozen: return self
        return LocalDecl(self.var, self.type, self.value, False)
    def freeze(self):
        if self.frozen: return self
        return LocalDecl(self.var, self.type, self.value, True)

    def to_str(self):
        res = f"{self.name} : {self.type}"
        if self.value is not None: res += f" := {self.value}"
        if self.frozen: res += " [frozen]"
        return res
    def __str__(self):
        return self.to_str()

# Ordered and immutable, every operation returns a new context
class LocalContext:
    def __init__(self, decls = ()):
        self._decls = tuple(decls)

    def add(self, var, type, value = None, frozen = False):
        if isinstance(var, str): var = TermVariable(0, var)
        for decl in self._decls:
            if decl.var is var:
                raise Exception(f"Local '{var.name}' declared twice")
        return LocalContext(self._decls + (LocalDecl(var, type, value, frozen),))

    def find(self, name): # the last declaration shadows the previous ones
        for decl in reversed(self._decls):
            if decl.name == name: return decl
        return None
    def __getitem__(self, name):
        decl = self.find(name)
        if decl is None: raise KeyError(name)
        return decl
    def index_of(self, var):
        for i,decl in enumerate(self._decls):
            if decl.var is var: return i
        raise Exception(f"Local '{var.name}' not in the context")

    def decls(self, start = 0):
        return self._decls[start:]
    def remove(self, var):
        i = self.index_of(var)
        return LocalContext(self._decls[:i] + self._decls[i+1:])
    def map_terms(self, f, start = 0):
        return LocalContext(
            self._decls[:start] + tuple(
                decl.map_terms(f) for decl in self._decls[start:]
            )
        )
    def dependents(self, var):
        i = self.index_of(var)
        return [decl for decl in self._decls[i+1:] if decl.mentions(var)]
    def unfreeze(self):
        return LocalContext(decl.unfreeze() for decl in self._decls)
    def frozen_vars(self):
        return set(decl.var for decl in self._decls if decl.frozen)
    def refreeze(self, frozen_vars):
        return LocalContext(
            decl.freeze() if decl.var in frozen_vars else decl
            for decl in self._decls
        )

    @property
    def names(self):
        return [decl.name for decl in self._decls]
    def __iter__(self):
        return iter(self._decls)
    def __len__(self):
        return len(self._decls)

    def to_str(self):
        return '\n'.join(decl.to_str() for decl in self._decls)
    def __str__(self):
        return self.to_str()
