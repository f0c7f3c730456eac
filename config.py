# how much a term may be unfolded before two occurrences count as the same
class Transparency:
    NONE = "none" # syntactic equality
    ALL = "all"   # equality of normal forms, definitions and symm unfolded

    values = (NONE, ALL)

class EquivRwConfig:
    def __init__(self, max_depth = 6, transparency = Transparency.NONE, trace = False):
        if transparency not in Transparency.values:
            raise Exception(f"Unknown transparency: {transparency}")
        if max_depth < 1:
            raise Exception(f"max_depth must be positive, got {max_depth}")
        self.max_depth = max_depth
        self.transparency = transparency
        self.trace = trace

    def replace(self, **kwargs):
        params = dict(
            max_depth = self.max_depth,
            transparency = self.transparency,
            trace = self.trace,
        )
        params.update(kwargs)
        return EquivRwConfig(**params)

    def __repr__(self):
        return f"EquivRwConfig(max_depth = {self.max_depth}, transparency = {self.transparency!r}, trace = {self.trace})"
