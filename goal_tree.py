from local_context import LocalContext

class GoalTreeNode:
    def __init__(self, target, context = None, parent = None, tactic_output = None):
        if context is None: context = LocalContext()
        self.target = target
        self.context = context
        self.parent = parent
        self.tactic = None
        self.tactic_output = tactic_output
        self.children = None
        self.closed_with = None # proof term

    @property
    def is_closed(self):
        return self.closed_with is not None
    @property
    def is_leaf(self):
        return self.tactic is None

    def ancestors(self): # including self
        x = self
        while x is not None:
            yield x
            x = x.parent

    def check_closed(self):
        x = self
        while x is not None and x.children is not None and all(c.is_closed for c in x.children):
            x.closed_with = x.tactic.build_term(*(
                c.closed_with for c in x.children
            ))
            x = x.parent

    # state touched by a tactic application on this node
    def snapshot(self):
        return self.tactic, self.children, [x.closed_with for x in self.ancestors()]
    def restore(self, snapshot):
        self.tactic, self.children, closed = snapshot
        for x, closed_with in zip(self.ancestors(), closed):
            x.closed_with = closed_with

    def to_str(self):
        lines = [decl.to_str() for decl in self.context]
        lines.append("|- "+self.target.to_str())
        return '\n'.join(lines)
    def __str__(self):
        return "Goal: "+self.to_str()

class GoalTree:
    def __init__(self, root):
        self.root = root

    def leaf_iter(self):
        stack = [(self.root, 0)]
        while stack:
            node, d = stack.pop()
            if node.is_closed: continue
            if node.is_leaf:
                yield node, d
            else:
                stack.extend((c, d+1) for c in reversed(node.children))

    def first_leaf(self):
        return next(self.leaf_iter(), None)
    def get_proven(self):
        return self.root.closed_with
    def print_goals(self):
        print("Goals:")
        for node,d in self.leaf_iter():
            print("*", node.to_str().replace('\n', '\n  '))
