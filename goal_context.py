from local_context import LocalContext
from goal_tree import GoalTreeNode, GoalTree
from simple_log import simple_log

class GoalContext:
    def __init__(self, goal_env, node):
        self.goal_env = goal_env
        self.tree = GoalTree(node)

    def __enter__(self):
        self.prev_goal_ctx = self.goal_env.current_ctx
        self.goal_env.current_ctx = self
        return self.goal_env
    def __exit__(self, exc_type, exc_val, exc_tb):
        self.goal_env.current_ctx = self.prev_goal_ctx
        if exc_tb is not None: return

        proof = self.tree.get_proven()
        if proof is None:
            self.tree.print_goals()
            raise Exception("Proof is not finished")
        self.goal_env.last_proven = proof

    @property
    def current_goal(self):
        leaf = self.tree.first_leaf()
        if leaf is None: return None
        return leaf[0]

    # Either the tactic succeeds, or the goal tree is left as it was
    def apply_tactic(self, tactic, *args, **kwargs):
        node = self.current_goal
        if node is None:
            raise Exception("No goals left")
        snapshot = node.snapshot()
        try:
            tactic(self.goal_env.env, node, *args, **kwargs)
        except Exception as e:
            simple_log("tactic failed, goal restored:", e)
            node.restore(snapshot)
            raise

        outputs = self.get_outputs(node)
        if len(outputs) == 0: return self.goal_env
        else: return outputs[-1]

    # outputs of the tactic chain started at the node
    def get_outputs(self, node):
        res = []
        while node.children:
            res.extend(
                c.tactic_output for c in node.children
                if c.tactic_output is not None
            )
            if len(node.children) != 1: break
            [node] = node.children
        return res

class GoalEnv:
    def __init__(self, env):
        self.env = env
        self.current_ctx = None
        self.last_proven = None

    def goal(self, target, context = None):
        target = self.env.to_term(target)
        if context is None: context = LocalContext()
        node = GoalTreeNode(target, context)
        return GoalContext(self, node)

    def _current_goal(self):
        ctx = self.current_ctx
        if not ctx: return None
        return ctx.current_goal

    def __getattr__(self, name):
        if name == "current_goal":
            return self._current_goal()

        tactic = self.env.tactics.get_tactic(name)
        if tactic is None: raise AttributeError(f"No tactic named '{name}'")
        ctx = self.current_ctx
        if ctx is None:
            raise Exception("Cannot apply tactics without a goal context")
        def run(*args, **kwargs):
            return self.current_ctx.apply_tactic(tactic, *args, **kwargs)
        return run
