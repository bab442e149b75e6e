"""Mirror a sub-graph edge into enclosing backends.

The cell edge is stored in the cell backend and mirrored into the region and
site backends. The site backend rejects quadratic constraints; with best-effort
registration a quadratic constraint lands in the first backends and the
failure is reported as a partial registration.
"""

from linkgraph import (
    AffExpr,
    BackendConfig,
    Graph,
    LessThan,
    NonlinearExpr,
    PartialRegistrationError,
    QuadExpr,
    ScalarConstraint,
)

site = Graph("site", config=BackendConfig(supported_functions=("variable", "affine", "nonlinear")))
region = site.add_subgraph("region")
cell = region.add_subgraph("cell", config=BackendConfig(registration="best_effort"))

a = cell.add_node("a")
b = cell.add_node("b")
x = a.add_variable("x")
y = b.add_variable("y")
link = cell.add_edge([a, b], label="link")

first = link.add_constraint(ScalarConstraint(AffExpr.from_terms([(1.0, x), (1.0, y)]), LessThan(4.0)))
cell.mirror_edge(link, region)
cell.mirror_edge(link, site)
link.add_constraint(
    ScalarConstraint(NonlinearExpr("*", (x, NonlinearExpr("exp", (y,)))), LessThan(1.0))
)

try:
    link.add_constraint(ScalarConstraint(QuadExpr.from_terms([(1.0, x, y)]), LessThan(1.0)))
except PartialRegistrationError as exc:
    print(f"partial: stored in {[g.label for g in exc.succeeded]}, rejected by {exc.failed.label}")

for graph in link.containing_graphs():
    print(
        f"{graph.label}: holds first={graph.backend.has_constraint(first)}, "
        f"variables={graph.backend.all_variables()}, "
        f"rows={graph.backend.store.num_constraints}"
    )
