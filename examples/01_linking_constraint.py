"""Couple two sub-problems with a linking constraint on the parent graph.

Each sub-graph keeps its own backend. The edge lives on the parent, so adding
the constraint pulls both sub-graph variables into the parent's backend.
"""

from linkgraph import AffExpr, EqualTo, Graph, LessThan, ScalarConstraint

plant = Graph("plant")
north = plant.add_subgraph("north")
south = plant.add_subgraph("south")

gen_n = north.add_node("gen_n")
gen_s = south.add_node("gen_s")
p_n = gen_n.add_variable("p_n")
p_s = gen_s.add_variable("p_s")

tie = plant.add_edge([gen_n, gen_s], label="tie")
balance = tie.add_constraint(
    ScalarConstraint(AffExpr.from_terms([(1.0, p_n), (1.0, p_s)], constant=-10.0), EqualTo(0.0)),
    name="balance",
)
tie["balance"] = balance
tie.add_constraint(
    ScalarConstraint(AffExpr.from_terms([(1.0, p_n), (-1.0, p_s)]), LessThan(2.0)),
    name="spread",
)

for graph in (plant, north, south):
    print(
        f"{graph.label}: {graph.backend.num_variables} variables, "
        f"{graph.backend.store.num_constraints} constraints"
    )
print(f"{tie}: {[str(shape) for shape in tie.list_constraint_types()]} -> {tie.all_variables()}")
print(f"balance stored as {plant.backend.constraint_object(tie['balance'])}")
