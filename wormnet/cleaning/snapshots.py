"""The two named snapshots the analysis runs on.

fullChemical keeps every chemical synapse, including single contacts,
and is used for reachability (average distance, diameter).

reducedChemical additionally drops weak synapses and the neurons they
leave isolated. Centrality, constraint, communities and export use it.
"""

from wormnet.bench import Snapshot, DerivedSnapshot, evaluate_snapshots
from wormnet.cleaning.cleaner import (
    drop_electrical,
    simplify,
    drop_low_weight,
    remove_isolates,
    strip_attributes,
)
from wormnet.config import AnalysisConfig

FULL_CHEMICAL = "fullChemical"
REDUCED_CHEMICAL = "reducedChemical"


@evaluate_snapshots
def full_chemical(graph, merge="first"):
    """drop_electrical, then simplify."""
    return simplify(drop_electrical(graph), merge=merge)


@evaluate_snapshots
def reduced_chemical(full, threshold=1):
    """drop_low_weight(threshold), then remove_isolates, applied to fullChemical."""
    return remove_isolates(drop_low_weight(full, threshold=threshold))


def build_snapshots(graph, config=None):
    """Declare the snapshot pipeline over a loaded graph.

    Nothing is computed here. Each snapshot derives itself on first
    access to .value and keeps the result.

    Parameters
    ----------
    graph : Graph or Snapshot
        The connectome as loaded.
    config : AnalysisConfig, optional

    Returns
    -------
    dict of str -> DerivedSnapshot
        Keys FULL_CHEMICAL and REDUCED_CHEMICAL.
    """
    config = config or AnalysisConfig()
    source = graph if isinstance(graph, Snapshot) else (
        Snapshot("connectome", "Connectome as loaded").with_data(graph))

    stripped = DerivedSnapshot(
        name="stripped",
        description="Connectome without noise annotations",
        inputs=[source],
        computation=strip_attributes,
        params={"names": config.strip_attributes},
    )
    full = DerivedSnapshot(
        name=FULL_CHEMICAL,
        description="All chemical synapses, simplified",
        inputs=[stripped],
        computation=full_chemical,
        params={"merge": config.merge_policy},
    )
    reduced = DerivedSnapshot(
        name=REDUCED_CHEMICAL,
        description=f"Chemical synapses with weight > {config.weight_threshold}, "
                    "isolates removed",
        inputs=[full],
        computation=reduced_chemical,
        params={"threshold": config.weight_threshold},
    )
    return {FULL_CHEMICAL: full, REDUCED_CHEMICAL: reduced}
