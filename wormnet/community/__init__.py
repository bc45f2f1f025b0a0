"""community: modularity-based community structure of a connectome."""

from .projection import symmetrize
from .greedy import (
    CommunityResult,
    modularity,
    greedy_modularity,
    detect_communities,
)
