__all__ = ["AssignmentComparison", "compare_assignments"]

from dataclasses import asdict, dataclass

import numpy as np
import pandas as pd

from .assignment import ClusterAssignment


def _num_pairs(sizes: np.ndarray) -> int:
    sizes = sizes.astype(np.int64)
    return int(np.sum(sizes * (sizes - 1) // 2))


@dataclass(frozen=True)
class AssignmentComparison:
    num_spectra: int
    num_clusters: int
    num_clusters_reference: int
    num_different_representatives: int
    num_pairs: int
    num_pairs_reference: int
    num_pairs_shared: int

    @property
    def pair_precision(self) -> float:
        if self.num_pairs == 0:
            return 1.0
        return self.num_pairs_shared / self.num_pairs

    @property
    def pair_recall(self) -> float:
        if self.num_pairs_reference == 0:
            return 1.0
        return self.num_pairs_shared / self.num_pairs_reference

    def to_dict(self) -> dict:
        r = asdict(self)
        r["pair_precision"] = self.pair_precision
        r["pair_recall"] = self.pair_recall
        return r


def compare_assignments(
    assignment: ClusterAssignment, reference: ClusterAssignment
) -> AssignmentComparison:
    """Compares two clusterings of the same spectra.

    Pairs of spectra placed in the same cluster are counted in each
    clustering and in both; with the naive assigner as reference, a pair
    recall below one measures the merges missed by the indexed assigner.
    """
    if len(assignment) != len(reference):
        raise ValueError("assignments of different lengths")

    labels = pd.DataFrame(
        {
            "cluster": assignment.representatives,
            "reference": reference.representatives,
        }
    )
    contingency = labels.groupby(["cluster", "reference"]).size()

    return AssignmentComparison(
        num_spectra=len(assignment),
        num_clusters=assignment.num_clusters,
        num_clusters_reference=reference.num_clusters,
        num_different_representatives=int(
            np.sum(assignment.representatives != reference.representatives)
        ),
        num_pairs=_num_pairs(labels.groupby("cluster").size().values),
        num_pairs_reference=_num_pairs(labels.groupby("reference").size().values),
        num_pairs_shared=_num_pairs(contingency.values),
    )
