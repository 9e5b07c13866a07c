__all__ = ["ClusterAssignment"]

from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np
import numpy.typing as npt
import pandas as pd


@dataclass(frozen=True, eq=False)
class ClusterAssignment:
    """Cluster leader of every spectrum, by input position.

    ``representatives[i] == i`` marks a leader; otherwise it is the index of
    an earlier spectrum that was a leader when ``i`` was assigned. The
    partition is flat: leaders are always their own representative.
    """

    representatives: npt.NDArray[np.int64]

    def __post_init__(self):
        r = self.representatives
        if len(r.shape) != 1:
            raise ValueError("invalid array shape")
        positions = np.arange(r.shape[0])
        if np.any(r < 0) or np.any(r > positions):
            raise ValueError("representative after its member")
        if np.any(r[r] != r):
            raise ValueError("representative is not a cluster leader")
        r.flags.writeable = False

    @classmethod
    def from_list(cls, representatives: Sequence[int]) -> "ClusterAssignment":
        return cls(np.array(representatives, dtype=np.int64))

    def __len__(self):
        return self.representatives.shape[0]

    def __getitem__(self, index: int) -> int:
        return int(self.representatives[index])

    @property
    def leaders(self) -> npt.NDArray[np.int64]:
        return np.flatnonzero(self.representatives == np.arange(len(self)))

    @property
    def num_clusters(self) -> int:
        return int(self.leaders.shape[0])

    def members(self, leader: int) -> npt.NDArray[np.int64]:
        return np.flatnonzero(self.representatives == leader)

    def cluster_sizes(self) -> pd.Series:
        sizes = pd.Series(self.representatives).value_counts(sort=False).sort_index()
        sizes.index.name = "representative"
        sizes.name = "size"
        return sizes

    def to_dataframe(self, spectrum_info: Optional[pd.DataFrame] = None) -> pd.DataFrame:
        data = pd.DataFrame({"representative": self.representatives})
        data.index.name = "index"
        if spectrum_info is not None:
            if len(spectrum_info) != len(data):
                raise ValueError("spectrum table length not match")
            spectrum_info = spectrum_info.reset_index(drop=True)
            data = pd.concat([spectrum_info, data], axis=1)
            if "title" in spectrum_info.columns:
                data["representative_title"] = (
                    spectrum_info["title"].iloc[self.representatives].values
                )
            data.index.name = "index"
        return data
