__all__ = [
    "ClusterAssignerBase",
    "IndexedClusterAssigner",
    "NaiveClusterAssigner",
]

import abc
from logging import Logger
from typing import Iterable, List, Optional, Sequence, Union

import numpy as np

from ..specio.spec import MassSpectrum
from ..util.config import Configurable
from ..util.progress import ProgressFactoryProto
from .assignment import ClusterAssignment
from .index import PeakBucketIndex
from .similarity import DEFAULT_CONFIG_FILE, CosineSimilarity


class ClusterAssignerBase(abc.ABC, Configurable):
    """Single-pass greedy clustering.

    Spectra are visited in input order. Each one joins the first candidate
    leader that passes the precursor and cosine gates, or else becomes a
    leader itself. Assignments are final once made, so the partition depends
    on the input order.
    """

    def __init__(
        self,
        configs: Union[str, dict, None] = None,
        logger: Optional[Logger] = None,
        progress_factory: Optional[ProgressFactoryProto] = None,
    ):
        super().__init__(configs, defaults=DEFAULT_CONFIG_FILE)
        self.similarity = CosineSimilarity(self.configs)
        self.logger = logger
        self.progress_factory = progress_factory

    def assign(self, spectra: Sequence[MassSpectrum]) -> ClusterAssignment:
        if self.logger:
            self.logger.info(
                f"{self.__class__.__name__}: clustering {len(spectra)} spectra "
                f"using configs: {self.get_configs(deep=False)}"
            )

        representatives = list(range(len(spectra)))
        positions: Iterable[int] = range(len(spectra))
        if self.progress_factory:
            positions = self.progress_factory(
                positions, total=len(spectra), desc="Clustering"
            )

        self._assign_spectra(spectra, representatives, positions)

        assignment = ClusterAssignment(np.array(representatives, dtype=np.int64))
        if self.logger:
            self.logger.info(
                f"{len(spectra)} spectra clustered into "
                f"{assignment.num_clusters} clusters"
            )
        return assignment

    @abc.abstractmethod
    def _assign_spectra(
        self,
        spectra: Sequence[MassSpectrum],
        representatives: List[int],
        positions: Iterable[int],
    ):
        pass


class IndexedClusterAssigner(ClusterAssignerBase):
    """Greedy clustering restricted to leaders found in a peak-locality index.

    Only leaders sharing a bucket with one of the lowest-m/z peaks of a
    spectrum are tested. Spectra whose matching peaks all lie above those
    peaks are never compared, which is an accepted source of missed merges.
    """

    def __init__(
        self,
        configs: Union[str, dict, None] = None,
        logger: Optional[Logger] = None,
        progress_factory: Optional[ProgressFactoryProto] = None,
    ):
        super().__init__(configs, logger=logger, progress_factory=progress_factory)

        bucket_width = self.get_config(
            "bucket_width", required=False, typed=float, allow_convert=True
        )
        if bucket_width is None:
            bucket_width = self.similarity.peak_tolerance
        self.bucket_width = bucket_width
        self.num_indexed_peaks = self.get_config(
            "num_indexed_peaks", typed=int, allow_convert=True
        )

        if not self.bucket_width > 0:
            raise ValueError(f"invalid bucket_width {self.bucket_width}")
        if self.num_indexed_peaks < 1:
            raise ValueError(f"invalid num_indexed_peaks {self.num_indexed_peaks}")

    def create_index(self) -> PeakBucketIndex:
        return PeakBucketIndex(self.bucket_width, num_peaks=self.num_indexed_peaks)

    def _assign_spectra(
        self,
        spectra: Sequence[MassSpectrum],
        representatives: List[int],
        positions: Iterable[int],
    ):
        index = self.create_index()
        for i in positions:
            query = spectra[i]
            for candidate in index.candidates(query):
                if self.similarity.is_match(query, spectra[candidate]):
                    representatives[i] = candidate
                    break
            else:
                index.register(query, i)

        if self.logger:
            self.logger.info(
                f"Peak-locality index: {index.num_registered} leaders "
                f"in {len(index)} buckets"
            )


class NaiveClusterAssigner(ClusterAssignerBase):
    """Greedy clustering that tests every earlier cluster leader.

    Quadratic in the number of spectra; the reference for the indexed
    assigner, whose candidates are always a subset of these.
    """

    def _assign_spectra(
        self,
        spectra: Sequence[MassSpectrum],
        representatives: List[int],
        positions: Iterable[int],
    ):
        for i in positions:
            query = spectra[i]
            tried = set()
            for j in range(i):
                candidate = representatives[j]
                if candidate in tried:
                    continue
                if self.similarity.is_match(query, spectra[candidate]):
                    representatives[i] = candidate
                    break
                tried.add(candidate)
