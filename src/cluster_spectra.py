import argparse
import os
import sys
import time
from typing import Optional, Sequence

from msclust.cluster.assigner import (
    ClusterAssignerBase,
    IndexedClusterAssigner,
    NaiveClusterAssigner,
)
from msclust.cluster.compare import compare_assignments
from msclust.specio.mgf import MgfFormatError
from msclust.specio.store import SpectrumStore
from msclust.util.config import load_configs
from msclust.util.io.yaml import save_yaml
from msclust.util.log import get_logger
from msclust.util.progress import TqdmProgressFactory


def get_cluster_assigner(method: str, **kwargs) -> ClusterAssignerBase:
    if method.lower() == "indexed":
        return IndexedClusterAssigner(**kwargs)
    elif method.lower() == "naive":
        return NaiveClusterAssigner(**kwargs)
    else:
        raise ValueError(f"unknown clustering method {method}")


def build_configs(config_file=None, **overrides) -> dict:
    configs = load_configs(config_file)
    configs.update({k: v for k, v in overrides.items() if v is not None})
    # one bin width serves both peak matching and indexing unless configured
    if overrides.get("peak_tolerance") is not None and "bucket_width" not in configs:
        configs["bucket_width"] = overrides["peak_tolerance"]
    return configs


def cluster_spectra(
    input_file: str,
    method: str = "indexed",
    config_file: Optional[str] = None,
    precursor_mass_window: Optional[float] = None,
    peak_tolerance: Optional[float] = None,
    similarity_threshold: Optional[float] = None,
    out_file: Optional[str] = None,
    compare: bool = False,
    verbose: bool = False,
    progress: bool = True,
    log_file: Optional[str] = None,
):
    logger = get_logger("msclust", file=log_file)
    progress_factory = TqdmProgressFactory(file=sys.stderr) if progress else None

    configs = build_configs(
        config_file,
        precursor_mass_window=precursor_mass_window,
        peak_tolerance=peak_tolerance,
        similarity_threshold=similarity_threshold,
    )
    assigner = get_cluster_assigner(
        method, configs=configs, logger=logger, progress_factory=progress_factory
    )

    start = time.perf_counter()
    spectra = SpectrumStore.from_mgf(input_file)
    parsed = time.perf_counter()
    logger.info(f"Reading {input_file} took {parsed - start:f} seconds")

    similarity = assigner.similarity
    logger.info(
        f"Using parameters precursor_mass_window={similarity.precursor_mass_window:.2f} "
        f"peak_tolerance={similarity.peak_tolerance:.3f} "
        f"similarity_threshold={similarity.similarity_threshold:.2f}"
    )
    assignment = assigner.assign(spectra)
    clustered = time.perf_counter()
    logger.info(f"Clustering took {clustered - parsed:f} seconds")
    logger.info(
        f"The {len(spectra)} spectra could be clustered into "
        f"{assignment.num_clusters} clusters"
    )

    if verbose:
        for leader, size in assignment.cluster_sizes().items():
            logger.info(f"Cluster with {leader} has size {size}")

    if compare:
        reference = NaiveClusterAssigner(
            configs=configs, progress_factory=progress_factory
        ).assign(spectra)
        comparison = compare_assignments(assignment, reference)
        logger.info(f"Comparison with naive clustering: {comparison.to_dict()}")

    if out_file:
        assignment.to_dataframe(spectra.to_dataframe()).to_csv(out_file)
        logger.info(f"Cluster assignment written to {out_file}")
        params_file = os.path.splitext(out_file)[0] + ".params.yaml"
        save_yaml(assigner.get_configs(deep=False), params_file, sort_keys=False)
        logger.info(f"Clustering parameters written to {params_file}")

    return assignment


def parse_args(argv: Optional[Sequence[str]] = None):
    parser = argparse.ArgumentParser(
        description="Cluster MS2 spectra by greedy cosine similarity."
    )
    parser.add_argument(
        "-f", "--in", dest="input_file", required=True, help="input .mgf file"
    )
    parser.add_argument(
        "-m",
        "--precursor-window",
        dest="precursor_mass_window",
        type=float,
        help="precursor m/z window (default: 2.0)",
    )
    parser.add_argument(
        "-p",
        "--peak-tolerance",
        dest="peak_tolerance",
        type=float,
        help="fragment peak tolerance (default: 0.02)",
    )
    parser.add_argument(
        "-t",
        "--threshold",
        dest="similarity_threshold",
        type=float,
        help="cosine similarity threshold (default: 0.7)",
    )
    parser.add_argument(
        "--method", choices=["indexed", "naive"], default="indexed"
    )
    parser.add_argument("--config", dest="config_file", help="config file")
    parser.add_argument("--out", dest="out_file", help="output assignment .csv file")
    parser.add_argument(
        "--compare",
        action="store_true",
        help="also run naive clustering and report the differences",
    )
    parser.add_argument(
        "--verbose", action="store_true", help="report the size of every cluster"
    )
    parser.add_argument(
        "--no-progress", dest="progress", action="store_false", help="hide progress bar"
    )
    parser.add_argument("--log", dest="log_file", help="log file")

    args = parser.parse_args(argv)
    if not os.path.isfile(args.input_file):
        parser.error(f"input file not found: {args.input_file}")
    try:
        get_cluster_assigner(
            args.method,
            configs=build_configs(
                args.config_file,
                precursor_mass_window=args.precursor_mass_window,
                peak_tolerance=args.peak_tolerance,
                similarity_threshold=args.similarity_threshold,
            ),
        )
    except (KeyError, TypeError, ValueError) as e:
        parser.error(f"invalid clustering parameters: {e}")
    return args


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    try:
        cluster_spectra(**vars(args))
    except MgfFormatError as e:
        get_logger("msclust").error(f"Failed to parse {args.input_file}: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
