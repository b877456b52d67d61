#!/usr/bin/env python3
"""Score chosen attribute subsets of a bundled dataset by rough set dependency."""

from __future__ import annotations

import argparse
from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

from roughlab.shared._logging_utils import setup_logger
from roughlab.shared.datasets import load_csv_dataset
from roughlab.shared.scorer import ScorerConfig, SubsetEvaluation, SubsetScorer


@dataclass
class ScanConfig:
    dataset: str = "weather.csv"
    label_column: str | None = None
    subsets: List[Tuple[int, ...]] = field(default_factory=list)
    use_better_encoding: bool = True
    verbosity: int = 0


def parse_subset(arg: str) -> Tuple[int, ...]:
    return tuple(int(x.strip()) for x in arg.split(",") if x.strip())


def default_subsets(scorer: SubsetScorer) -> List[Tuple[int, ...]]:
    """Every single attribute, then all attributes together."""
    attributes = scorer.dataset.attribute_indices
    return [(idx,) for idx in attributes] + [attributes]


def format_result(res: SubsetEvaluation, column_names: Sequence[str]) -> str:
    names = ", ".join(column_names[idx] for idx in res.features) or "(empty)"
    return (
        f"Features {res.features} ({names}): merit={res.merit:.3f} "
        f"consistent={res.consistent_total}/{res.row_count} "
        f"signatures={res.n_signatures} inconsistent={res.n_inconsistent}"
    )


def run_scan(config: ScanConfig) -> Tuple[SubsetScorer, List[SubsetEvaluation]]:
    rows, column_names = load_csv_dataset(config.dataset)
    label_column = config.label_column or column_names[-1]
    if label_column not in column_names:
        raise ValueError(f"Unknown label column {label_column!r}; choose from {list(column_names)}")

    scorer = SubsetScorer.from_rows(
        rows,
        column_names.index(label_column),
        attribute_names=column_names,
        config=ScorerConfig(use_better_encoding=config.use_better_encoding, verbosity=config.verbosity),
    )
    print(scorer)
    for idx, cuts in sorted(scorer.dataset.cut_points.items()):
        print(f"  {column_names[idx]}: cut points {[round(c, 3) for c in cuts.tolist()]}")

    subsets = config.subsets or default_subsets(scorer)
    return scorer, [scorer.inspect(subset) for subset in subsets]


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--dataset", type=str, default="weather.csv", help="CSV file under roughlab.data.")
    parser.add_argument("--label", type=str, default=None, help="Label column name (default: last column).")
    parser.add_argument(
        "--subset",
        type=parse_subset,
        action="append",
        default=[],
        help="Comma-separated attribute indices; repeat to score several subsets.",
    )
    parser.add_argument("--plain-encoding", action="store_true", help="Disable MDL better encoding.")
    parser.add_argument("-v", "--verbose", action="count", default=0)
    args = parser.parse_args()

    setup_logger("roughlab", args.verbose)
    config = ScanConfig(
        dataset=args.dataset,
        label_column=args.label,
        subsets=args.subset,
        use_better_encoding=not args.plain_encoding,
        verbosity=args.verbose,
    )
    scorer, results = run_scan(config)
    column_names = scorer.dataset.attribute_names

    print("=== Subset dependency degree ===")
    for res in results:
        print(format_result(res, column_names))

    best = max(results, key=lambda r: (r.merit, -len(r.features)))
    print(f"\nBest reported subset: {best.features} merit={best.merit:.3f}")
    scorer.post_process(list(best.features))


if __name__ == "__main__":
    main()
