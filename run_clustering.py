#!/usr/bin/env python3
"""
Document Clustering Runner

Clusters plain-text documents from a single file (one document per paragraph
block separated by blank lines) or a directory (one document per file).

Usage:
    # Directory of .txt files
    python run_clustering.py data/documents/

    # Custom glob, Euclidean metric, fixed seed, JSON written to a file
    python run_clustering.py data/ --pattern "*.md" --metric euclidean --seed 42 --output clusters.json

Configuration: config.json (optional). Command-line flags override it.
"""

import argparse
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import List, Optional, Tuple

from docluster.config import ClusteringConfig, get_config
from docluster.exceptions import DoclusterError, InputDocumentError
from docluster.pipeline import DocumentClusteringPipeline
from docluster.utils.logger import setup_logger

logger = logging.getLogger(__name__)


def load_documents(input_path: Path, pattern: str = "*.txt") -> Tuple[List[str], List[str]]:
    """
    Read documents from a file or a directory.

    Args:
        input_path: Text file (split on blank lines) or directory
        pattern: Glob for files inside a directory

    Returns:
        (names, texts)

    Raises:
        FileNotFoundError: If input_path does not exist
    """
    if not input_path.exists():
        raise FileNotFoundError(f"Input path not found: {input_path}")

    if input_path.is_file():
        content = input_path.read_text(encoding="utf-8", errors="replace")
        blocks = [block.strip() for block in content.split("\n\n")]
        texts = [block for block in blocks if block]
        names = [f"{input_path.name}#{i}" for i in range(len(texts))]
        return names, texts

    paths = sorted(p for p in input_path.glob(pattern) if p.is_file())
    names = [p.name for p in paths]
    texts = [p.read_text(encoding="utf-8", errors="replace") for p in paths]
    return names, texts


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Cluster text documents with K-means/DBSCAN and label the clusters",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python run_clustering.py data/documents/
  python run_clustering.py notes.txt --seed 7
  python run_clustering.py data/ --pattern "*.md" --output clusters.json
        """
    )
    parser.add_argument("input_path", type=str, help="Text file or directory of documents")
    parser.add_argument("--pattern", default="*.txt", help="Glob for directory input (default: *.txt)")
    parser.add_argument(
        "--metric",
        choices=["cosine", "euclidean"],
        default=None,
        help="Distance metric (default: from config.json)"
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed for k-means++")
    parser.add_argument("--output", type=str, default=None, help="Write JSON here instead of stdout")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="Logging level (default: from config.json)"
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = get_config()
    except (FileNotFoundError, ValueError) as e:
        print(f"\nERROR: Invalid configuration in config.json!\n\n{e}", file=sys.stderr)
        return 1

    setup_logger(config.logging, level=args.log_level, names=("docluster", __name__))

    pipeline = DocumentClusteringPipeline.from_config()
    overrides = {}
    if args.metric:
        overrides["metric"] = args.metric
    if args.seed is not None:
        overrides["random_state"] = args.seed
    if overrides:
        pipeline.clustering_config = replace(pipeline.clustering_config, **overrides)

    try:
        names, texts = load_documents(Path(args.input_path), args.pattern)
        logger.info(f"Loaded {len(texts)} documents from {args.input_path}")
        outcome = pipeline.run(texts)
    except FileNotFoundError as e:
        print(f"\nERROR: {e}", file=sys.stderr)
        return 1
    except InputDocumentError as e:
        print(f"\nERROR: {e.message}", file=sys.stderr)
        return 1
    except DoclusterError as e:
        logger.error(f"Clustering failed: {e}", exc_info=True)
        return 1

    payload = outcome.to_dict()
    payload["document_names"] = [names[i] for i in outcome.accepted_indices]
    output = json.dumps(payload, indent=2, ensure_ascii=False)

    if args.output:
        Path(args.output).write_text(output, encoding="utf-8")
        print(f"[OK] {outcome.result.n_clusters} clusters written to {args.output}")
    else:
        print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
