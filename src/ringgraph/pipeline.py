from __future__ import annotations

import argparse
import asyncio
import json
import logging
from pathlib import Path
from typing import Dict, Optional

import pandas as pd

from .catalog import load_catalog
from .config import EngineConfig, PipelinePaths
from .engine import ConnectionEngine
from .export import SUPPORTED_FORMATS

LOGGER = logging.getLogger(__name__)


def related_frame(engine: ConnectionEngine, limit: int) -> pd.DataFrame:
    rows = []
    for project in engine.projects:
        for rank, related in enumerate(engine.related_projects(project.id, limit), start=1):
            rows.append(
                {
                    "project_id": project.id,
                    "rank": rank,
                    "related_id": related.id,
                    "similarity": related.similarity,
                    "reason": related.reason,
                }
            )
    return pd.DataFrame(rows, columns=["project_id", "rank", "related_id", "similarity", "reason"])


def run_pipeline(
    paths: PipelinePaths,
    config: Optional[EngineConfig] = None,
    train: Optional[bool] = None,
    related_limit: int = 5,
) -> Dict[str, Path]:
    config = config or EngineConfig()
    output_dir = paths.output_dir
    output_dir.mkdir(parents=True, exist_ok=True)

    catalog = load_catalog(paths.catalog_json)
    engine = ConnectionEngine(catalog.projects, config, curated_collections=catalog.collections)
    training = None
    if config.train_embeddings if train is None else train:
        training = asyncio.run(engine.train())

    outputs = {
        "related": output_dir / "related.csv",
        "collections": output_dir / "collections.json",
        "analytics": output_dir / "analytics.json",
        "features": output_dir / "features.csv",
        "metadata": output_dir / "metadata.json",
    }
    for fmt in SUPPORTED_FORMATS:
        outputs[f"graph_{fmt}"] = output_dir / f"graph.{fmt}"

    related_frame(engine, related_limit).to_csv(outputs["related"], index=False)
    collections = engine.generate_collections(include_curated=True)
    outputs["collections"].write_text(
        json.dumps([c.model_dump() for c in collections], indent=2), encoding="utf-8"
    )
    analytics = engine.network_analytics()
    outputs["analytics"].write_text(analytics.model_dump_json(indent=2), encoding="utf-8")
    outputs["features"].write_text(engine.export_features(), encoding="utf-8")
    for fmt in SUPPORTED_FORMATS:
        outputs[f"graph_{fmt}"].write_text(engine.export_graph(fmt), encoding="utf-8")

    metadata = {
        "catalog": str(paths.catalog_json),
        "n_projects": analytics.total_projects,
        "n_pairs": analytics.total_connections,
        "n_graph_edges": len(engine.graph.edges()),
        "n_collections": len(collections),
        "n_clusters": analytics.cluster_count,
        "average_similarity": analytics.average_similarity,
        "embedding_trained": engine.is_trained,
        "training_status": training.status if training else "not_requested",
    }
    outputs["metadata"].write_text(json.dumps(metadata, indent=2), encoding="utf-8")
    LOGGER.info("Wrote %d artifacts to %s", len(outputs), output_dir)
    return outputs


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Score a project catalog and export its connection network."
    )
    parser.add_argument("--catalog", type=str, default="data/catalog.json", help="Catalog JSON file.")
    parser.add_argument("--output-dir", type=str, default="output/ringgraph", help="Where to place generated artifacts.")
    parser.add_argument("--train", action="store_true", help="Train the autoencoder embedding before exporting.")
    parser.add_argument("--seed", type=int, default=None, help="Seed for the heuristic jitter.")
    parser.add_argument("--min-similarity", type=float, default=None, help="Override the graph edge threshold.")
    parser.add_argument("--max-connections", type=int, default=None, help="Override the per-project neighbor cap.")
    parser.add_argument("--related", type=int, default=5, help="How many related projects to list per project.")
    parser.add_argument("--verbose", action="store_true", help="Log at DEBUG level.")
    return parser.parse_args()


def main():
    args = _parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    paths = PipelinePaths(catalog_json=Path(args.catalog), output_dir=Path(args.output_dir))
    config = EngineConfig.from_env()
    if args.seed is not None:
        config.seed = args.seed
    if args.min_similarity is not None:
        config.graph.min_similarity_threshold = args.min_similarity
    if args.max_connections is not None:
        config.graph.max_connections = args.max_connections
    run_pipeline(paths, config, train=args.train or config.train_embeddings, related_limit=args.related)
    print(f"[ringgraph] Connection artifacts saved to: {paths.output_dir.resolve()}")


if __name__ == "__main__":
    main()
