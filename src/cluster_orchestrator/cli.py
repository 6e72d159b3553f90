"""
Command line entry point.

render-backup-pvc
Render the full backup volume claim from a values file.

simulate
Drive clusters from a json file against the in memory backend until they
converge, printing the final status of each one.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from cluster_orchestrator.control.mock import InMemoryControlPlane
from cluster_orchestrator.controller.factory import new_in_memory_reconciler
from cluster_orchestrator.core.errors import ClusterSourceError
from cluster_orchestrator.core.serialization import cluster_status_to_json
from cluster_orchestrator.events.audit import JsonlEventRecorder
from cluster_orchestrator.events.recorder import EventRecorder, LoggingEventRecorder
from cluster_orchestrator.logging_config import setup_logging
from cluster_orchestrator.runtime.worker import QueueDecision, ReconcileWorker, WorkerConfig
from cluster_orchestrator.source.static_source import StaticClusterSource
from cluster_orchestrator.templates.backup_pvc import dump_backup_pvc, load_backup_config, render_backup_pvc


LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def _render_backup_pvc(args: argparse.Namespace) -> int:
    config = load_backup_config(args.values)
    sys.stdout.write(dump_backup_pvc(render_backup_pvc(args.cluster, config, release=args.release)))
    return 0


def _simulate(args: argparse.Namespace) -> int:
    source = StaticClusterSource(path=args.clusters)
    try:
        clusters = source.fetch()
    except ClusterSourceError as exc:
        logging.getLogger(__name__).error("cannot load clusters: %s", exc)
        return 2

    recorder: EventRecorder = LoggingEventRecorder()
    if args.events is not None:
        recorder = JsonlEventRecorder(path=args.events)

    plane = InMemoryControlPlane(rollout_step=args.rollout_step)
    worker = ReconcileWorker(
        reconciler=new_in_memory_reconciler(plane, recorder),
        source=source,
        config=WorkerConfig(interval_seconds=0, max_passes=args.max_passes),
    )

    converged = True
    for cluster in clusters:
        results = worker.converge(cluster)
        if not results or results[-1].decision != QueueDecision.forget:
            converged = False
        report = cluster_status_to_json(cluster)
        report["passes"] = len(results)
        print(json.dumps(report, indent=2, sort_keys=True))

    return 0 if converged else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="cluster-orchestrator")
    parser.add_argument("--log-level", default="INFO", choices=LOG_LEVELS, type=str.upper)
    parser.add_argument("--log-file", type=Path, default=None)
    sub = parser.add_subparsers(dest="command", required=True)

    render = sub.add_parser("render-backup-pvc", help="render the backup volume claim")
    render.add_argument("values", type=Path)
    render.add_argument("--cluster", required=True)
    render.add_argument("--release", default=None)
    render.set_defaults(func=_render_backup_pvc)

    simulate = sub.add_parser("simulate", help="converge clusters against the in memory backend")
    simulate.add_argument("clusters", type=Path)
    simulate.add_argument("--max-passes", type=int, default=20)
    simulate.add_argument("--rollout-step", type=int, default=1)
    simulate.add_argument("--events", type=Path, default=None)
    simulate.set_defaults(func=_simulate)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(level=getattr(logging, args.log_level), log_file=args.log_file)
    return int(args.func(args))


if __name__ == "__main__":
    sys.exit(main())
