#!/usr/bin/env python3
"""
Content Registry - operation replay runner

Replays a YAML script of registry operations against a fresh (or
checkpoint-restored) registry and prints one JSON result per step.

Usage:
    python run.py --ops ops.yaml                          # Replay with config/config.yaml
    python run.py --ops ops.yaml --checkpoint state.json  # Resume from a checkpoint
    python run.py --ops ops.yaml --save-checkpoint        # Save state afterwards

Script format:
    - caller: alice
      height: 10            # optional, advances the block height first
      method: create_record
      args: {title: "Doc A", size: 100, summary: "s", labels: ["x"]}
    - caller: bob
      method: fetch_details
      args: [1]
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, TypedDict

import yaml
from dotenv import load_dotenv

# Load environment variables (CONTENT_REGISTRY_CONFIG may come from .env)
load_dotenv()

from src.config import get_validated_config, load_config
from src.registry import (
    BlockHeight,
    EventLogger,
    RegistryService,
    restore_from_checkpoint,
    save_checkpoint,
)


class OperationStep(TypedDict, total=False):
    """One step of a replay script."""

    caller: str
    method: str
    args: list[Any] | dict[str, Any]
    height: int


def load_operations(ops_path: str) -> list[OperationStep]:
    """Load and shape-check a replay script."""
    with open(ops_path) as f:
        loaded: Any = yaml.safe_load(f) or []
    if not isinstance(loaded, list):
        raise ValueError(f"{ops_path} must contain a list of steps")
    steps: list[OperationStep] = []
    for index, step in enumerate(loaded):
        if not isinstance(step, dict) or "method" not in step or "caller" not in step:
            raise ValueError(f"Step {index} needs at least 'caller' and 'method'")
        steps.append(step)  # type: ignore[arg-type]
    return steps


def replay(
    service: RegistryService,
    height: BlockHeight,
    steps: list[OperationStep],
) -> list[dict[str, Any]]:
    """Run each step through service.invoke and collect the results."""
    results: list[dict[str, Any]] = []
    for step in steps:
        if "height" in step:
            height.set(int(step["height"]))
        result = service.invoke(step["method"], step.get("args"), step["caller"])
        results.append({"step": step, "result": result})
    return results


def main() -> int:
    parser = argparse.ArgumentParser(description="Replay content registry operations")
    parser.add_argument("--ops", required=True, help="YAML file with the steps to replay")
    parser.add_argument("--config", default=None, help="Path to config YAML")
    parser.add_argument("--checkpoint", default=None, help="Checkpoint to restore and save to")
    parser.add_argument(
        "--save-checkpoint",
        action="store_true",
        help="Write registry state to the checkpoint file after replay",
    )
    parser.add_argument("--events", default=None, help="JSONL event log path")
    parser.add_argument("--quiet", action="store_true", help="Only print the final metrics")
    args = parser.parse_args()

    load_config(args.config)
    config = get_validated_config()
    logging.basicConfig(
        level=getattr(logging, config.logging.level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    height = BlockHeight()
    service = RegistryService(
        height_source=height,
        event_logger=EventLogger(args.events),
    )

    try:
        if restore_from_checkpoint(service, args.checkpoint, height):
            print(
                f"Restored checkpoint, sequence at {service.sequence}, height at {height.current()}",
                file=sys.stderr,
            )
    except (OSError, ValueError) as e:
        print(f"Cannot restore checkpoint: {e}", file=sys.stderr)
        return 2

    try:
        steps = load_operations(args.ops)
    except (OSError, ValueError, yaml.YAMLError) as e:
        print(f"Cannot load operations: {e}", file=sys.stderr)
        return 2

    try:
        results = replay(service, height, steps)
    except ValueError as e:
        print(f"Replay aborted: {e}", file=sys.stderr)
        return 2
    if not args.quiet:
        for entry in results:
            print(json.dumps(entry))

    if args.save_checkpoint:
        path = save_checkpoint(service, args.checkpoint, reason="replay_complete")
        print(f"Checkpoint saved to {Path(path)}", file=sys.stderr)

    print(json.dumps(service.fetch_metrics()))
    failures = sum(1 for entry in results if not entry["result"].get("success"))
    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
