"""Main entry point for the CQRS contract generator pipeline."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from cqrsgen.config import GeneratorOptions
from cqrsgen.emitter.artifact_planner import build_plan
from cqrsgen.emitter.emission_policy import plan_tasks
from cqrsgen.emitter.writer import Renderer, write_plan
from cqrsgen.errors import GenerationError, SchemaFormatError
from cqrsgen.model.ir import RequestKind, WritePolicy
from cqrsgen.parser.schema_loader import load_document


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cqrsgen",
        description="Generate CQRS commands, queries, handlers and DTOs from API descriptors.",
    )
    parser.add_argument("descriptors", type=Path, help="Path to the descriptor document (JSON)")
    parser.add_argument("-o", "--output", type=Path, help="Output root directory")
    parser.add_argument("--config", type=Path, help="JSON file with generator options")
    parser.add_argument("--package-name", help="Root namespace of the generated code")
    parser.add_argument("--generated-folder", help="Folder for regenerated artifacts")
    parser.add_argument("--implementation-folder", help="Folder for handlers when --split-contract is set")
    parser.add_argument("--templates", type=Path, help="Directory with the artifact templates")
    parser.add_argument("--extension", help="File extension of generated files (default .cs)")
    parser.add_argument("--validators", action="store_true", default=None, help="Generate a validator per DTO")
    parser.add_argument("--records", action="store_true", default=None, help="Emit records instead of classes")
    parser.add_argument("--all-models", action="store_true", default=None,
                        help="Generate DTOs for every model, not only reachable ones")
    parser.add_argument("--split-contract", action="store_true", default=None,
                        help="Place handlers in the implementation folder")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every generated file")
    return parser


def resolve_options(args: argparse.Namespace) -> GeneratorOptions:
    """Config file first, then explicit CLI flags on top."""
    data: dict = {}
    if args.config:
        try:
            data = json.loads(args.config.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise SchemaFormatError(f"{args.config}: invalid JSON: {e}") from e
        if not isinstance(data, dict):
            raise SchemaFormatError(f"{args.config}: options must be a JSON object")

    overrides = {
        "output_dir": args.output,
        "package_name": args.package_name,
        "generated_folder": args.generated_folder,
        "implementation_folder": args.implementation_folder,
        "templates_dir": args.templates,
        "file_extension": args.extension,
        "use_validators": args.validators,
        "use_records": args.records,
        "include_all_models": args.all_models,
        "split_contract": args.split_contract,
    }
    data.update({k: v for k, v in overrides.items() if v is not None})
    return GeneratorOptions.from_mapping(data)


def run(args: argparse.Namespace) -> int:
    options = resolve_options(args)

    # Stage 1: Load descriptors
    print("Stage 1: Loading descriptors...")
    document = load_document(args.descriptors)
    print(f"  Loaded {len(document.operations)} operations, {len(document.models)} models\n")

    # Stage 2: Derive the contract
    print("Stage 2: Deriving commands, queries and DTOs...")
    plan = build_plan(document, options)
    commands = sum(1 for r in plan.requests if r.kind is RequestKind.COMMAND)
    print(
        f"  Planned {commands} commands, {len(plan.requests) - commands} queries, "
        f"{len(plan.dtos)} DTOs, {len(plan.validators)} validators\n"
    )

    # Stage 3: Assign write policies
    print("Stage 3: Assigning write policies...")
    tasks = plan_tasks(plan, options)
    write_once = sum(1 for t in tasks if t.write_policy is WritePolicy.WRITE_ONCE)
    print(f"  {len(tasks)} artifacts, {write_once} write-once\n")

    # Stage 4: Render and write
    print("Stage 4: Writing files...")
    report = write_plan(tasks, options.output_dir, Renderer(options.templates_dir))
    print(
        f"  Wrote {len(report.written)}, skipped {len(report.skipped)} existing handlers, "
        f"{len(report.failed)} failed\n"
    )

    if not report.ok:
        for path, reason in report.failed:
            print(f"  FAILED {path}: {reason}", file=sys.stderr)
        return 1
    print(f"Done! Output in {options.output_dir}")
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    print("=== CQRS Contract Generator ===\n")
    try:
        return run(args)
    except (GenerationError, OSError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
