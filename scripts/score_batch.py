"""Score a JSON batch of subjects or organizations with the OCEAN engine.

Subjects file: ``{"<subject_id>": [{"rater_id": ..., "weight": ..., "items": [...] | null}, ...]}``
Organizations file: ``{"<organization_id>": [{"profile_id": ..., "facets": {...}, "team_id": ...}, ...]}``

Usage:
    python -m scripts.score_batch subjects responses.json [--concurrency 8]
    python -m scripts.score_batch orgs profiles.json [--teams]
"""
import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any

from ocean_engine.logging_setup import configure_logging
from ocean_engine.services.pipeline import BatchScoringService, RaterResponses


def load_json(path: str) -> dict[str, Any]:
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise SystemExit(f"{path}: expected a JSON object keyed by id")
    return data


async def cmd_subjects(args: argparse.Namespace) -> list[dict[str, Any]]:
    raw = load_json(args.path)
    subjects = {
        subject_id: [
            RaterResponses(
                rater_id=str(r["rater_id"]),
                weight=float(r.get("weight", 1.0)),
                items=r.get("items"),
            )
            for r in raters
        ]
        for subject_id, raters in raw.items()
    }
    service = BatchScoringService(concurrency=args.concurrency)
    results = await service.score_batch(subjects)
    return [
        {
            "subject_id": r.subject_id,
            "profile": r.profile.model_dump() if r.profile is not None else None,
            "patterns": r.patterns,
            "error": r.error,
        }
        for r in results
    ]


async def cmd_orgs(args: argparse.Namespace) -> list[dict[str, Any]]:
    organizations = load_json(args.path)
    service = BatchScoringService(concurrency=args.concurrency)
    results = await service.analyze_organizations(
        organizations, include_team_breakdown=args.teams
    )
    return [
        {
            "organization_id": r.organization_id,
            "profile": r.profile.model_dump() if r.profile is not None else None,
            "error": r.error,
        }
        for r in results
    ]


# ──────────────────────────────────────────────────────────────────────────────
# CLI entry point
# ──────────────────────────────────────────────────────────────────────────────

def main() -> None:
    parser = argparse.ArgumentParser(
        description="OCEAN batch scorer — subjects (360 scoring) or organizations (culture analysis).",
    )
    parser.add_argument("--log-level", type=str, default=None, help="Override LOG_LEVEL.")
    parser.add_argument(
        "--concurrency",
        type=int,
        default=None,
        help="Maximum members processed at once (default: BATCH_CONCURRENCY).",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available subcommands")

    subjects_parser = subparsers.add_parser("subjects", help="Score raters' raw responses per subject.")
    subjects_parser.add_argument("path", type=str, help="JSON file of subjects.")

    orgs_parser = subparsers.add_parser("orgs", help="Build organizational profiles.")
    orgs_parser.add_argument("path", type=str, help="JSON file of organizations.")
    orgs_parser.add_argument(
        "--teams",
        action="store_true",
        default=False,
        help="Include the per-team breakdown.",
    )

    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    configure_logging(args.log_level, stream=sys.stderr)

    if args.command == "subjects":
        output = asyncio.run(cmd_subjects(args))
    else:
        output = asyncio.run(cmd_orgs(args))

    print(json.dumps(output, indent=2, default=str))

    if any(entry["error"] for entry in output):
        sys.exit(2)


if __name__ == "__main__":
    main()
