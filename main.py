#!/usr/bin/env python
"""CLI for the evidence-ledger ingestion and scoring pipeline."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, field_validator, model_validator

from evidence_ledger.config import create_from_config, get_default_config_path, load_config
from evidence_ledger.pipeline import load_records

logger = logging.getLogger(__name__)


class CLIArgs(BaseModel):
    """Validated CLI arguments."""

    command: Literal["ingest", "ingest-records", "score", "recategorize"]
    organization_id: str | None = None
    records_path: Path | None = None
    name: str | None = None
    all: bool = False
    dry_run: bool = False
    config: Path
    log: bool = False
    log_dir: str = "logs"

    @field_validator("config")
    @classmethod
    def config_must_exist(cls, v: Path) -> Path:
        if not v.exists():
            raise ValueError(f"Config file not found: {v}")
        return v

    @model_validator(mode="after")
    def organization_required(self) -> "CLIArgs":
        if self.command == "ingest" and not self.organization_id:
            raise ValueError("ingest requires an organization id")
        if self.command == "score" and not (self.organization_id or self.all):
            raise ValueError("score requires an organization id or --all")
        if self.command == "ingest-records":
            if not (self.records_path and self.records_path.exists()):
                raise ValueError(f"Records file not found: {self.records_path}")
        return self


async def run(args: CLIArgs) -> None:
    """Execute one command with the given configuration.

    Args:
        args: Validated CLI arguments.
    """
    config = load_config(args.config)
    components = create_from_config(
        config,
        log_override=args.log if args.log else None,
        log_dir_override=args.log_dir if args.log_dir != "logs" else None,
    )
    store = components.store

    logger.info(f"Config: {args.config}")

    if args.command == "ingest":
        assert args.organization_id is not None
        name = args.name or store.organization_name(args.organization_id)
        if not name:
            raise ValueError(f"No name known for {args.organization_id}; pass --name")
        if args.name:
            store.add_organization(args.organization_id, args.name)
        logger.info(f"Ingesting news for: {name}")

        report = await components.ingestion.run(args.organization_id, name, dry_run=args.dry_run)

        logger.info("\n--- Providers ---")
        for status in report.provider_status:
            line = f"{status.name}: {status.state} ({status.fetched} fetched)"
            if status.error:
                line += f" - {status.error}"
            logger.info(line)
        logger.info("\n--- Summary ---")
        logger.info(f"Scanned: {report.scanned}")
        logger.info(f"Inserted: {report.inserted}")
        logger.info(f"Merged: {report.merged}")
        logger.info(f"Skipped: {report.skipped}")
        logger.info(f"Rejected: {report.rejected}")
        if report.job_key:
            logger.info(f"Notification job: {report.job_key}")

    elif args.command == "ingest-records":
        assert args.records_path is not None
        entries = load_records(args.records_path)
        logger.info(f"Recording {len(entries)} regulator records from {args.records_path}")

        records_report = await components.records.run(entries, dry_run=args.dry_run)

        logger.info("\n--- Summary ---")
        logger.info(f"Processed: {records_report.processed}")
        logger.info(f"Inserted: {records_report.inserted}")
        logger.info(f"Upgraded: {records_report.upgraded}")
        logger.info(f"Skipped: {records_report.skipped}")
        logger.info(f"Errors: {records_report.errors}")
        for key in records_report.job_keys:
            logger.info(f"Notification job: {key}")

    elif args.command == "score":
        if args.all:
            batch = await components.scoring.score_batch()
            logger.info(f"Scored {batch.processed} organizations")
            for a in batch.anomalies:
                logger.info(f"Anomaly: {a.organization_id} {a.category} {a.delta:+d}")
            for error in batch.errors:
                logger.info(f"Error: {error}")
        else:
            assert args.organization_id is not None
            score = await components.scoring.score(args.organization_id)
            for category, item in score.breakdown.items():
                logger.info(
                    f"{category}: {item.value} (base {item.base}, delta {item.window_delta:+d}, "
                    f"confidence {item.confidence}) - {item.base_reason}"
                )

    else:
        result = await components.recategorizer.run(args.organization_id, dry_run=args.dry_run)
        logger.info(f"Processed: {result.processed}")
        logger.info(f"Changed to positive: {result.changed_to_positive}")
        logger.info(f"Changed to negative: {result.changed_to_negative}")
        logger.info(f"Remained mixed: {result.remained_mixed}")
        logger.info(f"Errors: {result.errors}")

    if not args.dry_run:
        path = store.save(Path(config.store.snapshot_path))
        logger.info(f"\nStore written to: {path}")

    if components.run_logger and components.run_logger.last_log_path:
        logger.info(f"Run log written to: {components.run_logger.last_log_path}")


def main() -> None:
    """Entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="Ingest, corroborate and score evidence about organizations."
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        help="Path to YAML config file (default: configs/default.yaml)",
    )
    parser.add_argument(
        "--log",
        action="store_true",
        default=False,
        help="Enable intermediate pipeline logging to JSON file",
    )
    parser.add_argument(
        "--log-dir",
        type=str,
        default="logs",
        help="Directory for log files (default: logs/)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    ingest = subparsers.add_parser("ingest", help="Fetch and ingest news for one organization")
    ingest.add_argument("organization_id", help="Organization id")
    ingest.add_argument("--name", help="Organization name used in provider queries")
    ingest.add_argument("--dry-run", action="store_true", help="Decide but do not write")

    records = subparsers.add_parser(
        "ingest-records", help="Record regulator enforcement records as official events"
    )
    records.add_argument("records_path", type=Path, help="YAML file with a records list")
    records.add_argument("--dry-run", action="store_true", help="Decide but do not write")

    score = subparsers.add_parser("score", help="Recompute baseline scores")
    score.add_argument("organization_id", nargs="?", help="Organization id")
    score.add_argument("--all", action="store_true", help="Score every known organization")

    recategorize = subparsers.add_parser("recategorize", help="Reclassify stored events")
    recategorize.add_argument("organization_id", nargs="?", help="Restrict to one organization")
    recategorize.add_argument("--dry-run", action="store_true", help="Decide but do not write")

    logging.basicConfig(level=logging.INFO, format="%(message)s")

    ns = parser.parse_args()
    config_path: Path = ns.config if ns.config else get_default_config_path()

    try:
        args = CLIArgs(
            command=ns.command,
            organization_id=getattr(ns, "organization_id", None),
            records_path=getattr(ns, "records_path", None),
            name=getattr(ns, "name", None),
            all=getattr(ns, "all", False),
            dry_run=getattr(ns, "dry_run", False),
            config=config_path,
            log=ns.log,
            log_dir=ns.log_dir,
        )
    except Exception as e:
        logger.error(str(e))
        sys.exit(1)

    try:
        asyncio.run(run(args))
    except KeyboardInterrupt:
        sys.exit(130)
    except ValueError as e:
        logger.error(str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
