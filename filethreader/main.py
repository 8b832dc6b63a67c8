import argparse
import json
import logging

from filethreader.config import get_settings
from filethreader.database import build_session_factory
from filethreader.orchestrator import build_orchestrator
from filethreader.reporting import summarize
from filethreader.scheduler import start_scheduler
from filethreader.store import PersistenceGateway


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Ingest delimited user files concurrently")
    subparsers = parser.add_subparsers(dest="command", required=True)

    read_parser = subparsers.add_parser("read", help="parse files and print their records")
    read_parser.add_argument("paths", nargs="+", help="input files, plain or file: prefixed")

    persist_parser = subparsers.add_parser("persist", help="parse files and store their records")
    persist_parser.add_argument("paths", nargs="+", help="input files, plain or file: prefixed")

    subparsers.add_parser("list", help="print every stored record")

    schedule_parser = subparsers.add_parser("schedule", help="start daily ingest of the input directory")
    schedule_parser.add_argument("--run-now", action="store_true", help="also run once immediately")

    return parser.parse_args()


def main() -> None:
    args = parse_args()
    settings = get_settings()

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    # Read-only runs never touch the store.
    session_factory = build_session_factory(settings.database_url) if args.command != "read" else None
    if args.command == "list":
        for record in PersistenceGateway(session_factory).find_all():
            print(json.dumps(record.as_dict(), sort_keys=True))
        return

    orchestrator = build_orchestrator(settings, session_factory)
    if args.command == "schedule":
        start_scheduler(settings, orchestrator, run_now=args.run_now)
        return

    with orchestrator.pool:
        if args.command == "read":
            for record in orchestrator.ingest_read_only(args.paths):
                print(json.dumps(record.as_dict(), sort_keys=True))
            return

        statuses = orchestrator.ingest_and_persist(args.paths)

    for status in statuses:
        print(f"path={status.path} success={status.success}")
    summary = summarize(statuses)
    print(f"total={summary.total} succeeded={summary.succeeded} failed={summary.failed}")
    if summary.failed:
        raise SystemExit(1)


if __name__ == "__main__":
    main()
