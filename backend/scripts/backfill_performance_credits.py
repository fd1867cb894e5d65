from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

backend_dir = Path(__file__).resolve().parents[1]
if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))

from mockera.core.config import settings
from mockera.db.session import SessionLocal
from mockera.services.backfill import backfill_credits


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Recompute performance credits and streaks from submitted attempts.")
    parser.add_argument("--dry-run", action="store_true", help="compute and report without writing")
    parser.add_argument("--chunk-size", type=int, default=int(settings.batch_chunk_size))
    parser.add_argument(
        "--ungated",
        action="store_true",
        help="pay the speed bonus regardless of overall attempt accuracy",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s %(message)s")

    kwargs = {"accuracy_gate": None} if args.ungated else {}
    with SessionLocal() as db:
        out = backfill_credits(db, chunk_size=args.chunk_size, dry_run=args.dry_run, **kwargs)

    print(json.dumps(out, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
