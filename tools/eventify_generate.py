from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

# ---- sys.path bootstrap (Windows-friendly) ----
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))
# ---------------------------------------------

from eventify.core.config import load_config  # noqa: E402
from eventify.core.errors import EventifyError  # noqa: E402
from eventify.core.schema_loader import load_schema  # noqa: E402
from eventify.main import run_generation  # noqa: E402


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Generate the eventify bundle from a data model")
    ap.add_argument("--schema", required=True, help="Schema file (.prisma, .yaml or .json)")
    ap.add_argument("--config", default=None, help="Generator config file (YAML or JSON)")
    ap.add_argument("--out-dir", default=None, help="Override outDir from the config")
    ap.add_argument("-v", "--verbose", action="store_true")
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_config(Path(args.config) if args.config else None)
        if args.out_dir:
            config = config.model_copy(update={"out_dir": args.out_dir})
        schema = load_schema(Path(args.schema))
        run_generation(schema, config)
    except (EventifyError, OSError, ValueError) as exc:
        logging.getLogger("eventify.generator").error("%s", exc)
        return 1

    print(f"eventify bundle generated in {config.out_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
