import argparse
import logging
import os
import sys

project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
# add src root to search path so src import works
sys.path.insert(0, project_root)

from src.bridge.errors import UnitBridgeError
from src.bridge.operations import OperationsResponse, order_by_recency
from src.bridge.unit_bridge_api import UnitBridgeInfo
from src.consts import DEFAULT_NETWORK, NETWORKS
from src.table.export import export_filename, to_delimited_text

logging.basicConfig(
    format="%(asctime)s [%(levelname)s] %(message)s",
    level=logging.INFO,
)
logger = logging.getLogger(__name__)


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Export Unit bridge operations for an address to CSV")
    p.add_argument("--address", required=True, help="Address to query")
    p.add_argument("--network", choices=NETWORKS, default=DEFAULT_NETWORK)
    p.add_argument("--out", help="Output file (defaults to a timestamped name, '-' for stdout)")
    return p


def main(argv: list[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)

    try:
        body = UnitBridgeInfo(args.network).get_operations(args.address)
    except UnitBridgeError as e:
        logger.error(f'unable to fetch operations for {args.address}: {e}')
        return 1
    if not isinstance(body, dict):
        logger.error(f'unexpected response body for {args.address}: {body!r}')
        return 1

    ops = order_by_recency(OperationsResponse.from_dict(body).operations)
    text = to_delimited_text(ops)

    if args.out == '-':
        sys.stdout.write(text)
        return 0

    out = args.out or export_filename(args.address)
    with open(out, 'w', encoding='utf-8', newline='') as f:
        f.write(text)
    logger.info(f'wrote {len(ops)} operations to {out}')
    return 0


if __name__ == "__main__":
    sys.exit(main())
