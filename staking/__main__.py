"""Command line demo: print staking views for a mock Cosmos account."""
import argparse
import asyncio
import sys

import structlog

from config.logging import configure_logging
from config.settings import get_settings

from .mock import COSMOS, gen_account
from .types import DraftValidator, create_transaction
from .views import StakingViews

logger = structlog.get_logger()


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="stakeview delegation views demo")
    parser.add_argument("--seed", default="cosmos-1", help="Mock account seed")
    parser.add_argument("--query", default="", help="Validator search query")
    parser.add_argument("--mode", default=None, help="Delegation mapping mode, e.g. claimReward")
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL")
    return parser.parse_args(argv)


async def run(args) -> int:
    settings = get_settings().model_copy(update={"MOCK": True})
    views = StakingViews.create(COSMOS, settings=settings)

    await views.hydrate()
    await views.prepare()

    account = gen_account(args.seed)
    print(f"Account {account.id}")

    print("\nDelegations:")
    for d in views.map_delegations(account, args.mode):
        print(f"  #{d.rank:<3} {d.validator.name:<32} {d.formatted_amount:>16}  rewards {d.formatted_pending_rewards}")

    existing = [
        DraftValidator(address=d.validator_address, amount=d.amount)
        for d in account.cosmos_resources.delegations
    ]
    print("\nValidators:")
    for row in views.sorted_validators(args.query, existing_delegations=existing):
        marker = "*" if row.amount else " "
        print(f" {marker}#{row.rank:<3} {row.validator.name:<32} commission {row.validator.commission:.2%}")

    selector = views.select_delegation(account, create_transaction(account))
    selector.set_query(args.query)
    value = selector.value
    print(f"\nSelected: {value.validator.name if value else '-'}")
    return 0


def main(argv=None) -> int:
    args = parse_args(argv)
    configure_logging(args.log_level or get_settings().LOG_LEVEL, json_output=False)
    try:
        return asyncio.run(run(args))
    except KeyboardInterrupt:
        logger.info("demo_interrupted")
        return 1


if __name__ == "__main__":
    sys.exit(main())
