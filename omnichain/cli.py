#!/usr/bin/env python3
"""
Command line entry point for the omnichain operations tasks
"""

import argparse
import json
import logging
import os
import sys
from functools import partial
from typing import List, Optional

from .deploy import run_deploy
from .multi_network import execute_multi_network_task, parse_network_names
from .processing.pathways import build_oapp_config, write_oapp_config
from .tasks.erc20_roles import grant_roles, renounce_roles, transfer_admin_role
from .tasks.set_rate_limits import set_rate_limits
from .watcher import RateLimitWatcher

logger = logging.getLogger(__name__)

# Commands that may ask for confirmation run one network at a time
CONFIRMED_COMMANDS = ('renounce-roles', 'transfer-admin-role', 'deploy')


def setup_logging() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.FileHandler(os.getenv("LOG_FILE", "omnichain_ops.log")),
            logging.StreamHandler()
        ]
    )


def build_parser() -> argparse.ArgumentParser:
    # Accepted before or after the command, SUPPRESS keeps a subcommand from resetting a value given before it
    network_options = argparse.ArgumentParser(add_help=False)
    network_options.add_argument('--network', default=argparse.SUPPRESS,
                                 help='Network to run on when --networks is not given')
    network_options.add_argument('--networks', default=argparse.SUPPRESS,
                                 help='Comma-separated list of networks to run on')

    parser = argparse.ArgumentParser(prog='omnichain', description=__doc__, parents=[network_options])
    subparsers = parser.add_subparsers(dest='command', required=True)
    add_parser = partial(subparsers.add_parser, parents=[network_options])

    rate_limits = add_parser('set-rate-limits', help='Set configured rate limits for the contracts')
    rate_limits.add_argument('--dry-run', action='store_true', help='Only report mismatching rate limits')

    add_parser('grant-roles', help='Grant minter and burner roles to the mint-burn adapter')
    add_parser('renounce-roles', help='Renounce ERC20 minter, burner, and upgrader roles')
    add_parser('transfer-admin-role', help='Transfer ERC20 default admin role to owner')

    deploy = add_parser('deploy', help='Deploy contracts by tag')
    deploy.add_argument('--tags', required=True, help='Comma-separated deploy tags, run in order')

    wire = add_parser('wire-config', help='Generate the pathway wiring config')
    wire.add_argument('--output', help='Write the config to this JSON file instead of stdout')

    add_parser('watch', help='Periodically check rate limits and alert on drift')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging()

    if args.command == 'wire-config':
        if args.output:
            write_oapp_config(args.output)
            logger.info(f"Wiring config written to {args.output}")
        else:
            print(json.dumps(build_oapp_config(), indent=2))
        return 0

    network_names = parse_network_names(getattr(args, 'networks', None), getattr(args, 'network', None))
    if not network_names:
        logger.error("No network given, use --network or --networks")
        return 2

    if args.command == 'watch':
        RateLimitWatcher(network_names).run_forever()
        return 0

    if args.command == 'set-rate-limits':
        task = partial(set_rate_limits, dry_run=args.dry_run)
    elif args.command == 'grant-roles':
        task = grant_roles
    elif args.command == 'renounce-roles':
        task = renounce_roles
    elif args.command == 'transfer-admin-role':
        task = transfer_admin_role
    else:
        tags = [tag.strip() for tag in args.tags.split(',') if tag.strip()]
        task = partial(run_deploy, tags=tags)

    results = execute_multi_network_task(task, network_names, sequential=args.command in CONFIRMED_COMMANDS)
    if not results or not all(results.values()):
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
