"""
Usabilla API Command Line Interface.

Provides commands for signing requests, fetching resources and showing configuration.
"""

import argparse
import json
import logging
import os
import sys
from typing import Dict, List, Optional

from usabilla import config
from usabilla.client import UsabillaClient
from usabilla.exceptions import UsabillaError
from usabilla.resources import find_resource
from usabilla.signer import Credentials, Signer


def setup_logging(verbose: bool = False) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format='%(levelname)s: %(message)s'
    )


def parse_params(pairs: Optional[List[str]]) -> Dict[str, str]:
    """Turn repeated ``--param key=value`` arguments into a mapping."""
    params = {}
    for pair in pairs or []:
        key, sep, value = pair.partition('=')
        if not sep or not key:
            raise ValueError(f"Invalid parameter '{pair}', expected key=value")
        params[key] = value
    return params


def _credentials(args: argparse.Namespace) -> Optional[Credentials]:
    access_key = args.access_key or os.environ.get(config.ACCESS_KEY_ENV)
    secret_key = args.secret_key or os.environ.get(config.SECRET_KEY_ENV)

    if not access_key:
        print(f"Error: Missing access key. Set {config.ACCESS_KEY_ENV} or use --access-key", file=sys.stderr)
        return None

    if not secret_key:
        print(f"Error: Missing secret key. Set {config.SECRET_KEY_ENV} or use --secret-key", file=sys.stderr)
        return None

    return Credentials(access_key=access_key, secret_key=secret_key)


def cmd_sign(args: argparse.Namespace) -> int:
    """Sign a request and print the URL and headers without sending it."""
    credentials = _credentials(args)
    if credentials is None:
        return 1

    try:
        params = parse_params(args.param)
        signer = Signer(credentials, host=args.host, protocol=args.protocol)
        signed = signer.sign(args.path, id=args.id, params=params)
    except (ValueError, UsabillaError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps({"url": signed.url, "headers": signed.headers}, indent=2))
    else:
        print(f"GET {config.get_base_url(args.protocol, args.host)}{signed.url}")
        for name, value in signed.headers.items():
            print(f"{name}: {value}")

    return 0


def cmd_get(args: argparse.Namespace) -> int:
    """Fetch a resource by dotted name and print the JSON response."""
    credentials = _credentials(args)
    if credentials is None:
        return 1

    try:
        params = parse_params(args.param)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    with UsabillaClient(
        credentials.access_key,
        credentials.secret_key,
        host=args.host,
        protocol=args.protocol,
    ) as client:
        try:
            resource = find_resource(client.resources, args.resource)
        except KeyError:
            print(f"Error: Unknown resource '{args.resource}'", file=sys.stderr)
            return 1

        try:
            data = resource.get(id=args.id, params=params)
        except UsabillaError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

    print(json.dumps(data, indent=2))
    return 0


def cmd_config(args: argparse.Namespace) -> int:
    """Print the effective configuration."""
    for key, value in config.describe_config().items():
        print(f"{key}: {value}")
    return 0


def _add_credential_args(p: argparse.ArgumentParser) -> None:
    p.add_argument('--access-key', help=f'Access key (default: ${config.ACCESS_KEY_ENV})')
    p.add_argument('--secret-key', help=f'Secret key (default: ${config.SECRET_KEY_ENV})')
    p.add_argument('--host', default=config.API_HOST, help='API host')
    p.add_argument('--protocol', default=config.API_PROTOCOL, help='URL scheme')
    p.add_argument('--id', help='Resource id, "*" for all')
    p.add_argument('--param', action='append', metavar='KEY=VALUE', help='Query parameter (repeatable)')


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        prog='usabilla',
        description='Usabilla API CLI - signed access to the Usabilla public API'
    )
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose output')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # sign command
    p_sign = subparsers.add_parser('sign', help='Sign a request without sending it')
    p_sign.add_argument('path', help='Path template, e.g. /live/websites/button/:id/feedback')
    p_sign.add_argument('--json', action='store_true', help='Output as JSON')
    _add_credential_args(p_sign)

    # get command
    p_get = subparsers.add_parser('get', help='Fetch a resource')
    p_get.add_argument('resource', help='Dotted resource name, e.g. websites.buttons.feedback')
    _add_credential_args(p_get)

    # config command
    subparsers.add_parser('config', help='Show the effective configuration')

    args = parser.parse_args(argv)

    setup_logging(args.verbose)

    if args.command == 'sign':
        return cmd_sign(args)
    elif args.command == 'get':
        return cmd_get(args)
    elif args.command == 'config':
        return cmd_config(args)
    else:
        parser.print_help()
        return 0


if __name__ == '__main__':
    sys.exit(main())
