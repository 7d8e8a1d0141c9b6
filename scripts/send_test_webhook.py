#!/usr/bin/env python
"""
CLI script to send a signed test webhook to a local endpoint.

Usage:
    python scripts/send_test_webhook.py customer.created [--url http://localhost:5000/webhooks/stripe]
    python scripts/send_test_webhook.py --payload-file event.json --secret whsec_...

The secret defaults to STRIPE_WEBHOOK_SECRET (a .env file is honoured).
"""
import argparse
import json
import os
import sys
import time

import requests

# Add parent directory to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from pin_stripe.config import ConfigurationError, StripeConfig, validate_webhook_secret
from pin_stripe.events.sender import encode_payload, send_signed_event
from pin_stripe.events.signing import sign
from pin_stripe.testing import fixtures


def build_parser():
    parser = argparse.ArgumentParser(description='Send a signed Stripe webhook event')
    parser.add_argument('event_type', nargs='?', help='Event type to build from fixtures (e.g. invoice.paid)')
    parser.add_argument('--payload-file', help='JSON file sent verbatim instead of a fixture')
    parser.add_argument('--url', default='http://localhost:5000/webhooks/stripe', help='Webhook endpoint')
    parser.add_argument('--secret', help='Webhook signing secret (defaults to STRIPE_WEBHOOK_SECRET)')
    parser.add_argument('--timestamp', type=int, help='Unix timestamp to sign with')
    parser.add_argument('--timeout', type=int, default=10, help='HTTP request timeout in seconds')
    parser.add_argument('--print-only', action='store_true', help='Print the signature header without sending')
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    if args.payload_file:
        with open(args.payload_file, 'rb') as fh:
            body = fh.read()
    elif args.event_type:
        body = encode_payload(fixtures.load(args.event_type))
    else:
        print("Either an event type or --payload-file is required", file=sys.stderr)
        return 2

    config = StripeConfig.from_env()
    try:
        secret = validate_webhook_secret(args.secret or config.webhook_secret)
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    if args.print_only:
        timestamp = args.timestamp if args.timestamp is not None else int(time.time())
        print(f"{config.signature_header}: {sign(body, timestamp, secret)}")
        print(json.dumps(json.loads(body), indent=2))
        return 0

    try:
        response = send_signed_event(
            args.url,
            body,
            secret,
            timeout=args.timeout,
            timestamp=args.timestamp,
            header=config.signature_header,
        )
    except requests.exceptions.RequestException as e:
        print(f"Delivery failed: {e}", file=sys.stderr)
        return 1

    print(f"HTTP {response.status_code} {response.text!r}")
    return 0 if 200 <= response.status_code < 300 else 1


if __name__ == '__main__':
    sys.exit(main())
