#!/usr/bin/env python3
"""
acts_as_label entry point.

This script seeds label families, demonstrates lookups, or starts the
label lookup API server based on command line arguments.
"""

import argparse
import logging
import os
import sys

from acts_as_label.config import LabelConfig
from acts_as_label.db import create_store
from acts_as_label.errors import ActsAsLabelError
from acts_as_label.label_service import LabelService
from acts_as_label.logging_config import configure_logging
from acts_as_label.models import LabeledModel
from acts_as_label.registry import LabelRegistry
from acts_as_label.seed import load_seed_file
from acts_as_label.service import start_api

logger = logging.getLogger("acts_as_label.main")


class Framework(LabeledModel):
    """Example family with custom field names, used by the demo."""

    system_name: str
    name: str


def parse_args() -> argparse.Namespace:
    """
    Parse command line arguments.

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(description="acts_as_label lookup service")

    parser.add_argument("--config", help="Path to configuration file")

    parser.add_argument("--seed", help="Path to a YAML file of label families to seed")

    parser.add_argument(
        "--host",
        help="Host to bind to (default: api.host from the configuration)",
    )

    parser.add_argument(
        "--port",
        type=int,
        help="Port to bind to (default: api.port from the configuration)",
    )

    parser.add_argument(
        "--demo",
        action="store_true",
        help="Run a demonstration of label lookups and exit",
    )

    return parser.parse_args()


def run_demo(service: LabelService) -> None:
    """Run a demonstration of label lookups."""
    registry = service.registry

    registry.configure(
        Framework,
        system_label_field="system_name",
        label_field="name",
        default_code="ruby_on_rails",
    )
    service.seed(
        Framework,
        [
            {"system_name": "RUBY_ON_RAILS", "name": "Rails"},
            {"system_name": "django", "name": "Django"},
        ],
    )

    frameworks = registry.family(Framework)
    print(f"Default framework: {registry.default(Framework)}")
    print(f"frameworks.django: {frameworks.django} ({frameworks.django.to_symbol()})")
    print(f"frameworks['RUBY_ON_RAILS']: {frameworks['RUBY_ON_RAILS']}")
    print(f"frameworks.find('flask'): {frameworks.find('flask')}")


def main() -> None:
    """Main entry point for acts_as_label."""
    args = parse_args()

    try:
        LabelConfig.initialize(args.config)

        # Look for secrets file in standard location
        secrets_file = os.path.join(
            os.path.dirname(os.path.abspath(__file__)), ".secrets", "acts_as_label.yaml"
        )
        LabelConfig.load_from_secrets_file(secrets_file)

        configure_logging()

        registry = LabelRegistry(create_store())
        service = LabelService(registry)

        if args.seed:
            families = load_seed_file(service, args.seed)
            logger.info("Seeded families: %s", ", ".join(families))
    except ActsAsLabelError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if args.demo:
        run_demo(service)
        return

    host = args.host or LabelConfig.get("api.host", "127.0.0.1")
    port = args.port or int(LabelConfig.get("api.port", 8000))
    logger.info("Starting API server on %s:%s", host, port)

    try:
        start_api(registry, host=host, port=port)
    except KeyboardInterrupt:
        print("Service stopped")
        sys.exit(0)


if __name__ == "__main__":
    main()
