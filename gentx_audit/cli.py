"""Command line entry point.

Usage:
    gentx-audit [--config gentx-audit.yaml] [--repository owner/name] [--format json]
    python -m gentx_audit [options]
"""

import argparse
import asyncio
import logging
import sys
from collections.abc import Sequence
from datetime import timedelta

from .config import Config, ConfigurationError, SystemConfig, load_config
from .github import GitHubClient, GitHubClientConfig, GitHubError, GitHubRateLimitError
from .github.auth import auth_from_token
from .submissions import GenesisReport, GenesisSubmissionPipeline, render_json, render_text
from .transactions import AminoJSONCodec, TransactionCodec, TransactionError

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_RATE_LIMITED = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gentx-audit",
        description="Validate genesis submissions posted as pull requests "
        "and report proposed stake allocations.",
    )
    parser.add_argument("--config", help="Configuration file path")
    parser.add_argument("--repository", help="Coordination repository (owner/name)")
    parser.add_argument("--label", help="Label marking genesis submissions")
    parser.add_argument(
        "--concurrency",
        type=int,
        help="Candidates validated at once (default 1, sequential)",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        type=str.upper,
        help="Log level",
    )
    parser.add_argument(
        "--format", choices=["text", "json"], default="text", help="Report format"
    )
    return parser


def configure_logging(system: SystemConfig) -> None:
    logging.basicConfig(
        level=getattr(logging, system.log_level.value),
        format=system.log_format,
        stream=sys.stderr,
    )


def client_config_from(config: Config) -> GitHubClientConfig:
    github = config.github
    return GitHubClientConfig(
        base_url=github.base_url,
        timeout=github.timeout,
        max_retries=github.max_retries,
        retry_backoff_factor=github.retry_backoff_factor,
        user_agent=github.user_agent,
        token_placement=github.token_placement,
        rate_limit_documentation_urls=tuple(github.rate_limit_documentation_urls),
    )


async def run_audit(
    config: Config, codec: TransactionCodec | None = None
) -> GenesisReport:
    """Run the pipeline once against the configured repository."""
    auth = auth_from_token(config.github.access_token)
    async with GitHubClient(auth, client_config_from(config)) as client:
        pipeline = GenesisSubmissionPipeline(client, codec or AminoJSONCodec(), config)
        return await pipeline.run()


def format_wait(seconds: float | None) -> str:
    if seconds is None:
        return "unknown"
    return str(timedelta(seconds=round(seconds)))


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    overrides = {
        "system": {"log_level": args.log_level},
        "github": {"repository": args.repository},
        "submissions": {"label": args.label, "max_concurrency": args.concurrency},
    }
    try:
        config = load_config(args.config, overrides=overrides)
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_FAILURE

    configure_logging(config.system)

    try:
        report = asyncio.run(run_audit(config))
    except GitHubRateLimitError as e:
        print(f"time till rate limit reset {format_wait(e.seconds_until_reset)}")
        return EXIT_RATE_LIMITED
    except (GitHubError, TransactionError) as e:
        logger.error(f"Audit aborted: {e}", exc_info=True)
        return EXIT_FAILURE

    if args.format == "json":
        print(render_json(report))
    else:
        for line in render_text(report):
            print(line)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
