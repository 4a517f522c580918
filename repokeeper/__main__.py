"""
RepoKeeper - automated maintenance for GitHub repositories.
"""
import argparse
import asyncio
import logging
import os
import sys
from typing import List, Optional

from dotenv import load_dotenv

from .ai_agent.agent import AIAgent
from .ai_agent.health import HealthCache, HealthChecker
from .ai_agent.providers import build_providers
from .ai_agent.selector import ProviderSelector
from .config import Settings
from .github.api import GitHubAPI
from .notify import build_notifiers, notify_all
from .reports.generator import ReportFormat, ReportGenerator
from .sanitize.engine import SanitizationPolicyEngine
from .sanitize.rules import RepoConfig, Rules, load_repo_configs
from .service import MaintenanceService

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description='Clean up and assess GitHub repositories.')

    github_group = parser.add_argument_group('GitHub Options')
    github_group.add_argument('--repo', action='append', default=[],
                              help='Repository to maintain (format: owner/name), may be repeated')
    github_group.add_argument('--rules', help='YAML file with repositories and their cleanup rules')
    github_group.add_argument('--token', help='GitHub personal access token (default: GITHUB_TOKEN env var)')

    run_group = parser.add_argument_group('Run Options')
    run_group.add_argument('--live', action='store_true',
                           help='Actually delete resources (default: dry run)')
    run_group.add_argument('--no-ai', action='store_true', help='Skip the AI assessment')
    run_group.add_argument('--max-workers', type=int, default=None,
                           help='Run sanitization stages in parallel')

    output_group = parser.add_argument_group('Output Options')
    output_group.add_argument('-o', '--output-dir', default=None,
                              help='Output directory for reports (default: REPORT_DIR)')
    output_group.add_argument('--format', default=ReportFormat.MARKDOWN.value,
                              choices=[f.value for f in ReportFormat],
                              help='Report format (default: markdown)')

    other_group = parser.add_argument_group('Other Options')
    other_group.add_argument('-v', '--verbose', action='store_true', help='Enable verbose output')
    other_group.add_argument('--debug', action='store_true', help='Enable debug output')
    other_group.add_argument('--version', action='version', version='%(prog)s 0.1.0')

    return parser.parse_args(argv)


def configure_logging(verbose: bool = False, debug: bool = False):
    """Configure logging based on verbosity level."""
    level = logging.DEBUG if debug else (logging.INFO if verbose else logging.WARNING)
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(),
            logging.FileHandler('repokeeper.log')
        ]
    )


def get_github_token(token: Optional[str], settings: Settings) -> str:
    """Get GitHub token from args, settings or environment."""
    if token:
        return token

    token = settings.GITHUB_TOKEN or os.getenv('GITHUB_TOKEN')
    if not token:
        logger.error("GitHub token not provided. Use --token or set GITHUB_TOKEN environment variable.")
        sys.exit(1)

    return token


def resolve_repos(args) -> List[RepoConfig]:
    """Collect repositories from --rules and --repo."""
    configs = load_repo_configs(args.rules) if args.rules else []
    for full_name in args.repo:
        if '/' not in full_name:
            raise ValueError(f"Repository must be in owner/name format: {full_name}")
        owner, name = full_name.split('/', 1)
        configs.append(RepoConfig(owner=owner, name=name, rules=Rules()))
    return configs


async def run(args, settings: Settings) -> int:
    token = get_github_token(args.token, settings)

    try:
        repos = resolve_repos(args)
    except ValueError as e:
        logger.error(str(e))
        return 2
    if not repos:
        logger.error("No repositories given. Use --repo owner/name or --rules FILE.")
        return 2

    api = GitHubAPI(token)
    agent = None
    if not args.no_ai:
        checker = HealthChecker(
            HealthCache(ttl=settings.HEALTH_CACHE_TTL),
            timeout=settings.HEALTH_CHECK_TIMEOUT
        )
        agent = AIAgent(build_providers(settings), ProviderSelector(checker))

    generator = ReportGenerator(
        output_dir=args.output_dir or settings.REPORT_DIR,
        format=ReportFormat(args.format)
    )
    dry_run = settings.DRY_RUN and not args.live
    max_workers = args.max_workers or settings.SANITIZE_MAX_WORKERS

    notifiers = build_notifiers(settings)

    failed = []
    for cfg in repos:
        try:
            engine = SanitizationPolicyEngine(api, cfg.rules, dry_run=dry_run, max_workers=max_workers)
            service = MaintenanceService(api, engine, agent)
            report = await service.run(cfg.owner, cfg.name)
            generator.save(report)
            print(generator.render(report))
        except Exception:
            logger.exception("Error maintaining repository %s", cfg.full_name)
            failed.append(cfg.full_name)
            continue

        title = f"Repo sanitize: {cfg.full_name} (dry_run={dry_run})"
        notify_all(notifiers, title, generator.to_markdown(report))

    if failed:
        logger.error(f"{len(failed)} of {len(repos)} repositories failed: {', '.join(failed)}")
        return 1
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    # Load environment variables from .env file
    load_dotenv()
    args = parse_args(argv)
    configure_logging(args.verbose, args.debug)
    return asyncio.run(run(args, Settings()))


if __name__ == '__main__':
    sys.exit(main())
