#!/usr/bin/env python3
"""
Main entry point for the ComfyUI provisioner.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Callable, List, Optional
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

from src.core.artifact_manager import ArtifactManager
from src.core.command_runner import CommandRunner
from src.core.context import ExecutionContext
from src.core.orchestrator import ProvisioningOrchestrator
from src.models.provisioning import ProvisioningResult
from src.utils.logging import setup_root_logger
from src.utils.prompt import ConfirmationGate
from config.settings import Settings


def parse_arguments(argv: Optional[List[str]] = None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Provision an Ubuntu GPU host for ComfyUI"
    )

    parser.add_argument(
        "--config",
        type=Path,
        help="Path to configuration file (JSON format)"
    )

    parser.add_argument(
        "-y", "--assume-yes",
        action="store_true",
        help="Continue without prompting when VRAM or memory is below the recommendation"
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Log package, clone and download commands without running them"
    )

    parser.add_argument(
        "--workdir",
        type=Path,
        help="Directory ComfyUI is cloned into (default: current directory)"
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)"
    )

    parser.add_argument(
        "--no-sudo",
        action="store_true",
        help="Never prefix privileged commands with sudo"
    )

    return parser.parse_args(argv)


def load_config(args) -> Settings:
    """Load configuration from file, environment and command line."""
    config_data = {}
    if args.config:
        if not args.config.exists():
            raise ValueError(f"Configuration file not found: {args.config}")
        with open(args.config) as f:
            config_data = json.load(f)

    # Override with command line args
    if args.assume_yes:
        config_data["assume_yes"] = True
    if args.dry_run:
        config_data["dry_run"] = True
    if args.no_sudo:
        config_data["use_sudo"] = False
    if args.workdir:
        config_data["workdir"] = str(args.workdir)
    if args.log_level:
        config_data.setdefault("logging", {})["level"] = args.log_level

    return Settings(**config_data)


def provision(settings: Settings,
              runner: Optional[CommandRunner] = None,
              input_fn: Callable[[str], str] = input) -> ProvisioningResult:
    """
    Run every provisioning stage with the given settings.

    Args:
        settings: Loaded settings
        runner: Command runner; a real one is built from settings if omitted
        input_fn: Source of answers for the confirmation prompts

    Returns:
        Provisioning result
    """
    if runner is None:
        runner = CommandRunner(dry_run=settings.dry_run, use_sudo=settings.use_sudo)
    gate = ConfirmationGate(assume_yes=settings.assume_yes, input_fn=input_fn)
    ctx = ExecutionContext.create(settings, runner, gate)

    artifact_manager = None
    if settings.artifacts.enabled:
        artifact_manager = ArtifactManager(base_path=settings.artifacts.base_path)

    orchestrator = ProvisioningOrchestrator(ctx, artifact_manager=artifact_manager)
    return orchestrator.run()


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_arguments(argv)
    logger = logging.getLogger(__name__)

    try:
        settings = load_config(args)
    except (ValueError, OSError) as e:
        setup_root_logger(None, args.log_level or "INFO")
        logger.error(f"Invalid configuration: {e}")
        return 1

    log_config = settings.logging
    setup_root_logger(
        log_config.file_path,
        log_config.level,
        format_string=log_config.format,
        max_file_size_mb=log_config.max_file_size_mb,
        backup_count=log_config.backup_count
    )

    logger.info("Starting ComfyUI provisioning")
    logger.info(f"Arguments: {vars(args)}")

    try:
        result = provision(settings)
    except KeyboardInterrupt:
        logger.error("Interrupted by operator")
        return 1
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        return 1

    # Print summary
    logger.info("=" * 60)
    logger.info("SUMMARY")
    logger.info("=" * 60)
    for stage in result.stages:
        logger.info(f"{stage.name:<10} {stage.status.value}")
    for warning in result.warnings:
        logger.info(f"Warning: {warning}")
    if result.error:
        logger.info(f"Error: {result.error}")
    logger.info(f"Duration: {result.duration_seconds:.2f} seconds")
    logger.info("=" * 60)

    if result.success and result.app_dir:
        logger.info(
            f"Setup complete! Activate the virtual environment with "
            f"'. {result.app_dir}/{settings.runtime.venv_name}/bin/activate' to use ComfyUI."
        )

    return result.exit_code


if __name__ == "__main__":
    sys.exit(main())
