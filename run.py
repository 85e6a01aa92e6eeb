#!/usr/bin/env python3
"""
Command line entry point: manage .env.<environment> files or start the server.
"""

import os
import sys
import argparse

from phrasebook_api.config.loader import ConfigLoader, load_config_for_environment
from phrasebook_api.config.settings import Environment, Settings, StorageBackend


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Arabic Phrasebook Backend Server")
    parser.add_argument(
        "--env",
        choices=[env.value for env in Environment],
        default=None,
        help="Configuration to load (default: $ENVIRONMENT, else development)",
    )
    parser.add_argument("--host", default=None, help="Bind address")
    parser.add_argument("--port", type=int, default=None, help="Bind port")
    parser.add_argument("--workers", type=int, default=None, help="Uvicorn worker processes")
    parser.add_argument("--reload", action="store_true", help="Restart on code changes")
    parser.add_argument(
        "--storage",
        choices=[backend.value for backend in StorageBackend],
        default=None,
        help="Where synced phrase lists are kept",
    )

    config_commands = parser.add_argument_group("configuration commands")
    config_commands.add_argument("--list-envs", action="store_true", help="List .env.<environment> files")
    config_commands.add_argument("--validate-env", metavar="ENV", help="Check one environment file and exit")
    config_commands.add_argument("--create-sample", metavar="ENV", help="Write .env.<ENV>.sample and exit")
    return parser


def run_config_command(args) -> bool:
    """Handle the configuration commands. Returns True if one ran."""
    if args.list_envs:
        print("Environment files found:")
        for env in ConfigLoader.get_available_environments():
            print(f"  - {env}")
        return True

    if args.validate_env:
        if not ConfigLoader.validate_environment_config(args.validate_env):
            print(f"✗ .env.{args.validate_env} is missing or invalid")
            sys.exit(1)
        print(f"✓ .env.{args.validate_env} is valid")
        return True

    if args.create_sample:
        try:
            path = ConfigLoader.create_sample_env_file(args.create_sample)
        except (ValueError, OSError) as e:
            print(f"✗ Could not write sample file: {e}")
            sys.exit(1)
        print(f"✓ Wrote {path}")
        return True

    return False


def apply_overrides(settings: Settings, args) -> Settings:
    if args.host:
        settings.host = args.host
    if args.port:
        settings.port = args.port
    if args.workers:
        settings.workers = args.workers
    if args.reload:
        settings.reload = True
    if args.storage:
        settings.storage_backend = StorageBackend(args.storage)
    return settings


def export_environment(settings: Settings) -> None:
    """Pass the chosen environment and overrides to processes that import the app by path."""
    os.environ["ENVIRONMENT"] = settings.environment.value
    os.environ["STORAGE_BACKEND"] = settings.storage_backend.value


def serve(settings: Settings) -> None:
    export_environment(settings)
    import uvicorn
    from phrasebook_api.main import create_app

    print(
        f"🚀 {settings.app_name} v{settings.app_version} "
        f"[{settings.environment.value}] on {settings.host}:{settings.port}, "
        f"storage={settings.storage_backend.value}, workers={settings.workers}"
    )

    log_level = settings.log_level.value.lower()
    if settings.reload or settings.workers > 1:
        # Reload and multi-worker modes import the app by path, which reads
        # configuration from the exported environment again.
        uvicorn.run(
            "phrasebook_api.main:app",
            host=settings.host,
            port=settings.port,
            reload=settings.reload,
            workers=1 if settings.reload else settings.workers,
            log_level=log_level,
        )
    else:
        uvicorn.run(create_app(settings), host=settings.host, port=settings.port, log_level=log_level)


def main():
    args = build_parser().parse_args()

    if run_config_command(args):
        return

    try:
        settings = load_config_for_environment(args.env)
    except ValueError as e:
        print(f"✗ Failed to load configuration: {e}")
        sys.exit(1)

    serve(apply_overrides(settings, args))


if __name__ == "__main__":
    main()
