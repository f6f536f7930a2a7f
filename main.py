#!/usr/bin/env python
"""
Autoblog - automated blog post generation
Command line entry point for one-off runs, batches, the web app and the scheduler
"""

import argparse
import json
import logging
import os
import sys
import threading
import time

from dotenv import load_dotenv

from autoblog import __version__
from autoblog.config import get_settings
from autoblog.config.startup_validation import run_startup_validation
from autoblog.utils.logger import configure_logging

# Load environment
load_dotenv()

logger = logging.getLogger("autoblog.cli")


def _log_uncaught(exc_type, exc_value, exc_traceback):
    if issubclass(exc_type, KeyboardInterrupt):
        sys.__excepthook__(exc_type, exc_value, exc_traceback)
        return
    # The interpreter exits with status 1 after the hook returns
    logger.critical("Uncaught exception", exc_info=(exc_type, exc_value, exc_traceback))


def _log_uncaught_thread(args):
    if issubclass(args.exc_type, SystemExit):
        return
    logger.critical(
        f"Uncaught exception in thread {args.thread.name if args.thread else '?'}",
        exc_info=(args.exc_type, args.exc_value, args.exc_traceback),
    )
    os._exit(1)


def install_exception_hooks():
    sys.excepthook = _log_uncaught
    threading.excepthook = _log_uncaught_thread


def _build_service(settings):
    from blogapp.models import get_session_factory, init_db
    from blogapp.services import build_generation_service

    engine = init_db(settings.database_path)
    return build_generation_service(settings, get_session_factory(engine))


def _options_from_args(args) -> dict:
    options = {
        'category': args.category,
        'subcategory': args.subcategory,
        'keywords': args.keywords,
        'tone': args.tone,
        'auto_publish': args.publish,
    }
    if args.min_words is not None:
        options['min_words'] = args.min_words
    if args.max_words is not None:
        options['max_words'] = args.max_words
    return options


def cmd_generate(args, settings) -> int:
    service = _build_service(settings)
    result = service.generate_and_publish_post(_options_from_args(args))

    if result['success']:
        post = result['post']
        print(f"\n✅ {result['message']}")
        print(f"   ID:       {post['id']}")
        print(f"   Slug:     {post['slug']}")
        print(f"   Category: {post['category']} / {post['subcategory']}")
        print(f"   Words:    {post['word_count']}")
        print(f"   Status:   {post['status']}")
        if post['similarity_warning']:
            print(f"   ⚠️  Similar to post {post['similar_post_id']} (score {post['similarity_score']:.2f})")
        return 0

    print(f"\n❌ {result['message']}: {result['error']}")
    return 1


def cmd_batch(args, settings) -> int:
    if args.count < 1 or args.count > settings.max_batch_size:
        print(f"Batch size must be between 1 and {settings.max_batch_size}")
        return 2

    service = _build_service(settings)
    results = service.generate_batch(args.count, _options_from_args(args))

    print(f"\n📋 Batch results ({args.count} posts)")
    print("=" * 50)
    for i, result in enumerate(results, 1):
        if result['success']:
            print(f"{i}. ✅ {result['post']['title']}")
        else:
            print(f"{i}. ❌ {result['error']}")

    succeeded = sum(1 for r in results if r['success'])
    print(f"\n{succeeded}/{len(results)} posts generated")
    return 0 if succeeded else 1


def cmd_serve(args, settings) -> int:
    from blogapp import create_app

    app = create_app(settings, start_scheduler=True)
    host = args.host or settings.host
    port = args.port or settings.port

    print(f"\n📝 Autoblog API running at http://{host}:{port}/api/blog")
    try:
        app.run(host=host, port=port, debug=settings.debug, use_reloader=False)
    finally:
        app.blog_scheduler.shutdown()
    return 0


def cmd_scheduler(args, settings) -> int:
    from blogapp.scheduler import BlogScheduler

    if not settings.schedule_enabled:
        logger.error("SCHEDULE_ENABLED is false, nothing to run")
        return 1

    scheduler = BlogScheduler(_build_service(settings), settings)
    if not scheduler.start():
        return 1

    for job in scheduler.get_scheduled_jobs():
        logger.info(f"  - {job['name']}: next run at {job['next_run']}")

    logger.info("Scheduler is running. Press Ctrl+C to stop.")
    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        logger.info("Shutting down scheduler...")
    finally:
        scheduler.shutdown()
    return 0


def cmd_validate(args, settings) -> int:
    validation = run_startup_validation(settings, print_summary=not args.json)
    if args.json:
        print(json.dumps({
            'is_valid': validation.is_valid,
            'errors': validation.errors,
            'warnings': validation.warnings,
            'services': {name: r.status.value for name, r in validation.services.items()},
        }, indent=2))
    return 0 if validation.is_valid else 1


def _add_generation_arguments(parser):
    parser.add_argument("--category", help="Post category (random when omitted)")
    parser.add_argument("--subcategory", help="Post subcategory (random when omitted)")
    parser.add_argument("--keywords", help="Comma separated keywords")
    parser.add_argument("--min-words", type=int, dest="min_words", help="Minimum word count")
    parser.add_argument("--max-words", type=int, dest="max_words", help="Maximum word count")
    parser.add_argument("--tone", help="Writing tone")
    parser.add_argument("--publish", action="store_true", help="Publish instead of saving a draft")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Autoblog - automated blog post generation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Generate command
    gen_parser = subparsers.add_parser("generate", help="Generate a single post")
    _add_generation_arguments(gen_parser)

    # Batch command
    batch_parser = subparsers.add_parser("batch", help="Generate several posts in sequence")
    batch_parser.add_argument("count", type=int, help="Number of posts")
    _add_generation_arguments(batch_parser)

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Start the HTTP API")
    serve_parser.add_argument("--host", help="Host")
    serve_parser.add_argument("--port", type=int, help="Port")

    # Scheduler command
    subparsers.add_parser("scheduler", help="Run the generation scheduler in the foreground")

    # Validate command
    validate_parser = subparsers.add_parser("validate", help="Check configuration and backends")
    validate_parser.add_argument("--json", action="store_true", help="Print results as JSON")

    return parser


COMMANDS = {
    "generate": cmd_generate,
    "batch": cmd_batch,
    "serve": cmd_serve,
    "scheduler": cmd_scheduler,
    "validate": cmd_validate,
}


def main(argv=None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command not in COMMANDS:
        parser.print_help()
        return 0

    settings = get_settings()
    configure_logging(settings.log_dir)
    install_exception_hooks()

    if args.command in ("generate", "batch", "serve", "scheduler"):
        validation = run_startup_validation(settings, print_summary=False)
        for warning in validation.warnings:
            logger.warning(warning)
        if not validation.is_valid:
            for error in validation.errors:
                logger.error(error)
            return 1

    return COMMANDS[args.command](args, settings)


if __name__ == "__main__":
    sys.exit(main())
