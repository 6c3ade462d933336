"""
Command-line entry point for DeepFake Defense.

    deepfake-defense play            # pygame client
    deepfake-defense serve           # leaderboard / media API
"""

import argparse
import logging
import sys

from deepfake_defense import __version__, config
from deepfake_defense.logging import configure_logging


def run_game(args: argparse.Namespace) -> int:
    """Start the pygame client."""
    if args.log_level:
        configure_logging(level=args.log_level)

    # pygame is only needed for the client
    from deepfake_defense.engine import GameEngine

    engine = GameEngine(
        width=args.width,
        height=args.height,
        fps=args.fps,
        audio_enabled=not args.no_audio and config.AUDIO_ENABLED,
        api_url=args.api_url,
    )
    engine.run()
    return 0


def run_server(args: argparse.Namespace) -> int:
    """Start the API server under uvicorn."""
    import uvicorn

    logging.basicConfig(level=(args.log_level or 'INFO').upper())
    uvicorn.run(
        "deepfake_defense.web.app:create_app",
        factory=True,
        host=args.host,
        port=args.port,
        reload=args.reload,
    )
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='deepfake-defense',
        description='DeepFake Defense - shoot the fakes, spare the real media',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Play (expects the API on http://localhost:3000 for the leaderboard)
  deepfake-defense play

  # Play windowed at 1920x1080 without sound
  deepfake-defense play --width 1920 --height 1080 --no-audio

  # Run the API
  deepfake-defense serve --port 3000
        """
    )
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    subparsers = parser.add_subparsers(dest='command')

    play = subparsers.add_parser('play', help='Play the game')
    play.add_argument(
        '--width',
        type=int,
        default=config.SCREEN_WIDTH,
        help=f'Window width (default: {config.SCREEN_WIDTH})'
    )
    play.add_argument(
        '--height',
        type=int,
        default=config.SCREEN_HEIGHT,
        help=f'Window height (default: {config.SCREEN_HEIGHT})'
    )
    play.add_argument(
        '--fps',
        type=int,
        default=config.FPS,
        help=f'Frame rate cap (default: {config.FPS})'
    )
    play.add_argument(
        '--no-audio',
        action='store_true',
        help='Disable sound effects and music'
    )
    play.add_argument(
        '--api-url',
        type=str,
        default=None,
        help=f'Leaderboard API root (default: {config.API_BASE_URL})'
    )
    play.add_argument(
        '--log-level',
        choices=['TRACE', 'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL', 'OFF'],
        default=None,
        help='Default log level (overrides DFD_LOG_LEVEL)'
    )
    play.set_defaults(func=run_game)

    serve = subparsers.add_parser('serve', help='Run the leaderboard / media API')
    serve.add_argument(
        '--host',
        type=str,
        default=config.SERVER_HOST,
        help=f'Bind address (default: {config.SERVER_HOST})'
    )
    serve.add_argument(
        '--port',
        type=int,
        default=config.SERVER_PORT,
        help=f'Port (default: {config.SERVER_PORT})'
    )
    serve.add_argument(
        '--reload',
        action='store_true',
        help='Reload on code changes (development)'
    )
    serve.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
        default=None,
        help='Server log level (default: INFO)'
    )
    serve.set_defaults(func=run_server)

    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.command:
        # No subcommand: play
        args = parser.parse_args(['play'] + list(argv if argv is not None else sys.argv[1:]))
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
