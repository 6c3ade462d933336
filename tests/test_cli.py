"""
Tests for the command-line entry point.
"""

from unittest.mock import patch

import pytest

from deepfake_defense import config
from deepfake_defense.main import build_parser, main, run_game, run_server


class TestParser:
    """Test argument parsing."""

    def test_play_defaults(self):
        args = build_parser().parse_args(['play'])
        assert args.func is run_game
        assert args.width == config.SCREEN_WIDTH
        assert args.no_audio is False
        assert args.api_url is None

    def test_play_options(self):
        args = build_parser().parse_args(
            ['play', '--width', '1024', '--height', '768', '--no-audio', '--api-url', 'http://h:1'])
        assert (args.width, args.height) == (1024, 768)
        assert args.no_audio is True
        assert args.api_url == 'http://h:1'

    def test_serve(self):
        args = build_parser().parse_args(['serve', '--port', '8080', '--reload'])
        assert args.func is run_server
        assert args.port == 8080
        assert args.reload is True

    def test_bad_log_level(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(['play', '--log-level', 'LOUD'])


class TestMain:
    """Test command dispatch."""

    def test_serve_runs_uvicorn_factory(self):
        with patch('uvicorn.run') as run:
            assert main(['serve', '--host', '0.0.0.0', '--port', '9000']) == 0
        args, kwargs = run.call_args
        assert args == ("deepfake_defense.web.app:create_app",)
        assert kwargs['factory'] is True
        assert kwargs['host'] == '0.0.0.0'
        assert kwargs['port'] == 9000

    def test_default_command_is_play(self):
        with patch('deepfake_defense.engine.GameEngine') as engine:
            assert main([]) == 0
        engine.return_value.run.assert_called_once()

    def test_no_audio_passed_to_engine(self):
        with patch('deepfake_defense.engine.GameEngine') as engine:
            main(['play', '--no-audio'])
        assert engine.call_args.kwargs['audio_enabled'] is False
