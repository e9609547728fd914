#!/usr/bin/env python3
import io
import unittest
from contextlib import redirect_stdout

from star.config import ConfigError, ServerConfig, load_config, notification_warnings, parse_chat_id


class TestLoadConfig(unittest.TestCase):
    def test_defaults(self):
        config = load_config([], {'GITHUB_SECRET': 's'})
        self.assertEqual(config.listen, '0.0.0.0')
        self.assertEqual(config.port, 8080)
        self.assertEqual(config.telegram_chat_id, 0)
        self.assertEqual(config.telegram_timeout, 10.0)
        self.assertFalse(config.debug)
        self.assertEqual(config.address, '0.0.0.0:8080')

    def test_missing_secret_is_fatal(self):
        with self.assertRaises(ConfigError):
            load_config([], {})
        with self.assertRaises(ConfigError):
            load_config([], {'GITHUB_SECRET': ''})

    def test_env_values(self):
        env = {
            'GITHUB_SECRET': 's',
            'PORT': '9000',
            'LISTEN': '127.0.0.1',
            'TELEGRAM_TOKEN': 't',
            'TELEGRAM_CHAT': '-100200',
            'TELEGRAM_API_URL': 'http://localhost:8081/',
            'TELEGRAM_TIMEOUT_SECONDS': '2.5',
            'DEBUG_MODE': 'True',
        }
        config = load_config([], env)
        self.assertEqual(config.port, 9000)
        self.assertEqual(config.listen, '127.0.0.1')
        self.assertEqual(config.telegram_chat_id, -100200)
        self.assertEqual(config.telegram_api_url, 'http://localhost:8081')
        self.assertEqual(config.telegram_timeout, 2.5)
        self.assertTrue(config.debug)

    def test_version_from_env(self):
        config = load_config([], {'GITHUB_SECRET': 's', 'VERSION': 'v2.0.1-abc'})
        self.assertEqual(config.version, 'v2.0.1-abc')

        out = io.StringIO()
        with redirect_stdout(out), self.assertRaises(SystemExit):
            load_config(['-v'], {'VERSION': 'v2.0.1-abc'})
        self.assertEqual(out.getvalue().strip(), 'v2.0.1-abc')

    def test_version_defaults_to_package_version(self):
        from star import __version__
        self.assertEqual(load_config([], {'GITHUB_SECRET': 's'}).version, __version__)

    def test_flags_win_over_env(self):
        env = {'GITHUB_SECRET': 's', 'PORT': '9000', 'LISTEN': '127.0.0.1'}
        config = load_config(['-port', '7000', '-listen', '10.0.0.1'], env)
        self.assertEqual(config.port, 7000)
        self.assertEqual(config.listen, '10.0.0.1')

    def test_invalid_port(self):
        with self.assertRaises(ConfigError):
            load_config([], {'GITHUB_SECRET': 's', 'PORT': 'http'})
        with self.assertRaises(ConfigError):
            load_config(['-port', '70000'], {'GITHUB_SECRET': 's'})

    def test_version_flag_prints_and_exits_zero(self):
        out = io.StringIO()
        with redirect_stdout(out), self.assertRaises(SystemExit) as ctx:
            load_config(['-v'], {})
        self.assertEqual(ctx.exception.code, 0)
        self.assertTrue(out.getvalue().strip())

    def test_help_flag_exits_zero(self):
        out = io.StringIO()
        with redirect_stdout(out), self.assertRaises(SystemExit) as ctx:
            load_config(['-help'], {})
        self.assertEqual(ctx.exception.code, 0)
        self.assertIn('-port', out.getvalue())


class TestChatId(unittest.TestCase):
    def test_parse_chat_id(self):
        self.assertEqual(parse_chat_id('123'), 123)
        self.assertEqual(parse_chat_id('-5'), -5)
        self.assertEqual(parse_chat_id(''), 0)
        self.assertEqual(parse_chat_id('abc'), 0)
        self.assertEqual(parse_chat_id(None), 0)

    def test_notification_warnings(self):
        self.assertEqual(
            notification_warnings(ServerConfig(webhook_secret='s')),
            ['Telegram token not set', 'Telegram Chat ID not set'],
        )
        self.assertEqual(
            notification_warnings(ServerConfig(webhook_secret='s', telegram_token='t', telegram_chat_id=1)),
            [],
        )


if __name__ == '__main__':
    unittest.main()
