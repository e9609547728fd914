#!/usr/bin/env python3
import unittest
from unittest.mock import Mock

import requests

from star.formatters import FormatMode, OutboundMessage
from star.services import NotificationError, TelegramClient


def _response(status_code=200, json_body=None, text=''):
    resp = Mock()
    resp.status_code = status_code
    resp.reason = 'OK' if status_code < 400 else 'Bad Request'
    resp.text = text
    if json_body is None:
        resp.json.side_effect = ValueError('no json')
    else:
        resp.json.return_value = json_body
    return resp


class TestTelegramClient(unittest.TestCase):
    def setUp(self):
        self.session = Mock()
        self.client = TelegramClient('TOKEN', api_url='https://tg.example/', timeout=3, session=self.session)

    def test_send_message_posts_markdown_with_timeout(self):
        self.session.post.return_value = _response(json_body={'ok': True, 'result': {'message_id': 7}})
        result = self.client.send_message(OutboundMessage(chat_id=5, text='oi', format_mode=FormatMode.MARKDOWN))

        self.assertEqual(result, {'message_id': 7})
        self.session.post.assert_called_once_with(
            'https://tg.example/botTOKEN/sendMessage',
            json={'chat_id': 5, 'text': 'oi', 'parse_mode': 'Markdown'},
            timeout=3,
        )

    def test_plain_message_has_no_parse_mode(self):
        self.session.post.return_value = _response(json_body={'ok': True, 'result': {}})
        self.client.send_message(OutboundMessage(chat_id=5, text='oi'))
        payload = self.session.post.call_args.kwargs['json']
        self.assertNotIn('parse_mode', payload)

    def test_api_rejection_raises(self):
        self.session.post.return_value = _response(
            status_code=400, json_body={'ok': False, 'description': 'Bad Request: chat not found'})
        with self.assertRaises(NotificationError) as ctx:
            self.client.send_message(OutboundMessage(chat_id=0, text='oi'))
        self.assertIn('chat not found', str(ctx.exception))

    def test_non_json_error_raises(self):
        self.session.post.return_value = _response(status_code=502, text='<html>')
        with self.assertRaises(NotificationError):
            self.client.get_me()

    def test_network_error_raises_without_leaking_token(self):
        self.session.post.side_effect = requests.ConnectionError('https://tg.example/botTOKEN/sendMessage')
        with self.assertRaises(NotificationError) as ctx:
            self.client.send_message(OutboundMessage(chat_id=5, text='oi'))
        self.assertNotIn('TOKEN', str(ctx.exception))

    def test_missing_token_raises_without_network(self):
        client = TelegramClient('', session=self.session)
        self.assertFalse(client.enabled)
        with self.assertRaises(NotificationError):
            client.send_message(OutboundMessage(chat_id=5, text='oi'))
        self.session.post.assert_not_called()


if __name__ == '__main__':
    unittest.main()
