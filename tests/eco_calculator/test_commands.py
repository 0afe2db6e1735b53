"""
Tests for the `flask eco` CLI group and the application factory.
"""
import os
import unittest
from unittest.mock import patch

import requests

from app import create_app, db
from app.models import LogEntry
from app.projects.eco_calculator.commands import eco_cli

TEST_CONFIG = {
    'TESTING': True,
    'SECRET_KEY': 'test-secret',
    'SQLALCHEMY_DATABASE_URI': 'sqlite://',
    'WTF_CSRF_ENABLED': False,
    'EMISSIONS_PROVIDER': 'climatiq',
    'CLIMATIQ_API_KEY': 'test-key',
}


class TestEcoCli(unittest.TestCase):

    def setUp(self):
        self.app = create_app(TEST_CONFIG)
        self.runner = self.app.test_cli_runner()

    def invoke(self, *args):
        return self.runner.invoke(eco_cli, list(args))

    def test_evaluate(self):
        result = self.invoke('evaluate', '2+3*4')
        self.assertEqual(result.exit_code, 0)
        self.assertEqual(result.output.strip(), '14')

    def test_evaluate_invalid(self):
        result = self.invoke('evaluate', '5/0')
        self.assertEqual(result.exit_code, 1)
        self.assertIn('Invalid calculation', result.output)

    def test_estimate_bike(self):
        result = self.invoke('estimate', 'travel', '12', '--transport', 'bike')
        self.assertEqual(result.exit_code, 0)
        self.assertEqual(result.output.strip(), '0.00 kg CO2e (local)')

    @patch('app.projects.eco_calculator.core.providers.requests.Session')
    def test_estimate_falls_back_when_remote_is_down(self, mock_session_cls):
        mock_session_cls.return_value.post.side_effect = requests.ConnectionError('down')

        result = self.invoke('estimate', 'energy', '100')

        self.assertEqual(result.exit_code, 0)
        self.assertEqual(result.output.strip(), '70.90 kg CO2e (fallback)')

    def test_estimate_invalid_amount(self):
        result = self.invoke('estimate', 'travel', 'far')
        self.assertEqual(result.exit_code, 1)
        self.assertIn('Please enter a valid distance.', result.output)

    def test_estimate_unknown_provider(self):
        result = self.invoke('estimate', 'energy', '10', '--provider', 'nope')
        self.assertEqual(result.exit_code, 2)

    def test_init_db(self):
        result = self.invoke('init-db')
        self.assertEqual(result.exit_code, 0)
        self.assertIn('log_entry', result.output)
        with self.app.app_context():
            self.assertEqual(LogEntry.query.count(), 0)


class TestCreateApp(unittest.TestCase):

    def test_requires_secret_key(self):
        with patch.dict(os.environ, {}, clear=True):
            with self.assertRaises(ValueError):
                create_app()

    def test_root_redirects_to_calculator(self):
        app = create_app(TEST_CONFIG)
        with app.app_context():
            db.create_all()
        r = app.test_client().get('/')
        self.assertEqual(r.status_code, 302)
        self.assertTrue(r.headers['Location'].endswith('/eco-calculator/'))

    def test_cli_group_registered(self):
        app = create_app(TEST_CONFIG)
        self.assertIn('eco', app.cli.commands)


if __name__ == '__main__':
    unittest.main()
