"""
.env generation: the rendered file is accepted by create_app as-is.
"""

import importlib.util
from pathlib import Path

from app import create_app

GENERATOR_PATH = Path(__file__).resolve().parents[2] / 'generate_env.py'


def load_generator():
    spec = importlib.util.spec_from_file_location('generate_env', GENERATOR_PATH)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def parse_env(text):
    values = {}
    for line in text.splitlines():
        if line and not line.startswith('#'):
            name, _, value = line.partition('=')
            values[name] = value
    return values


def test_rendered_file_lists_every_setting():
    generator = load_generator().EnvGenerator(dev_mode=True)

    values = parse_env(generator.render(generator.values()))

    assert values['SECRET_KEY'] == 'dev-secret-key-DO-NOT-USE-IN-PRODUCTION'
    assert values['SESSION_COOKIE_SECURE'] == 'False'
    assert values['WEBHOOK_LOG_LIMIT'] == '100'


def test_generated_database_url_resolves_to_instance_file(monkeypatch):
    generator = load_generator().EnvGenerator(dev_mode=True)
    values = parse_env(generator.render(generator.values()))
    monkeypatch.setenv('DATABASE_URL', values['DATABASE_URL'])

    app = create_app({'SECRET_KEY': 'test-secret-key'})

    uri = app.config['SQLALCHEMY_DATABASE_URI']
    db_path = Path(uri[len('sqlite:///'):])
    assert uri.startswith('sqlite:///')
    assert db_path.is_absolute()
    assert db_path.parent.is_dir()
    assert db_path.name == 'purchasing.db'


def test_write_sets_owner_only_permissions(tmp_path):
    env_file = tmp_path / '.env'
    generator = load_generator().EnvGenerator(dev_mode=True, env_file=env_file)

    assert generator.generate(force=True) is True
    assert env_file.stat().st_mode & 0o777 == 0o600
    assert 'DATABASE_URL=' in env_file.read_text()
