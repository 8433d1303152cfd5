# migrations/env.py
from __future__ import annotations
from logging.config import fileConfig
from alembic import context
from sqlalchemy import engine_from_config, pool

from ems_api.wsgi import app as flask_app
from ems_api.extensions import db

config = context.config

if config.config_file_name is not None:
    try:
        fileConfig(config.config_file_name, disable_existing_loggers=False)
    except KeyError:
        # alembic.ini without logging sections
        pass

# the Flask app is the only source of the database URL
DB_URI = flask_app.config["SQLALCHEMY_DATABASE_URI"]
config.set_main_option("sqlalchemy.url", DB_URI)


def _configure(**kw):
    context.configure(
        target_metadata=db.metadata,
        compare_type=True,
        render_as_batch=DB_URI.startswith("sqlite"),
        **kw,
    )


def run_migrations_offline() -> None:
    _configure(url=DB_URI, literal_binds=True)
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = engine_from_config(
        config.get_section(config.config_ini_section),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    with connectable.connect() as connection, flask_app.app_context():
        _configure(connection=connection)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
