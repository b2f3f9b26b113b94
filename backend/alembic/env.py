import os
import sys

# Add the 'backend' (parent) folder to Python path to allow model imports
sys.path.insert(0, os.path.realpath(os.path.join(os.path.dirname(__file__), '..')))

# Import Base and all models that should be tracked by migrations
from config import settings
from database import Base
import models.users
import models.product
import models.reference
import models.goods_in
import models.goods_out
from logging.config import fileConfig

from sqlalchemy import engine_from_config
from sqlalchemy import pool

from alembic import context


config = context.config

# The application settings are the single source of the database URL
if not config.get_main_option("sqlalchemy.url"):
    config.set_main_option("sqlalchemy.url", settings.DATABASE_URL.replace("postgres://", "postgresql://", 1))

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# target_metadata contains definitions of all tables declared in models (Base.metadata)
target_metadata = Base.metadata


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode, generating SQL scripts without DB connection."""
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations in 'online' mode, connecting directly to the database."""
    # Create Engine object from configuration
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    # Establish and use database connection
    with connectable.connect() as connection:
        # SQLite needs batch mode for ALTER TABLE support
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            render_as_batch=connection.dialect.name == "sqlite",
        )

        # Run migrations within a single transaction
        with context.begin_transaction():
            context.run_migrations()


# Select execution mode based on Alembic configuration
if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
