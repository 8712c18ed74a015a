from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

from tenant_tracker.config import settings
from tenant_tracker.models.base import Base
# Import all model classes to ensure they're registered with SQLAlchemy
from tenant_tracker.models.user import User  # noqa: F401
from tenant_tracker.models.property import Property  # noqa: F401
from tenant_tracker.models.assignment import Assignment  # noqa: F401
from tenant_tracker.models.payment_record import PaymentRecord  # noqa: F401
from tenant_tracker.models.agreement import Agreement  # noqa: F401

config = context.config
config.set_main_option("sqlalchemy.url", settings.DATABASE_URL)

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def run_migrations_offline():
    context.configure(url=settings.DATABASE_URL,
                      target_metadata=target_metadata,
                      literal_binds=True,
                      compare_type=True)
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online():
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    with connectable.connect() as connection:
        context.configure(connection=connection,
                          target_metadata=target_metadata,
                          compare_type=True,
                          render_as_batch=connection.dialect.name == "sqlite")
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
