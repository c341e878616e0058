#!/usr/bin/env python3
"""
Basic usage examples for the SQL data gateway.

This example demonstrates:
1. Setting up configuration and creating a gateway
2. Inserting models and reading them back
3. Updating with explicit predicates
4. Reading with a join into extra_data
5. Soft and hard deletes
"""

from typing import Optional

import sqlalchemy as sa

from data_gateway import (
    DatabaseConfig,
    EntityModel,
    Join,
    JoinType,
    create_gateway,
)
from data_gateway.exceptions import UnsafeDeleteError


class UserAccount(EntityModel):
    name: str
    email: Optional[str] = None
    is_active: bool = True


class Profile(EntityModel):
    user_id: int
    bio: Optional[str] = None


def lifecycle():
    return [
        sa.Column('created', sa.DateTime),
        sa.Column('updated', sa.DateTime),
        sa.Column('deleted', sa.DateTime),
    ]


def create_schema(engine: sa.Engine) -> None:
    """The gateway never creates tables; the application owns its schema."""
    metadata = sa.MetaData()
    sa.Table(
        'user_account', metadata,
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('email', sa.String(200), unique=True),
        sa.Column('is_active', sa.Boolean, nullable=False),
        *lifecycle(),
    )
    sa.Table(
        'profile', metadata,
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('user_id', sa.Integer, nullable=False),
        sa.Column('bio', sa.Text),
        *lifecycle(),
    )
    metadata.create_all(engine)


def main():
    """Demonstrate basic usage of the data gateway."""

    # 1. Configure the database and build a gateway
    print("1. Setting up configuration...")
    config = DatabaseConfig(database_url="sqlite://", environment="dev")

    # For a file database with SQL echo, you might use:
    # config = DatabaseConfig.for_local_development()

    gateway = create_gateway(config)
    create_schema(gateway.bind)

    # 2. Insert models; the generated id and `created` land on the instance
    print("2. Inserting users...")
    ada = UserAccount(name="Ada Lovelace", email="ada@example.com")
    grace = UserAccount(name="Grace Hopper", email="grace@example.com")
    gateway.persist(ada)
    gateway.persist(grace)
    print(f"Inserted {ada.name}: id={ada.id}, created={ada.created.isoformat()}")

    gateway.persist(Profile(user_id=ada.id, bio="Wrote the first program"))

    # 3. Update; the caller always supplies the predicate
    print("3. Updating a user...")
    user_id = gateway.column(UserAccount, 'id')
    grace.is_active = False
    gateway.persist(grace, user_id == grace.id)
    print(f"Updated {grace.name}: updated={grace.updated.isoformat()}")

    # 4. Read with a left join; joined columns end up in extra_data
    print("4. Reading users with their profiles...")
    profile_join = Join(
        Profile,
        on=user_id == gateway.column(Profile, 'user_id'),
        cols={'profile_bio': 'bio'},
        type=JoinType.LEFT
    )
    for user in gateway.get(UserAccount, joins=[profile_join]):
        print(f"  {user.id}: {user.name} ({user.lifecycle_state.value}) bio={user.extra_data['profile_bio']!r}")

    # 5. Soft delete keeps the row, hard delete removes it
    print("5. Deleting...")
    gateway.delete(grace, user_id == grace.id)
    live = gateway.get(UserAccount, gateway.column(UserAccount, 'deleted').is_(None))
    print(f"Live users after soft delete: {[u.name for u in live]}")

    try:
        gateway.delete(grace, soft=False)
    except UnsafeDeleteError as e:
        print(f"Refused: {e}")

    gateway.delete(grace, user_id == grace.id, soft=False)
    print(f"Users after hard delete: {[u.name for u in gateway.get(UserAccount)]}")

    print("\nData gateway example completed")


if __name__ == "__main__":
    main()
