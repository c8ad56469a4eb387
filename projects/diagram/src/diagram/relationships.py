"""Name-based relationship inference between extracted tables."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from functools import cache
from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING, Any, NamedTuple

if TYPE_CHECKING:
    from collections.abc import Iterable

    from ddl import ColumnDefinition, TableDefinition

logger = getLogger(__name__)

POLICY_FILE = Path(__file__).parent / "relationships.toml"

# Surrogate keys named like this are shared by unrelated tables
GENERIC_KEY = "ID"


class Relationship(NamedTuple):
    """Directed reference from one table to the table owning a key column."""

    source: str
    target: str
    column: str

    @property
    def id(self) -> str:
        """Stable identifier for diagram edges."""
        return f"e-{self.source}-{self.column}-{self.target}"


@dataclass(frozen=True)
class PreferredOwner:
    """Rule giving a table ownership of a key column over earlier tables."""

    column: str
    table: str

    def claims(self, column_name: str, table_name: str) -> bool:
        """Check whether this rule assigns the column to the table."""
        return column_name == self.column and table_name == self.table


@dataclass(frozen=True)
class KeyOwnershipPolicy:
    """Which columns may link tables and which table owns a shared key.

    Owners are resolved with a ranked list of preferred-owner rules; without
    a matching rule the first table in schema order keeps the key.
    """

    excluded_columns: frozenset[str] = frozenset()
    preferred_owners: tuple[PreferredOwner, ...] = ()

    def is_excluded(self, column_name: str) -> bool:
        """Check whether a column never participates in relationships."""
        return column_name in self.excluded_columns

    def is_key_candidate(self, column: ColumnDefinition) -> bool:
        """Check whether a column can make its table a key owner."""
        return (
            column.is_primary_key
            and not self.is_excluded(column.name)
            and column.name.upper() != GENERIC_KEY
        )

    def rank(self, column_name: str, table_name: str) -> int:
        """Rank of the first rule claiming the column, lower is stronger."""
        return next(
            (
                index
                for index, rule in enumerate(self.preferred_owners)
                if rule.claims(column_name, table_name)
            ),
            len(self.preferred_owners),
        )


def policy_from_dict(data: dict[str, Any]) -> KeyOwnershipPolicy:
    """Build a policy from parsed configuration data."""
    return KeyOwnershipPolicy(
        excluded_columns=frozenset(data.get("excluded_columns", ())),
        preferred_owners=tuple(
            PreferredOwner(column=rule["column"], table=rule["table"])
            for rule in data.get("preferred_owners", ())
        ),
    )


def load_policy(policy_file: Path = POLICY_FILE) -> KeyOwnershipPolicy:
    """Load a key ownership policy from a TOML file.

    Raises:
        ValueError: If the file cannot be read or is malformed

    """
    try:
        with policy_file.open("rb") as f:
            return policy_from_dict(tomllib.load(f))
    except (OSError, tomllib.TOMLDecodeError, KeyError, TypeError) as err:
        msg = f"Invalid relationship policy file {policy_file}: {err}"
        raise ValueError(msg) from err


@cache
def default_policy() -> KeyOwnershipPolicy:
    """Policy bundled with the package."""
    return load_policy()


def build_key_owners(
    tables: Iterable[TableDefinition],
    policy: KeyOwnershipPolicy,
) -> dict[str, str]:
    """Map each candidate key column name to the id of its owning table."""
    owners: dict[str, str] = {}
    owner_ranks: dict[str, int] = {}
    default_rank = len(policy.preferred_owners)

    for table in tables:
        for column in table.columns:
            if not policy.is_key_candidate(column):
                continue
            rank = policy.rank(column.name, table.name)
            if column.name not in owners or (
                rank < default_rank and rank <= owner_ranks[column.name]
            ):
                owners[column.name] = table.id
                owner_ranks[column.name] = rank

    return owners


def infer_relationships(
    tables: Iterable[TableDefinition],
    policy: KeyOwnershipPolicy | None = None,
) -> list[Relationship]:
    """Infer references from columns sharing a name with another table's key.

    One relationship is produced per matching column, so two tables may be
    linked several times. Tables never reference themselves.
    """
    if policy is None:
        policy = default_policy()
    tables = list(tables)
    owners = build_key_owners(tables, policy)

    relationships = [
        Relationship(source=table.id, target=target, column=column.name)
        for table in tables
        for column in table.columns
        if not policy.is_excluded(column.name)
        and (target := owners.get(column.name)) is not None
        and target != table.id
    ]
    logger.debug(
        "Inferred %d relationships from %d key columns",
        len(relationships),
        len(owners),
    )
    return relationships
