"""Tests for the main diagram generation functionality."""

import pytest
from ddl import TableDefinition, parse_sql

from diagram import (
    HighlightEngine,
    KeyOwnershipPolicy,
    infer_relationships,
    layout_positions,
    schema_to_diagram,
)
from diagram.relationships import Relationship


@pytest.fixture(name="tables")
def social_media_tables() -> tuple[TableDefinition, ...]:
    """Parse a small sample schema."""
    return parse_sql(
        """
        CREATE TABLE `users` (
          `user_no` int NOT NULL COMMENT 'User number',
          `email` varchar(255) NOT NULL,
          `name` varchar(100),
          PRIMARY KEY (`user_no`)
        ) COMMENT = 'Registered users';

        CREATE TABLE `posts` (
          `post_no` int NOT NULL,
          `user_no` int NOT NULL,
          `title` varchar(255) NOT NULL,
          PRIMARY KEY (`post_no`)
        );

        CREATE TABLE `comments` (
          `comment_no` int NOT NULL,
          `post_no` int NOT NULL,
          `user_no` int NOT NULL,
          `content` text NOT NULL,
          PRIMARY KEY (`comment_no`)
        );
        """,
    ).tables


@pytest.fixture(name="relationships")
def inferred_relationships(
    tables: tuple[TableDefinition, ...],
) -> list[Relationship]:
    """Relationships inferred without exclusions."""
    return infer_relationships(tables, KeyOwnershipPolicy())


def test_layout_positions_grid() -> None:
    """Test row-major grid placement with two extra columns."""
    positions = layout_positions(5)
    # ceil(sqrt(5)) + 2 == 5 columns, so all fit on one row
    assert positions == [{"x": index * 400, "y": 0} for index in range(5)]

    positions = layout_positions(10)
    # ceil(sqrt(10)) + 2 == 6 columns
    assert positions[5] == {"x": 2000, "y": 0}
    assert positions[6] == {"x": 0, "y": 400}


def test_layout_positions_empty() -> None:
    """Test that no tables need no positions."""
    assert layout_positions(0) == []


def test_schema_to_diagram_structure(
    tables: tuple[TableDefinition, ...],
    relationships: list[Relationship],
) -> None:
    """Test the generated diagram document."""
    diagram = schema_to_diagram(tables, relationships, name="social")

    assert diagram["name"] == "social"
    assert diagram["selected"] is None
    assert [table["id"] for table in diagram["tables"]] == [
        "users",
        "posts",
        "comments",
    ]

    users = diagram["tables"][0]
    assert users["comment"] == "Registered users"
    assert users["primary_keys"] == ["user_no"]
    assert users["position"] == {"x": 0, "y": 0}
    assert users["columns"][0] == {
        "name": "user_no",
        "type": "int",
        "comment": "User number",
        "primary_key": True,
        "nullable": False,
    }
    assert users["columns"][2]["nullable"] is True

    edges = {
        (rel["source"], rel["target"], rel["column"])
        for rel in diagram["relationships"]
    }
    assert edges == {
        ("posts", "users", "user_no"),
        ("comments", "posts", "post_no"),
        ("comments", "users", "user_no"),
    }
    assert diagram["relationships"][0]["id"] == "e-posts-user_no-users"


def test_schema_to_diagram_with_selection(
    tables: tuple[TableDefinition, ...],
    relationships: list[Relationship],
) -> None:
    """Test that highlight flags follow the engine's selection."""
    highlight = HighlightEngine(relationships)
    highlight.select("posts")

    diagram = schema_to_diagram(tables, relationships, highlight)

    assert diagram["selected"] == "posts"
    flags = {
        table["id"]: (table["selected"], table["dimmed"])
        for table in diagram["tables"]
    }
    assert flags == {
        "users": (False, False),
        "posts": (True, False),
        "comments": (False, False),
    }
    emphasized = {rel["id"]: rel["emphasized"] for rel in diagram["relationships"]}
    assert emphasized == {
        "e-posts-user_no-users": True,
        "e-comments-post_no-posts": True,
        "e-comments-user_no-users": False,
    }
    assert [rel["dimmed"] for rel in diagram["relationships"]] == [False, False, True]
