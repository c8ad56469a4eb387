"""SchemaViz: turn SQL DDL dumps into ER diagrams."""
