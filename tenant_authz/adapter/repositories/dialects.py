from sqlalchemy.dialects import postgresql, sqlite

# Dialects whose insert() supports ON CONFLICT clauses
CONFLICT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}
