"""
Raw SQL pattern lookups.

``like`` and ``ilike`` compare a column against a caller-supplied pattern
(``%value%``) without Django's own escaping of ``%`` and ``_``. The value is
passed to the database as-is, whatever the column type.
"""

from django.db.models import Field, Lookup


class PatternLookup(Lookup):
    """Base lookup emitting ``<lhs> LIKE <rhs>``."""

    operator = "LIKE"
    prepare_rhs = False

    def as_sql(self, compiler, connection):
        lhs, lhs_params = self.process_lhs(compiler, connection)
        rhs, rhs_params = self.process_rhs(compiler, connection)
        return self.format_sql(lhs, rhs, connection), [*lhs_params, *rhs_params]

    def format_sql(self, lhs: str, rhs: str, connection) -> str:
        if connection.vendor == "postgresql":
            return f"({lhs})::text {self.operator} {rhs}"
        return f"{lhs} {self.operator} {rhs}"


@Field.register_lookup
class Like(PatternLookup):
    lookup_name = "like"


@Field.register_lookup
class ILike(PatternLookup):
    lookup_name = "ilike"
    operator = "ILIKE"

    def format_sql(self, lhs: str, rhs: str, connection) -> str:
        if connection.vendor == "postgresql":
            return super().format_sql(lhs, rhs, connection)
        return f"UPPER({lhs}) LIKE UPPER({rhs})"


__all__ = ["PatternLookup", "Like", "ILike"]
