"""Lexical read-only gate for user-supplied SQL.

This is a textual heuristic, not a parser. A statement is allowed when,
after leading whitespace, it starts with SELECT or WITH (any case) and
contains no semicolon anywhere.

Known blind spots, kept on purpose:
- Comments are not stripped or inspected.
- Data-modifying statements inside a WITH clause
  (``WITH d AS (DELETE FROM t RETURNING *) SELECT * FROM d``) pass.
- Dialect extensions such as ``SELECT ... INTO new_table`` pass.
- The keyword check is a prefix match, so ``SELECTED`` or ``WITHOUT``
  as a first token also pass.
"""

from __future__ import annotations

import re

_LEADING_KEYWORD = re.compile(r"\s*(?:WITH|SELECT)", re.IGNORECASE)


def is_select_only(sql: str) -> bool:
    """Decide whether SQL text may run on the read path.

    Args:
        sql: Arbitrary query text.

    Returns:
        True if the text is allowed, False otherwise. Never raises.

    Examples:
        >>> is_select_only("   select * from users")
        True
        >>> is_select_only("SELECT 1; DROP TABLE x")
        False
        >>> is_select_only("UPDATE users SET role='ADMIN'")
        False
    """
    if not _LEADING_KEYWORD.match(sql):
        return False
    # Blocks stacked statements.
    return ";" not in sql
