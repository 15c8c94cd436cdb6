"""
Scope description resolution: stored row, then the static dictionary for the
same locale, then the scope string itself. Resolution never fails.
"""

from typing import Dict, Iterable, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from idp_console.scope.dictionaries import SCOPE_DICTIONARIES
from idp_console.scope.schemas import ResolvedScope, ScopeDescription


def parse_scope_param(scope: Optional[str]) -> List[str]:
    """Split a space-separated scope parameter, dropping blanks and duplicates."""
    if not scope:
        return []
    return list(dict.fromkeys(scope.split()))


def static_scope_description(scope: str, locale: str) -> Optional[ResolvedScope]:
    entry = SCOPE_DICTIONARIES.get(locale, {}).get(scope)
    if not entry:
        return None
    return ResolvedScope(name=scope, **entry)


def _fallback(scope: str, locale: str) -> ResolvedScope:
    return static_scope_description(scope, locale) or ResolvedScope(
        name=scope,
        display_name=scope,
        description=scope,
    )


async def resolve_scopes(
    db: AsyncSession, scopes: Iterable[str], locale: str
) -> List[ResolvedScope]:
    """
    Resolve a list of scopes for one locale, with a single query for the distinct names.
    Output order follows the input order.
    """
    scopes = list(scopes)
    distinct = list(dict.fromkeys(scopes))
    stored: Dict[str, ScopeDescription] = {}
    if distinct:
        rows = (
            await db.execute(
                select(ScopeDescription).where(
                    ScopeDescription.name.in_(distinct),
                    ScopeDescription.locale == locale,
                )
            )
        ).scalars()
        stored = {row.name: row for row in rows}

    resolved = []
    for scope in scopes:
        row = stored.get(scope)
        if row:
            resolved.append(
                ResolvedScope(
                    name=row.name,
                    display_name=row.display_name,
                    description=row.description,
                )
            )
        else:
            resolved.append(_fallback(scope, locale))
    return resolved


async def resolve_scope(db: AsyncSession, scope: str, locale: str) -> ResolvedScope:
    return (await resolve_scopes(db, [scope], locale))[0]
