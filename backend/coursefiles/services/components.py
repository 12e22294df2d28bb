"""Component catalog — which subsystems own files below a context."""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from coursefiles.models.context import Context
from coursefiles.models.file import FileRecord
from coursefiles.services.scope import in_scope, visible_file
from coursefiles.services.strings import (
    PLUGIN_COMPONENT,
    StringManager,
    get_component_translation,
)

logger = logging.getLogger(__name__)

ALL_COMPONENTS = "all"
ALL_WITHOUT_SUBMISSIONS = "all_wo_submissions"
SYNTHETIC_COMPONENTS = (ALL_COMPONENTS, ALL_WITHOUT_SUBMISSIONS)


class ComponentCatalog:
    """Distinct file components in a context subtree, with labels.

    The result is computed once per instance.
    """

    def __init__(self, db: AsyncSession, scope: Context, strings: StringManager):
        self._db = db
        self._scope = scope
        self._strings = strings
        self._components: dict[str, str] | None = None

    async def list_components(self) -> dict[str, str]:
        """Ordered mapping component key -> label, synthetic entries first."""
        if self._components is not None:
            return self._components

        stmt = (
            select(FileRecord.component)
            .join(Context, Context.id == FileRecord.contextid)
            .where(visible_file(), in_scope(self._scope))
            .group_by(FileRecord.component)
        )
        result = await self._db.execute(stmt)
        names = result.scalars().all()

        found = {name: get_component_translation(self._strings, name) for name in names}
        ordered = sorted(found.items(), key=lambda item: item[1].casefold())

        components = {
            ALL_COMPONENTS: self._strings.get_string("all_files", PLUGIN_COMPONENT),
            ALL_WITHOUT_SUBMISSIONS: self._strings.get_string(
                "all_wo_submissions", PLUGIN_COMPONENT
            ),
        }
        for key, label in ordered:
            components.setdefault(key, label)

        logger.debug("Context %s has files in %d components", self._scope.id, len(found))
        self._components = components
        return components
