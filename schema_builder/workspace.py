"""
Workspace: the ordered collection of named schemas edited in one session.
"""

from datetime import datetime
from typing import List, Optional, Tuple
import logging

from pydantic import Field

from .models import Schema, FrozenModel, generate_id, normalize_field
from .schema_tree import Command, apply_command, ensure_unique_ids

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now()


class Workspace(FrozenModel):
    """Immutable workspace; every operation returns a new instance."""
    schemas: List[Schema] = Field(default_factory=list)

    def get_schema(self, schema_id: Optional[str]) -> Optional[Schema]:
        for schema in self.schemas:
            if schema.id == schema_id:
                return schema
        return None

    def _replace_schema(self, schema: Schema) -> "Workspace":
        schemas = [schema if s.id == schema.id else s for s in self.schemas]
        return self.model_copy(update={'schemas': schemas})

    def create_schema(self, name: str) -> Tuple["Workspace", Optional[Schema]]:
        """
        Append a new empty schema.

        Args:
            name: Schema name; surrounding whitespace is trimmed

        Returns:
            (new workspace, created schema), or (self, None) for a blank name
        """
        name = (name or "").strip()
        if not name:
            logger.debug("create_schema: blank name ignored")
            return self, None

        timestamp = _now()
        schema = Schema(id=generate_id(), name=name, fields=[], created_at=timestamp, updated_at=timestamp)
        logger.info(f"Created schema '{name}' ({schema.id})")
        return self.model_copy(update={'schemas': self.schemas + [schema]}), schema

    def delete_schema(self, schema_id: str) -> "Workspace":
        remaining = [s for s in self.schemas if s.id != schema_id]
        if len(remaining) == len(self.schemas):
            return self
        logger.info(f"Deleted schema {schema_id}")
        return self.model_copy(update={'schemas': remaining})

    def rename_schema(self, schema_id: str, name: str) -> "Workspace":
        schema = self.get_schema(schema_id)
        if schema is None or schema.name == name:
            return self
        return self._replace_schema(schema.model_copy(update={'name': name, 'updated_at': _now()}))

    def apply(self, schema_id: str, command: Command) -> "Workspace":
        """
        Run a tree command against a schema's fields.

        updated_at is refreshed only when the command changed the tree; a
        no-op command (or unknown schema id) returns this workspace as is.
        """
        schema = self.get_schema(schema_id)
        if schema is None:
            logger.debug(f"apply: unknown schema {schema_id}")
            return self

        fields = apply_command(schema.fields, command)
        if fields is schema.fields:
            return self
        return self._replace_schema(schema.model_copy(update={'fields': fields, 'updated_at': _now()}))

    def field_count(self) -> int:
        return sum(len(schema.fields) for schema in self.schemas)

    def to_json(self) -> str:
        """Serialize for the session store (camelCase keys, ISO timestamps)."""
        return self.model_dump_json(by_alias=True)

    @classmethod
    def from_json(cls, text: str) -> "Workspace":
        """
        Deserialize a workspace written by to_json, repairing field invariants.

        Rules are reconciled with the catalog, and ids that collide (across the
        whole workspace) or cannot appear in a path are reassigned.

        Raises:
            pydantic.ValidationError: If text is not a valid workspace document
        """
        workspace = cls.model_validate_json(text)
        taken: set = set()
        schemas = [
            schema.model_copy(update={'fields': ensure_unique_ids([normalize_field(f) for f in schema.fields], taken)})
            for schema in workspace.schemas
        ]
        return workspace.model_copy(update={'schemas': schemas})
