"""Comment system service layer.

Business logic for:
- Flat and hierarchical comment reads with thread annotation
- Polymorphic related entity resolution
- Cascading moderation flag updates
- Relation validation and bad words moderation
- Plugin configuration lookup (remote first, local fallback)
"""

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any, TypeVar

import structlog
from pydantic import BaseModel

from .cascade import CascadingFieldUpdater
from .constants import DEFAULT_POPULATE, ConfigParam
from .exceptions import NotFoundError
from .models import CascadeOutcome, Record, RecordId, RelationRef
from .moderation import ContentFilterFactory, build_content_filter, check_content
from .pagination import compile_pagination, compile_sort, with_total
from .related import RelatedEntityResolver
from .relations import parse_relation
from .sanitize import filter_out_resolved_reports, sanitize_comment_entity
from .schemas import FindAllInHierarchyParams, FindAllParams
from .store import RecordStore, RecordStoreRegistry, StoreQuery
from .threads import annotate_threads
from .tree import build_nested_structure


if TYPE_CHECKING:
    from comment_engine.config.settings import Settings

    from .config import ConfigPath, ConfigResolver
    from .store import ConfigStore


logger = structlog.get_logger(__name__)

ParamsT = TypeVar("ParamsT", bound=BaseModel)


def _coerce(params: ParamsT | Mapping[str, Any] | None, model: type[ParamsT]) -> ParamsT:
    if isinstance(params, model):
        return params
    return model.model_validate(dict(params or {}))


class CommentService:
    """Service for comment retrieval and moderation."""

    def __init__(
        self,
        registry: RecordStoreRegistry,
        config_resolver: "ConfigResolver",
        settings: "Settings | None" = None,
        content_filter_factory: ContentFilterFactory = build_content_filter,
    ):
        """Initialize with the record store registry and config resolver."""
        self.registry = registry
        self.config_resolver = config_resolver
        self.settings = settings or config_resolver.settings
        self.content_filter_factory = content_filter_factory
        self.model_uid = self.settings.comments_model_uid
        self.related_resolver = RelatedEntityResolver(registry)

    @property
    def comments(self) -> RecordStore:
        """Record store of the comment collection."""
        return self.registry.query(self.model_uid)

    # ==========================================================================
    # Configuration
    # ==========================================================================

    async def get_config(
        self,
        path: "ConfigPath" = None,
        default: Any = None,
        use_local: bool = False,
    ) -> Any:
        return await self.config_resolver.get_config(path, default, use_local)

    def get_local_config(self, path: "ConfigPath" = None, default: Any = None) -> Any:
        return self.config_resolver.get_local_config(path, default)

    async def get_plugin_store(self) -> "ConfigStore":
        return await self.config_resolver.get_plugin_store()

    # ==========================================================================
    # Reads
    # ==========================================================================

    async def find_all_flat(
        self,
        params: FindAllParams | Mapping[str, Any] | None = None,
        related_entity: Record | None = None,
    ) -> dict[str, Any]:
        """Find comments as a flat, annotated list.

        Args:
            params: Filters, population, sort and pagination.
            related_entity: Known target record (tagged with ``uid``). When
                given, no related entity lookups are made.

        Returns:
            ``{"data": [...]}`` plus ``"meta"`` when pagination was requested.
        """
        params = _coerce(params, FindAllParams)
        query = StoreQuery(
            where=dict(params.query),
            populate={**DEFAULT_POPULATE, **params.populate},
            order_by=compile_sort(params.sort),
        )

        meta: dict[str, Any] = {}
        pagination = compile_pagination(params.pagination)
        if pagination is not None:
            query.offset = pagination.offset
            query.limit = pagination.limit
            meta = pagination.meta

        store = self.comments
        entries = await store.find_many(query)

        if pagination is not None and pagination.with_count:
            total = await store.count(query.only_where())
            meta = with_total(pagination, total)

        threads = await annotate_threads(store, entries)

        if related_entity is not None:
            related_entities = [related_entity]
        else:
            related_entities = await self.find_related_entities_for(entries)
        has_related_entities_to_map = any(related_entities)

        blocked_props = await self.get_config(ConfigParam.BLOCKED_AUTHOR_PROPS.value, [])
        thread_of = params.query.get("threadOf")

        data = []
        for entry in entries:
            summary = threads.get(entry["id"])
            item = self.sanitize_comment_entity(
                {
                    **entry,
                    "threadOf": thread_of or entry.get("threadOf") or None,
                    "gotThread": summary.has_children if summary else False,
                    "threadFirstItemId": summary.first_child_id if summary else None,
                },
                blocked_props,
            )
            if has_related_entities_to_map:
                item = self.merge_related_entity_to(item, related_entities)
            data.append(item)

        logger.debug("comments_found", count=len(data), paginated=pagination is not None)

        result: dict[str, Any] = {"data": data}
        if meta:
            result["meta"] = meta
        return result

    async def find_all_in_hierarchy(
        self,
        params: FindAllInHierarchyParams | Mapping[str, Any] | None = None,
        related_entity: Record | None = None,
    ) -> list[Record]:
        """Find comments and nest them into reply trees."""
        params = _coerce(params, FindAllInHierarchyParams)
        flat = await self.find_all_flat(
            FindAllParams(query=params.query, populate=params.populate, sort=params.sort),
            related_entity,
        )
        return build_nested_structure(
            flat.get("data"),
            params.starting_from_id,
            "threadOf",
            params.drop_blocked_threads,
            False,
        )

    async def find_one(self, criteria: Mapping[str, Any]) -> Record:
        """Find a single comment with its unresolved reports.

        Raises:
            NotFoundError: If no comment matches ``criteria``.
        """
        entity = await self.comments.find_one(
            StoreQuery(
                where=dict(criteria),
                populate={"reports": True, "authorUser": True},
            )
        )
        if not entity:
            raise NotFoundError()
        blocked_props = await self.get_config(ConfigParam.BLOCKED_AUTHOR_PROPS.value, [])
        return filter_out_resolved_reports(self.sanitize_comment_entity(entity, blocked_props))

    # ==========================================================================
    # Related entities
    # ==========================================================================

    async def find_related_entities_for(self, entities: Sequence[Record] = ()) -> list[Record]:
        return await self.related_resolver.find_related_entities_for(entities)

    def merge_related_entity_to(self, entity: Record, related_entities: Sequence[Record] = ()) -> Record:
        return self.related_resolver.merge_related_entity_to(entity, related_entities)

    # ==========================================================================
    # Moderation
    # ==========================================================================

    def _cascade_updater(self) -> CascadingFieldUpdater:
        return CascadingFieldUpdater(self.comments, max_depth=self.settings.comments_cascade_max_depth)

    async def cascade_field_update(self, root_id: RecordId, field_name: str, value: Any) -> bool:
        """Set ``field_name = value`` on every reply below ``root_id``.

        Never raises. ``True`` does not distinguish "no replies" from a
        full or partial update; see ``cascade_field_update_detailed``.
        """
        return await self._cascade_updater().cascade_field_update(root_id, field_name, value)

    async def cascade_field_update_detailed(
        self,
        root_id: RecordId,
        field_name: str,
        value: Any,
    ) -> CascadeOutcome:
        return await self._cascade_updater().cascade(root_id, field_name, value)

    async def check_bad_words(self, content: str | None) -> str | None:
        """Return ``content`` unless the bad words filter rejects it.

        Raises:
            PolicyViolationError: With original and filtered text.
        """
        config = await self.get_config(ConfigParam.BAD_WORDS.value, True)
        return check_content(content, self.content_filter_factory(config))

    async def parse_relation_string(self, relation: str) -> RelationRef:
        """Decode a relation token and check its collection is enabled.

        Raises:
            InvalidRelationError: Malformed token.
            ForbiddenError: Collection not in ``enabledCollections``.
        """
        return await parse_relation(relation, self.config_resolver)

    # ==========================================================================
    # Shaping
    # ==========================================================================

    def sanitize_comment_entity(self, entity: Record, blocked_props: Sequence[str] = ()) -> Record:
        return sanitize_comment_entity(entity, blocked_props)

    def filter_out_resolved_reports(self, entity: Record | None) -> Record | None:
        return filter_out_resolved_reports(entity)

    @staticmethod
    def is_valid_user_context(user: Any) -> bool:
        """Anonymous calls are valid; a given user must carry an id."""
        if not user:
            return True
        user_id = user.get("id") if isinstance(user, Mapping) else getattr(user, "id", None)
        return user_id is not None
