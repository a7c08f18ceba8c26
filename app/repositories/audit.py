"""Audit trail repository — append and read only."""


from app.domain.audit import AuditTrail
from app.repositories.base import BaseRepository


class AuditTrailRepository(BaseRepository[AuditTrail]):
    model = AuditTrail

    async def list_for_entity(self, entity_type: str, entity_id: str) -> list[AuditTrail]:
        result = await self._session.execute(
            self._base_query()
            .where(AuditTrail.entity_type == entity_type)
            .where(AuditTrail.entity_id == entity_id)
            .order_by(AuditTrail.created_at.asc())
        )
        return list(result.scalars().all())
