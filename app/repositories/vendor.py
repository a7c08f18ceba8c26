"""Vendor account repository."""


from app.domain.vendor import VendorAccount
from app.repositories.base import BaseRepository


class VendorAccountRepository(BaseRepository[VendorAccount]):
    model = VendorAccount

    async def get_by_owner(self, owner_id: str) -> VendorAccount | None:
        result = await self._session.execute(
            self._base_query().where(VendorAccount.owner_id == owner_id)
        )
        return result.scalars().first()
