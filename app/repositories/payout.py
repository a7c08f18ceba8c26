"""Payout request repository."""


from app.domain.payout import PayoutRequest
from app.repositories.base import BaseRepository


class PayoutRequestRepository(BaseRepository[PayoutRequest]):
    model = PayoutRequest
