from fastapi import Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from moccam.core.deps import AuthorizationService
from moccam.db.models.database import Leaderboard, User
from moccam.db.session import get_session

TOP_LIMIT = 10


class LeaderboardService:
    def __init__(self, db: AsyncSession = Depends(get_session)):
        self.db = db

    @staticmethod
    def _base_stmt():
        return (
            select(Leaderboard, User.full_name)
            .join(User, User.user_id == Leaderboard.user_id)
            .order_by(
                Leaderboard.total_points.desc(),
                Leaderboard.streak_days.desc(),
                Leaderboard.last_updated.desc(),
            )
        )

    @staticmethod
    def _to_dict(board: Leaderboard, full_name: str) -> dict:
        return {
            "user_id": board.user_id,
            "full_name": full_name,
            "total_points": board.total_points,
            "streak_days": board.streak_days,
            "last_updated": board.last_updated,
        }

    async def get_top_async(self, limit: int = TOP_LIMIT):
        rows = (await self.db.execute(self._base_stmt().limit(limit))).all()
        return [self._to_dict(*row) for row in rows]

    async def get_user_entry_async(self, user_id: int, viewer: User):
        if not AuthorizationService.is_staff(viewer) and viewer.user_id != user_id:
            raise HTTPException(403, "You can only view your own leaderboard info")

        row = (
            await self.db.execute(self._base_stmt().where(Leaderboard.user_id == user_id))
        ).first()
        if not row:
            raise HTTPException(404, "User not found in leaderboard")
        return self._to_dict(*row)
