from datetime import datetime
from keyserver.core.config import settings
from keyserver.db import repository
from keyserver.schemas.keys import AdminKeyResponse, DailyKeyResponse, PremiumKeyResponse
from keyserver.schemas.stats import AccessLogResponse, AdminStatsResponse
from sqlalchemy.orm import Session


class Stats:
    def collect(db: Session, recent_limit: int = None) -> AdminStatsResponse:
        limit = recent_limit or settings.RECENT_ACCESS_LIMIT
        start_of_today = datetime.combine(datetime.utcnow().date(), datetime.min.time())

        return AdminStatsResponse(
            today_access=repository.count_access_logs(db, since=start_of_today),
            total_access=repository.count_access_logs(db),
            recent_accesses=[
                AccessLogResponse.model_validate(log)
                for log in repository.recent_access_logs(db, limit)
            ],
            daily_keys=[DailyKeyResponse.model_validate(k) for k in repository.list_daily_keys(db)],
            premium_keys=[PremiumKeyResponse.model_validate(k) for k in repository.list_premium_keys(db)],
            admin_keys=[AdminKeyResponse.model_validate(k) for k in repository.list_admin_keys(db)],
        )
