from promotions.repositories.audit_log_repository import AuditLogRepository
from promotions.repositories.discount_repository import DiscountRepository
from promotions.repositories.metrics_repository import MetricsRepository
from promotions.repositories.setting_repository import SettingRepository
from promotions.repositories.usage_repository import UsageRepository

__all__ = [
    "AuditLogRepository",
    "DiscountRepository",
    "MetricsRepository",
    "SettingRepository",
    "UsageRepository",
]
