"""
Application context: settings loaded once and passed explicitly to the code
that needs them (message composition, reports).

get_app_context() loads lazily on first use; update_settings() writes through
and reloads, so readers never see a half-updated context.
"""
import logging
import threading
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

DEFAULTS = {
    'teacher_name': 'محمد مجدي',
    'system_name': 'نظام إدارة السنتر',
    'teacher_phone': '',
    'sms_enabled': 'false',
    'sms_provider': '',
}


@dataclass(frozen=True)
class AppContext:
    teacher_name: str = DEFAULTS['teacher_name']
    system_name: str = DEFAULTS['system_name']
    teacher_phone: str = ''
    sms_enabled: bool = False
    sms_provider: str = ''
    extra: dict = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, values):
        merged = {**DEFAULTS, **{k: v for k, v in values.items() if v not in (None, '')}}
        known = {'teacher_name', 'system_name', 'teacher_phone', 'sms_enabled', 'sms_provider'}
        return cls(
            teacher_name=merged['teacher_name'],
            system_name=merged['system_name'],
            teacher_phone=merged['teacher_phone'],
            sms_enabled=str(merged['sms_enabled']).lower() == 'true',
            sms_provider=merged['sms_provider'],
            extra={k: v for k, v in merged.items() if k not in known},
        )

    @classmethod
    def load(cls):
        from core.models import AppSetting
        values = dict(AppSetting.objects.values_list('key', 'value'))
        logger.debug(f"[app_context] Loaded {len(values)} settings")
        return cls.from_mapping(values)


_lock = threading.Lock()
_context = None


def get_app_context():
    global _context
    with _lock:
        if _context is None:
            _context = AppContext.load()
        return _context


def invalidate_app_context():
    global _context
    with _lock:
        _context = None


def update_settings(updates):
    """
    Write {key: value} pairs and reload the context.
    Unknown keys are created. Returns the fresh AppContext.
    """
    from django.db import transaction
    from core.models import AppSetting

    with transaction.atomic():
        for key, value in updates.items():
            AppSetting.objects.update_or_create(key=key, defaults={'value': '' if value is None else str(value)})
    invalidate_app_context()
    logger.info(f"[app_context] Updated settings: {sorted(updates)}")
    return get_app_context()
