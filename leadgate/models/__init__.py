from leadgate.models.lead import LeadItem, LeadSource, utc_now_iso
from leadgate.models.tracking import (
    TrackingStatus,
    TRACKING_STATUSES,
    TERMINAL_STATUSES,
    normalize_tracking_status,
    is_terminal_tracking_status,
    compute_system_status,
)
