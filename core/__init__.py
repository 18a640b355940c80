"""RepRing core library — daily rep ledger, fasting tracker, calendar model.

Public API re-exports for convenient imports:
    from core import open_tracker, streak, build_month, ...
"""

# Workspace & clock
from core.workspace import (
    workspace_root,
    get_user_timezone,
    now_local,
    today_str,
    as_local,
    resolve_timezone,
    settings_path,
    data_dir,
    hooks_config_path,
)

# File I/O
from core.fileio import (
    read_text,
    read_json,
    read_yaml,
    write_json_atomic,
    write_yaml_atomic,
)

# Settings & logging
from core.settings import Settings, load_settings, init_workspace
from core.app_logging import configure_logging

# Storage
from core.store import (
    LEDGER_KEY,
    FASTING_KEY,
    KeyValueStore,
    JsonFileStore,
    MemoryStore,
    open_store,
)

# Models
from core.models import (
    GOAL,
    HISTORY_LIMIT,
    SetCountResult,
    Ledger,
    ActiveFast,
    FastRecord,
    FastState,
    DayCell,
)

# Daily log ledger
from core.ledger import (
    clamp_count,
    get_count,
    set_count,
    add_count,
    streak,
    total,
    load_ledger,
    save_ledger,
)

# Fasting
from core.fasting import (
    FastingError,
    start_fast,
    end_fast,
    elapsed,
    progress_fraction,
    recent_history,
    format_elapsed,
    format_duration_short,
    fasting_stats,
    load_fast_state,
    save_fast_state,
)

# Calendar
from core.calendar_view import DAY_NAMES, build_month, day_status, shift_month, month_label

# Tick scheduling
from core.ticker import FastTicker

# Application context
from core.tracker import Tracker, open_tracker, parse_amount
