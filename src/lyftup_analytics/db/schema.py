"""Database schema for workout sessions and profile counters."""

SCHEMA = """
-- One row per workout session; the full session document is kept as JSON
CREATE TABLE IF NOT EXISTS workout_sessions (
    id TEXT NOT NULL,
    user_id TEXT NOT NULL DEFAULT 'default',
    routine_name TEXT,
    start_time REAL NOT NULL,  -- Seconds since 1970
    is_completed INTEGER NOT NULL DEFAULT 0,
    document TEXT NOT NULL,
    updated_at TEXT DEFAULT CURRENT_TIMESTAMP,
    PRIMARY KEY (user_id, id)
);

CREATE INDEX IF NOT EXISTS idx_sessions_user_start
ON workout_sessions(user_id, start_time);

-- Denormalized counters shown on the profile screen
CREATE TABLE IF NOT EXISTS user_profile (
    id TEXT PRIMARY KEY,
    username TEXT DEFAULT '',
    total_workouts INTEGER DEFAULT 0,
    total_weight_lifted REAL DEFAULT 0,
    last_workout_date REAL,  -- Seconds since 1970
    updated_at TEXT DEFAULT CURRENT_TIMESTAMP
);
"""
