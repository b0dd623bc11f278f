"""Database schema for the Ape Gym store.

The schema is split in three scripts. The tables other than users come
first, then the migrations run, then users and the indexes. Migrations
therefore see an old database as it was left: a missing users table next to
a leftover users_old can still be restored, and older releases gain their
new columns before any index refers to them.
"""

USER_ROLES = ("aluno", "professor", "admin")
CHALLENGE_FREQUENCIES = ("daily", "weekly")

USERS_TABLE = """
CREATE TABLE IF NOT EXISTS users (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    email TEXT NOT NULL UNIQUE,
    role TEXT NOT NULL CHECK(role IN ('aluno','professor','admin')),
    password_hash TEXT NOT NULL,
    phone TEXT,
    birthdate TEXT,
    avatar_url TEXT,
    address_line1 TEXT,
    address_line2 TEXT,
    city TEXT,
    state TEXT,
    zip TEXT,
    country TEXT,
    created_at TEXT NOT NULL,
    updated_at TEXT
)
"""

TABLES = """
-- Workouts: templates (user_id NULL, is_template 1) and per-student copies
CREATE TABLE IF NOT EXISTS workouts (
    id TEXT PRIMARY KEY,
    title TEXT NOT NULL,
    objective TEXT NOT NULL,
    week_start TEXT,
    user_id TEXT,
    is_template INTEGER NOT NULL DEFAULT 0,
    parent_workout_id TEXT,
    assigned_at TEXT,
    created_by TEXT NOT NULL,
    created_at TEXT NOT NULL,
    FOREIGN KEY(user_id) REFERENCES users(id),
    FOREIGN KEY(parent_workout_id) REFERENCES workouts(id),
    FOREIGN KEY(created_by) REFERENCES users(id)
);

-- Ordered exercise rows of a workout
CREATE TABLE IF NOT EXISTS workout_items (
    id TEXT PRIMARY KEY,
    workout_id TEXT NOT NULL,
    name TEXT NOT NULL,
    sets INTEGER,
    reps TEXT,
    weight TEXT,
    rest_seconds INTEGER,
    notes TEXT,
    order_index INTEGER NOT NULL DEFAULT 0,
    FOREIGN KEY(workout_id) REFERENCES workouts(id)
);

-- Point-earning challenges (user_id NULL = every student)
CREATE TABLE IF NOT EXISTS challenges (
    id TEXT PRIMARY KEY,
    title TEXT NOT NULL,
    points INTEGER NOT NULL,
    frequency TEXT NOT NULL CHECK(frequency IN ('daily','weekly')),
    active_from TEXT,
    active_to TEXT,
    user_id TEXT,
    created_by TEXT NOT NULL,
    created_at TEXT NOT NULL,
    FOREIGN KEY(user_id) REFERENCES users(id),
    FOREIGN KEY(created_by) REFERENCES users(id)
);

-- One row per user/challenge/period key
CREATE TABLE IF NOT EXISTS challenge_completions (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL,
    challenge_id TEXT NOT NULL,
    completed_at TEXT NOT NULL,
    UNIQUE(user_id, challenge_id, completed_at),
    FOREIGN KEY(user_id) REFERENCES users(id),
    FOREIGN KEY(challenge_id) REFERENCES challenges(id)
);

-- Single-use password reset tokens (only the SHA-256 of the token is kept)
CREATE TABLE IF NOT EXISTS password_reset_tokens (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL,
    token_hash TEXT NOT NULL UNIQUE,
    expires_at TEXT NOT NULL,
    used_at TEXT,
    created_at TEXT NOT NULL,
    FOREIGN KEY(user_id) REFERENCES users(id)
);
"""

INDEXES = """
CREATE INDEX IF NOT EXISTS idx_users_role ON users(role);
CREATE INDEX IF NOT EXISTS idx_workouts_user_id ON workouts(user_id);
CREATE INDEX IF NOT EXISTS idx_workouts_is_template ON workouts(is_template);
CREATE INDEX IF NOT EXISTS idx_workouts_parent_id ON workouts(parent_workout_id);
CREATE INDEX IF NOT EXISTS idx_workout_items_workout_id ON workout_items(workout_id);
CREATE INDEX IF NOT EXISTS idx_challenges_user_id ON challenges(user_id);
CREATE INDEX IF NOT EXISTS idx_completions_user_id ON challenge_completions(user_id);
CREATE INDEX IF NOT EXISTS idx_completions_challenge_id ON challenge_completions(challenge_id);
CREATE INDEX IF NOT EXISTS idx_reset_tokens_user_id ON password_reset_tokens(user_id);
"""
