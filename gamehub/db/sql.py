import logging

from slugify import slugify


logger = logging.getLogger(__name__)


DDL = """
CREATE TABLE IF NOT EXISTS users (
  id SERIAL PRIMARY KEY,
  username VARCHAR(50) NOT NULL UNIQUE,
  role VARCHAR(20) NOT NULL DEFAULT 'STUDENT',
  created_at TIMESTAMPTZ NOT NULL DEFAULT now()
);

CREATE TABLE IF NOT EXISTS game_templates (
  id SERIAL PRIMARY KEY,
  slug VARCHAR(64) NOT NULL UNIQUE,
  name VARCHAR(128) NOT NULL
);

CREATE TABLE IF NOT EXISTS games (
  id VARCHAR(36) PRIMARY KEY,               -- uuid4, generated by the service
  game_template_id INT NOT NULL REFERENCES game_templates(id),
  creator_id INT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
  name VARCHAR(128) NOT NULL,
  description VARCHAR(256),
  thumbnail_image VARCHAR(512) NOT NULL,
  is_published BOOLEAN NOT NULL DEFAULT false,
  game_json JSON NOT NULL,                  -- dataset, shape depends on template
  created_at TIMESTAMP NOT NULL DEFAULT now(),
  updated_at TIMESTAMP NOT NULL DEFAULT now(),
  CONSTRAINT uq_games_template_name UNIQUE (game_template_id, name)
);

CREATE INDEX IF NOT EXISTS ix_games_game_template_id ON games(game_template_id);
CREATE INDEX IF NOT EXISTS ix_games_creator_id ON games(creator_id);
"""

# game types the game list knows about; rows must exist before games of that type
GAME_TEMPLATE_NAMES = ["Speed Sorting", "Quiz", "Pair or No Pair"]

SEED_TEMPLATE_SQL = """
INSERT INTO game_templates (slug, name) VALUES ($1, $2)
ON CONFLICT (slug) DO NOTHING
"""


def template_rows(names=GAME_TEMPLATE_NAMES) -> list[tuple[str, str]]:
    return [(slugify(name), name) for name in names]


async def bootstrap_schema(conn) -> None:
    await conn.execute(DDL)
    rows = template_rows()
    await conn.executemany(SEED_TEMPLATE_SQL, rows)
    logger.info("Schema ready, game templates: %s", ", ".join(slug for slug, _ in rows))
