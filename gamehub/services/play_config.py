from __future__ import annotations

from typing import Any, Mapping

from pydantic import ValidationError as PydanticValidationError

from gamehub.core.errors import ValidationError
from gamehub.schemas.speed_sorting import DEFAULT_COUNT_DOWN_SECONDS, PlayConfig, PlayConfigIn


def resolve_play_config(raw: Mapping[str, Any]) -> PlayConfig:
    """
    Validate the runtime config a player sends before starting a round.

    COUNT_DOWN without an explicit duration falls back to 60 seconds; the
    other timer modes always resolve to a null duration.
    """
    try:
        cfg = PlayConfigIn.model_validate(raw)
    except PydanticValidationError as exc:
        errors = exc.errors(include_url=False, include_context=False)
        fields = sorted({".".join(str(p) for p in e["loc"]) or "config" for e in errors})
        raise ValidationError(
            f"Invalid play config: {', '.join(fields)}",
            details=errors,
        ) from exc

    duration = None
    if cfg.timer_mode == "COUNT_DOWN":
        duration = cfg.timer_duration or DEFAULT_COUNT_DOWN_SECONDS

    return PlayConfig(
        timer_mode=cfg.timer_mode,
        timer_duration=duration,
        speed=cfg.speed,
        lives=cfg.lives,
    )
