"""Editor configuration.

Settings are read from ARTICLE_EDITOR_* environment variables, falling back
to defaults suitable for the article editor.
"""

from __future__ import annotations

import os

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from article_editor.models import ValidationError

# Environment variable prefix for all settings
ENV_PREFIX = "ARTICLE_EDITOR_"

_ENV_FIELDS = {
    "DEFAULT_IMAGE_WIDTH": "default_image_width",
    "DEFAULT_IMAGE_HEIGHT": "default_image_height",
    "MIN_IMAGE_SIZE": "min_image_size",
    "HISTORY_LIMIT": "history_limit",
    "CONFIRM_LINKS": "confirm_links",
}


class EditorSettings(BaseModel):
    """Tunable editor behaviour.

    Attributes:
        default_image_width: Width given to inserted images without explicit size
        default_image_height: Height given to inserted images without explicit size
        min_image_size: Lower clamp for dimensions produced by resizing
        history_limit: Maximum number of undo steps kept
        confirm_links: Route link insertion through a confirmation modal
        link_prompt_default: Text pre-filled in the link URL prompt
    """

    default_image_width: float = Field(default=300.0, gt=0)
    default_image_height: float = Field(default=150.0, gt=0)
    min_image_size: float = Field(default=1.0, gt=0)
    history_limit: int = Field(default=100, ge=0)
    confirm_links: bool = False
    link_prompt_default: str = "https://"

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> EditorSettings:
        """Build settings from environment variables.

        Args:
            environ: Mapping to read from (default: os.environ)

        Returns:
            EditorSettings with overrides applied

        Raises:
            ValidationError: If an environment value is invalid
        """
        source = os.environ if environ is None else environ
        overrides: dict[str, str] = {}
        for suffix, field_name in _ENV_FIELDS.items():
            value = source.get(f"{ENV_PREFIX}{suffix}")
            if value is not None and value != "":
                overrides[field_name] = value

        try:
            return cls.model_validate(overrides)
        except PydanticValidationError as e:
            raise ValidationError(
                f"Invalid editor settings in environment: {e.errors()[0]['msg']}",
                details={"overrides": overrides},
            ) from e
