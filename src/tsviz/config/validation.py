"""Configuration validation for tsviz."""

from __future__ import annotations

from dataclasses import dataclass

from tsviz.config.models import TsvizConfig


@dataclass(frozen=True)
class ValidationError:
    """A configuration validation error."""

    path: str
    message: str


class ConfigValidator:
    """Validate TsvizConfig dataclass against schema."""

    def validate(self, config: TsvizConfig) -> list[ValidationError]:
        """Validate config, return list of errors (empty if valid)."""
        errors: list[ValidationError] = []

        if not _is_int(config.events.timezone_offset):
            errors.append(
                ValidationError(
                    "events.timezone_offset",
                    f"Offset {config.events.timezone_offset!r} is not an integer (milliseconds)",
                )
            )

        multiplier = config.availability.roll_up_multiplier
        if not _is_int(multiplier) or multiplier < 1:
            errors.append(
                ValidationError(
                    "availability.roll_up_multiplier",
                    f"Multiplier {multiplier!r} must be an integer >= 1",
                )
            )

        if not _is_int(config.availability.first_bucket_offset):
            errors.append(
                ValidationError(
                    "availability.first_bucket_offset",
                    f"Offset {config.availability.first_bucket_offset!r} is not an integer",
                )
            )

        indent = config.stdout.indent
        if not _is_int(indent) or indent < 0:
            errors.append(
                ValidationError("exporters.stdout.indent", f"Indent {indent!r} must be >= 0")
            )

        if not isinstance(config.stdout.sort_keys, bool):
            errors.append(
                ValidationError(
                    "exporters.stdout.sort_keys",
                    f"Value {config.stdout.sort_keys!r} is not a boolean",
                )
            )

        return errors


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)
