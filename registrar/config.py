"""
Settings for a registrar instance.
"""

import os
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, Field, ValidationError as PydanticValidationError, model_validator

from .core.enums import RoleKind
from .core.exceptions import ConfigurationError

ENV_PREFIX = "REGISTRAR_"


class OverrideLogin(BaseModel):
    """Fixed bootstrap credential that bypasses the registry."""
    role: RoleKind
    password: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)


def default_override_logins() -> Dict[str, OverrideLogin]:
    return {
        "adminoveride": OverrideLogin(role=RoleKind.ADMIN, password="adminoveride", name="Admin"),
        "studentoveride": OverrideLogin(role=RoleKind.STUDENT, password="studentoveride", name="Student"),
        "instructoroveride": OverrideLogin(role=RoleKind.INSTRUCTOR, password="instructoroveride", name="Instructor"),
    }


class RegistrarSettings(BaseModel):
    """Identifier bands, credential rules and bootstrap logins."""
    email_domain: str = Field("university.edu", min_length=1)
    student_id_seed: int = Field(800999999, ge=0)
    instructor_id_seed: int = Field(801999999, ge=0)
    admin_id_seed: int = Field(802999999, ge=0)
    id_band_size: int = Field(1000000, gt=0)
    reference_number_base: int = Field(10000, ge=0)
    reference_number_width: int = Field(5, ge=1)
    section_number_width: int = Field(3, ge=1)
    password_min: int = Field(1000, ge=0)
    password_max: int = Field(9999, ge=0)
    enable_override_logins: bool = True
    override_logins: Dict[str, OverrideLogin] = Field(default_factory=default_override_logins)
    log_level: str = "INFO"

    @model_validator(mode="after")
    def _check_ranges(self) -> "RegistrarSettings":
        if self.password_min > self.password_max:
            raise ValueError("password_min must not exceed password_max")
        seeds = sorted([self.student_id_seed, self.instructor_id_seed, self.admin_id_seed])
        if len(set(seeds)) != 3:
            raise ValueError("Each role needs its own id seed")
        if any(high - low < self.id_band_size for low, high in zip(seeds, seeds[1:])):
            raise ValueError("Id seeds must be at least id_band_size apart")
        self.email_domain = self.email_domain.lstrip("@").lower()
        return self

    def id_seed_for(self, role: RoleKind) -> int:
        return {
            RoleKind.STUDENT: self.student_id_seed,
            RoleKind.INSTRUCTOR: self.instructor_id_seed,
            RoleKind.ADMIN: self.admin_id_seed,
        }[role]

    @classmethod
    def from_mapping(cls, config: Optional[Mapping[str, Any]] = None) -> "RegistrarSettings":
        """Build settings from a plain dict, raising ``ConfigurationError`` on bad values."""
        try:
            return cls(**dict(config or {}))
        except PydanticValidationError as e:
            raise ConfigurationError(f"Invalid registrar configuration: {e}", details={'errors': e.errors()})

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None,
                 **overrides: Any) -> "RegistrarSettings":
        """Read ``REGISTRAR_<FIELD>`` variables; keyword overrides win."""
        environ = os.environ if environ is None else environ
        config: Dict[str, Any] = {}
        for name in cls.model_fields:
            if name == "override_logins":
                continue
            key = f"{ENV_PREFIX}{name.upper()}"
            if key in environ:
                config[name] = environ[key]
        config.update(overrides)
        return cls.from_mapping(config)
