"""
Entry point wiring a complete registrar together.
"""

from typing import Any, Dict, Optional

from .config import RegistrarSettings
from .core.enums import ResultKind
from .core.ledger import RosterLedger
from .core.people import Admin
from .core.results import OperationResult
from .logging import get_logger, setup_logging
from .services import Catalog, Registry

logger = get_logger("main")


class RegistrationSystem:
    """One catalog and one registry sharing a relationship ledger."""

    def __init__(self, config: Optional[Dict[str, Any]] = None,
                 settings: Optional[RegistrarSettings] = None,
                 configure_logging: bool = False):
        self._settings = settings or RegistrarSettings.from_mapping(config)
        if configure_logging:
            setup_logging(level=self._settings.log_level)
        self._ledger = RosterLedger()
        self._catalog = Catalog(self._ledger, self._settings)
        self._registry = Registry(self._ledger, self._settings)
        logger.info("Registration system initialized (domain=%s)", self._settings.email_domain)

    @property
    def settings(self) -> RegistrarSettings:
        return self._settings

    @property
    def ledger(self) -> RosterLedger:
        return self._ledger

    @property
    def catalog(self) -> Catalog:
        return self._catalog

    @property
    def registry(self) -> Registry:
        return self._registry

    def bootstrap_admin(self, name: str) -> OperationResult:
        """Create the first administrator, holding every permission.

        Only allowed while the registry has no admin; later admins are
        created through an admin holding USER_MANAGEMENT.
        """
        if self._registry.admins():
            return OperationResult.fail(ResultKind.ALREADY_EXISTS, "An administrator already exists")
        result = self._registry.create_admin(name)
        if result.success:
            admin: Admin = result.value
            admin.grant_all_permissions()
            logger.info("Bootstrapped admin %s", admin.id)
        return result

    def get_statistics(self) -> Dict[str, Any]:
        """Get counts across the catalog and registry."""
        sections = self._catalog.sections()
        return {
            'courses': len(self._catalog.courses),
            'sections': len(sections),
            'full_sections': sum(1 for section in sections if section.is_full()),
            'enrollments': sum(section.enrolled_count() for section in sections),
            'students': len(self._registry.students()),
            'instructors': len(self._registry.instructors()),
            'admins': len(self._registry.admins()),
        }
