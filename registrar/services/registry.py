"""
Identity store: authentication, uniqueness and credential generation.
"""

import random
import re
import threading
from typing import Dict, List, Optional, Union

from ..config import RegistrarSettings
from ..core.enums import ResultKind, RoleKind
from ..core.exceptions import InvalidNameError
from ..core.ledger import RosterLedger
from ..core.people import Account, Admin, Identity, Instructor, Student
from ..core.results import OperationResult
from ..core.sequences import Sequence
from ..logging import get_logger

logger = get_logger("services.registry")


def split_name(name: str) -> List[str]:
    """Split ``name`` into its first and last token or raise ``InvalidNameError``."""
    if not isinstance(name, str):
        raise InvalidNameError(name)
    tokens = name.split()
    if len(tokens) != 2:
        raise InvalidNameError(name)
    return tokens


def title_case(name: str) -> str:
    return " ".join(token[:1].upper() + token[1:].lower() for token in name.split())


class Registry:
    """All user accounts of one registrar.

    Ids come from one sequence per role, each seeded in its own numeric
    band, so an id alone tells which role it belongs to. Emails are unique.
    """

    def __init__(self, ledger: RosterLedger, settings: Optional[RegistrarSettings] = None,
                 rng: Optional[random.Random] = None):
        self._settings = settings or RegistrarSettings()
        self._ledger = ledger
        self._rng = rng or random.Random()
        self._sequences: Dict[RoleKind, Sequence] = {
            role: Sequence(self._settings.id_seed_for(role)) for role in RoleKind
        }
        self._accounts: List[Account] = []
        self._override_accounts: Dict[str, Account] = {}
        self._lock = threading.RLock()

    @property
    def domain(self) -> str:
        return self._settings.email_domain

    @property
    def accounts(self) -> List[Account]:
        with self._lock:
            return list(self._accounts)

    def students(self) -> List[Student]:
        return [account for account in self.accounts if isinstance(account, Student)]

    def instructors(self) -> List[Instructor]:
        return [account for account in self.accounts if isinstance(account, Instructor)]

    def admins(self) -> List[Admin]:
        return [account for account in self.accounts if isinstance(account, Admin)]

    # Authentication

    def authenticate(self, email: str, password: str) -> Optional[Account]:
        """Return the account matching both email and password, or None.

        Bootstrap override logins are checked first and never touch the
        stored accounts.
        """
        override = self._override_login(email, password)
        if override is not None:
            logger.warning("Override login used for %s", email)
            return override
        with self._lock:
            for account in self._accounts:
                if account.email == email and account.identity.check_password(password):
                    logger.info("Authenticated %s", account.id)
                    return account
        logger.info("Authentication failed for %s", email)
        return None

    def change_password(self, account: Account, new_password: str) -> None:
        account.identity.change_password(new_password)
        logger.info("Password changed for %s", account.id)

    def _override_login(self, email: str, password: str) -> Optional[Account]:
        if not self._settings.enable_override_logins:
            return None
        login = self._settings.override_logins.get(email)
        if login is None or login.password != password:
            return None
        with self._lock:
            account = self._override_accounts.get(email)
            if account is None:
                account = self._build_account(login.role, login.name, email, login.password,
                                              needs_password_reset=False)
                if isinstance(account, Admin):
                    account.grant_all_permissions()
                self._override_accounts[email] = account
            return account

    # Membership

    def add_identity(self, account: Optional[Account]) -> OperationResult:
        if not isinstance(account, Account):
            return OperationResult.fail(ResultKind.INVALID, "Invalid User")
        with self._lock:
            for existing in self._accounts:
                if existing is account:
                    return OperationResult.fail(ResultKind.ALREADY_EXISTS, "User already exists", user_id=account.id)
                if existing.id == account.id:
                    return OperationResult.fail(ResultKind.DUPLICATE_ID, f"User id {account.id} already exists",
                                                user_id=account.id)
                if existing.email.lower() == account.email.lower():
                    return OperationResult.fail(ResultKind.ALREADY_EXISTS, f"Email {account.email} already in use",
                                                email=account.email)
            # Removed accounts keep their id in the ledger.
            bound = self._ledger.account(account.id)
            if bound is not None and bound is not account:
                return OperationResult.fail(ResultKind.DUPLICATE_ID, f"User id {account.id} already exists",
                                            user_id=account.id)
            self._ledger.register_account(account)
            self._accounts.append(account)
        logger.info("Added %s %s (%s)", account.role.value, account.id, account.email)
        return OperationResult.ok(f"{account.role.value.capitalize()} {account.name} added.", value=account)

    def remove_identity(self, account: Optional[Account]) -> OperationResult:
        """Remove an account. Sections it teaches or attends keep referring to it."""
        with self._lock:
            if account is None or not any(existing is account for existing in self._accounts):
                return OperationResult.fail(ResultKind.NOT_FOUND, "User does not exist.")
            self._accounts.remove(account)
        logger.info("Removed %s %s", account.role.value, account.id)
        return OperationResult.ok(f"{account.name} removed.", value=account)

    def find_by_id_or_email(self, value: str) -> Optional[Account]:
        with self._lock:
            for account in self._accounts:
                if account.email == value or account.id == value:
                    return account
            return None

    def infer_role(self, identifier: Union[str, int]) -> Optional[RoleKind]:
        """Tell the role from an id's numeric band."""
        try:
            number = int(identifier)
        except (TypeError, ValueError):
            return None
        for role in RoleKind:
            seed = self._settings.id_seed_for(role)
            if seed < number <= seed + self._settings.id_band_size:
                return role
        return None

    # Account creation

    def create_student(self, name: str, advising_hold: bool = False) -> OperationResult:
        return self._create(RoleKind.STUDENT, name, advising_hold=advising_hold)

    def create_instructor(self, name: str) -> OperationResult:
        return self._create(RoleKind.INSTRUCTOR, name)

    def create_admin(self, name: str) -> OperationResult:
        return self._create(RoleKind.ADMIN, name)

    def _create(self, role: RoleKind, name: str, advising_hold: bool = False) -> OperationResult:
        try:
            name = title_case(" ".join(split_name(name)))
        except InvalidNameError as e:
            return OperationResult.fail(ResultKind.INVALID_NAME, e.message, name=e.name)
        with self._lock:
            email = self.generate_email(name)
            password = self.generate_default_password(name)
            account = self._build_account(role, name, email, password, advising_hold=advising_hold)
            result = self.add_identity(account)
        if result.success:
            result.metadata.update({'email': email, 'default_password': password})
        return result

    def _build_account(self, role: RoleKind, name: str, email: str, password: str,
                       needs_password_reset: bool = True, advising_hold: bool = False) -> Account:
        identity = Identity(
            str(self._sequences[role].next()), name, email, password, role,
            needs_password_reset=needs_password_reset,
        )
        if role is RoleKind.STUDENT:
            return Student(identity, self._ledger, advising_hold=advising_hold)
        if role is RoleKind.INSTRUCTOR:
            return Instructor(identity, self._ledger)
        return Admin(identity)

    def set_all_advising_holds(self, advising_hold: bool = True) -> OperationResult:
        students = self.students()
        for student in students:
            student.set_advising_hold(advising_hold)
        return OperationResult.ok(f"Updated advising holds for {len(students)} students", value=len(students))

    # Credential generation

    def generate_email(self, name: str) -> str:
        """First initial plus last name, numbered past any existing clash.

        ``Jane Doe`` becomes ``jdoe@<domain>``; once that is taken the next
        one is ``jdoe1``, then ``jdoe2``, always one past the highest suffix
        in use.
        """
        first, last = split_name(name)
        base = (first[0] + last).lower()
        pattern = re.compile(rf"^{re.escape(base)}(\d*)@", re.IGNORECASE)
        suffixes = []
        with self._lock:
            for account in self._accounts:
                match = pattern.match(account.email)
                if match:
                    suffixes.append(int(match.group(1) or 0))
        if not suffixes:
            return f"{base}@{self.domain}"
        return f"{base}{max(suffixes) + 1}@{self.domain}"

    def generate_default_password(self, name: str) -> str:
        """Placeholder credential: first name plus four random digits.

        Not a secret worth protecting; accounts created with it must change
        it at first login.
        """
        first, _ = split_name(name)
        return f"{first}{self._rng.randint(self._settings.password_min, self._settings.password_max)}"
