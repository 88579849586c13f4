from dataclasses import dataclass
from typing import Union

from models.user import User
from services.auth_service import AuthService
from utils.result import Result
from utils.validation import validate_email, validate_password, validate_passwords_match


@dataclass(frozen=True)
class SignedOut:
    pass


@dataclass(frozen=True)
class AuthLoading:
    pass


@dataclass(frozen=True)
class SignedIn:
    user: User


@dataclass(frozen=True)
class AuthError:
    message: str


AuthState = Union[SignedOut, AuthLoading, SignedIn, AuthError]


class AuthViewModel:
    def __init__(self, auth: AuthService):
        self._auth = auth
        user = auth.current_user
        self.state: AuthState = SignedIn(user) if user else SignedOut()

    @property
    def signed_in(self) -> bool:
        return isinstance(self.state, SignedIn)

    def login(self, email: str, password: str) -> AuthState:
        self.state = AuthLoading()
        self.state = self._from_result(self._auth.login(email, password))
        return self.state

    def register(self, email: str, password: str, confirm_password: str) -> AuthState:
        """Form checks run first; the provider is only called with valid input."""
        try:
            validate_email(email)
            validate_password(password)
            validate_passwords_match(password, confirm_password)
        except ValueError as e:
            self.state = AuthError(str(e))
            return self.state
        self.state = AuthLoading()
        self.state = self._from_result(self._auth.register(email, password))
        return self.state

    def logout(self) -> AuthState:
        self._auth.logout()
        self.state = SignedOut()
        return self.state

    @staticmethod
    def _from_result(result: Result) -> AuthState:
        if result.ok:
            return SignedIn(result.value)
        return AuthError(result.error or "Authentication failed")
