from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from .application.use_cases.authenticate import extract_bearer_token
from .domain.constants import DEFAULT_ALGORITHM, DEFAULT_HEADER_NAME, HMAC_ALGORITHMS
from .domain.exceptions import InvalidConfigError
from .domain.ports import RequestValidator, TokenExtractor


@dataclass(frozen=True, slots=True)
class AuthSettings:
    """
    Bearer-token authentication settings.

    Host code decides how to construct this (env, config file, etc.).
    Validation happens here so a bad deployment fails before serving.
    """
    signing_key: str
    header_name: str = DEFAULT_HEADER_NAME
    algorithm: str = DEFAULT_ALGORITHM
    exclude_paths: Iterable[str] = ()
    exclude_prefixes: Iterable[str] = ()
    exempt_options: bool = True

    # Claim holding the identity; also the key it is stored under on the
    # request. Defaults to header_name.
    context_key: Optional[str] = None

    extractor: TokenExtractor = extract_bearer_token
    # None -> built-in AuthenticateRequestUseCase
    validator: Optional[RequestValidator] = None

    def __post_init__(self) -> None:
        if not self.signing_key:
            raise InvalidConfigError("bearer authentication requires a signing key")
        if not self.header_name:
            raise InvalidConfigError("header_name must not be empty")
        if self.algorithm not in HMAC_ALGORITHMS:
            raise InvalidConfigError(
                f"Unsupported signing algorithm {self.algorithm!r}; "
                f"expected one of {sorted(HMAC_ALGORITHMS)}"
            )

        object.__setattr__(self, "exclude_paths", frozenset(self.exclude_paths))
        object.__setattr__(self, "exclude_prefixes", tuple(self.exclude_prefixes))
        if not self.context_key:
            object.__setattr__(self, "context_key", self.header_name)
