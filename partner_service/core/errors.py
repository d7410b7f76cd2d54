from __future__ import annotations


class PartnerServiceError(Exception):
    """Base for operational failures. Never carries field violations."""


class ServiceConnectionError(PartnerServiceError):
    def __init__(self, service: str, detail: str | None = None):
        self.service = service
        self.detail = detail
        msg = f"failed to connect {service} service"
        if detail:
            msg = f"{msg}: {detail}"
        super().__init__(msg)


class CacheError(PartnerServiceError):
    pass


class CredentialError(PartnerServiceError):
    """Credential generation or encryption failed."""


class MaximumRequestError(PartnerServiceError):
    def __init__(self, limit: int, ceiling: int):
        self.limit = limit
        self.ceiling = ceiling
        super().__init__(f"cannot exceed maximum page limit ({limit} > {ceiling})")


class ErrorCodeNotFound(LookupError):
    pass
