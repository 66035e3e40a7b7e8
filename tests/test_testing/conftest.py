"""Import fixtures from request_authz.testing for test discovery."""

from request_authz.testing._fixtures import authz_resolver, authz_service, isolated_authz_state

__all__ = ["authz_resolver", "authz_service", "isolated_authz_state"]
