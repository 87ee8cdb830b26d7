"""
Error types and helpers shared by the plugin endpoints
"""
from fastapi import HTTPException, status
from typing import Optional


class PluginAPIError(HTTPException):
    """Base error rendered as a structured REST error ({code, message, data})"""
    code: str = "rest_error"

    def __init__(self, message: str, status_code: int, code: Optional[str] = None):
        super().__init__(status_code=status_code, detail=message)
        if code:
            self.code = code

    @property
    def message(self) -> str:
        return self.detail

    def to_dict(self) -> dict:
        return {
            "code": self.code,
            "message": self.message,
            "data": {"status": self.status_code},
        }


class UnauthorizedError(PluginAPIError):
    """Raised when the caller is not authenticated"""
    code = "rest_forbidden"

    def __init__(self, message: str = "Could not validate credentials"):
        super().__init__(message, status.HTTP_401_UNAUTHORIZED)
        self.headers = {"WWW-Authenticate": "Bearer"}


class ForbiddenError(PluginAPIError):
    """Raised when the caller lacks the required capability"""
    code = "rest_forbidden"

    def __init__(self, message: str = "Sorry, you do not have access to this resource"):
        super().__init__(message, status.HTTP_403_FORBIDDEN)


class NotFoundError(PluginAPIError):
    """Raised when a slug does not resolve to an installed plugin"""
    code = "rest_post_invalid_id"

    def __init__(self, message: str = "Invalid plugin id."):
        super().__init__(message, status.HTTP_404_NOT_FOUND)


class PackageUnavailableError(PluginAPIError):
    """Raised when no remote package exists and the plugin directory is missing"""
    code = "rest_plugin_package_download_error"

    def __init__(self, plugin_name: str):
        super().__init__(
            f'Sorry, plugin package for "{plugin_name}" cannot be downloaded.',
            status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
        self.plugin_name = plugin_name


class ArchiveOpenError(PluginAPIError):
    """Raised when the package archive cannot be created"""
    code = "rest_plugin_package_archive_error"

    def __init__(self, archive_path: str, reason: str = ""):
        message = f"Cannot open <{archive_path}>"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.archive_path = archive_path
