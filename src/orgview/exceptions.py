"""Custom exceptions for orgview."""


class OrgviewError(Exception):
    """Base exception for orgview operations."""


class ParseError(OrgviewError):
    """Error while parsing source markup."""


class SerializationError(OrgviewError):
    """Render tree contains a node kind the serializer cannot emit."""


class ProtocolError(OrgviewError):
    """Malformed or unknown host/view message."""


class WorkspaceError(OrgviewError):
    """Requested path resolves outside the workspace root."""
