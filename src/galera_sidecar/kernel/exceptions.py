"""Unified exception hierarchy for the Galera sidecar.

All sidecar exceptions inherit from SidecarException, so a caller can catch
one type to handle every classified failure, or a specific subclass for
targeted handling.

Categories:
- LifecycleException: terminal outcomes of a lifecycle operation, one
  subclass per failure class reported to the caller
- InfrastructureException: adapter-level failures (supervisor, readiness
  endpoint, marker file, configuration)
"""

from __future__ import annotations


# =============================================================================
# Base Exception
# =============================================================================


class SidecarException(Exception):
    """Base exception for all sidecar errors.

    Carries a machine-readable error code and a context dict with enough
    state (service name, observed status, response code) to diagnose the
    failure without re-deriving it.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "PROCESS_NOT_RUNNING").
        context: Arbitrary key-value pairs for error context and debugging.
    """

    code: str | None = None

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        if code is not None:
            self.code = code
        self.context: dict = context if context is not None else {}


# =============================================================================
# Lifecycle Exceptions
# =============================================================================


class LifecycleException(SidecarException):
    """A lifecycle operation ended in a classified failure."""


class InvalidIntentException(LifecycleException):
    """The intent is not allowed for this service role (arbitrator bootstrap)."""

    code = "INVALID_INTENT"


class PersistenceFailureException(LifecycleException):
    """The declared state marker could not be written; nothing was started."""

    code = "PERSISTENCE_FAILURE"


class SupervisorFailureException(LifecycleException):
    """The supervisor rejected or failed a start/stop command."""

    code = "SUPERVISOR_FAILURE"


class StatusQueryFailedException(LifecycleException):
    """The supervisor status could not be obtained."""

    code = "STATUS_QUERY_FAILED"


class ProcessNotRunningException(LifecycleException):
    """The supervisor reported the process is not running during startup."""

    code = "PROCESS_NOT_RUNNING"


class ReadinessRejectedException(LifecycleException):
    """The readiness endpoint answered with a non-success status."""

    code = "READINESS_REJECTED"


class WaitCancelledException(LifecycleException):
    """The readiness wait was cancelled by the caller."""

    code = "CANCELLED"


class ReadinessTimeoutException(LifecycleException):
    """The readiness wait exceeded its configured maximum duration."""

    code = "TIMEOUT"


# =============================================================================
# Infrastructure Exceptions
# =============================================================================


class InfrastructureException(SidecarException):
    """Adapter failures: supervisor, readiness endpoint, filesystem, config."""


class SupervisorException(InfrastructureException):
    """The process supervisor could not be reached or returned an error."""

    code = "SUPERVISOR_ERROR"


class ReadinessUnreachableException(InfrastructureException):
    """The readiness endpoint could not be reached (refused, timed out)."""

    code = "READINESS_UNREACHABLE"


class StateStoreException(InfrastructureException):
    """The declared state marker could not be persisted."""

    code = "STATE_STORE_ERROR"


class ConfigurationException(InfrastructureException):
    """Configuration is missing or invalid."""

    code = "CONFIGURATION_ERROR"
