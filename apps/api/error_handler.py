"""
Error handling utilities for FamilyBoard API.
Provides standardized error logging and response formatting.
"""
import logging
from typing import Any, Dict, Optional

from fastapi import HTTPException

logger = logging.getLogger(__name__)


class StoreNotInitializedError(RuntimeError):
    """Raised when the shopping list store is used before it has been loaded."""


class APIError:
    """Standardized API error handler."""

    @staticmethod
    def _context(
        operation: str,
        household: Optional[str],
        extra_context: Optional[Dict[str, Any]],
    ) -> Dict[str, Any]:
        return {
            "operation": operation,
            "household": household,
            **(extra_context or {}),
        }

    @staticmethod
    def handle_database_error(
        operation: str,
        error: Exception,
        household: Optional[str] = None,
        extra_context: Optional[Dict[str, Any]] = None,
    ) -> HTTPException:
        """
        Handle database errors with detailed logging.

        Args:
            operation: Description of the database operation
            error: The exception that occurred
            household: Optional household storage key for context
            extra_context: Additional context to log

        Returns:
            HTTPException with appropriate status code
        """
        logger.error(
            f"Database error during {operation}: {str(error)}",
            extra=APIError._context(operation, household, extra_context),
            exc_info=True,
        )

        return HTTPException(
            status_code=500,
            detail=f"Database error during {operation}",
        )

    @staticmethod
    def log_operation_start(
        operation: str,
        household: Optional[str] = None,
        extra_context: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Log the start of an operation."""
        logger.debug(
            f"Starting operation: {operation}",
            extra=APIError._context(operation, household, extra_context),
        )

    @staticmethod
    def log_operation_success(
        operation: str,
        household: Optional[str] = None,
        extra_context: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Log successful operation completion."""
        logger.info(
            f"Operation successful: {operation}",
            extra=APIError._context(operation, household, extra_context),
        )
